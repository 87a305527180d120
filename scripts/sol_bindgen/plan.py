"""
Class binding plan module

Turns one class record and its members into the ordered list of bindings
the usertype registration will carry.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from .batching import BindingEntry, UsertypeLayout
from .constructors import ConstructorSynthesizer, EMPTY_CONSTRUCTORS
from .members import MemberAggregator
from .operators import OperatorMapper
from .properties import PropertyAccessorSynthesizer
from .records import ClassFlavor, ExportRecord

logger = logging.getLogger(__name__)

SINGLETON_ACCESSOR = 'getInstance'


@dataclass
class ClassBindingPlan:
    """Per-class aggregate built fresh for every generation pass"""
    record: ExportRecord
    cpp_type: str
    lua_name: str
    constructors: str = EMPTY_CONSTRUCTORS
    inheritance: Optional[str] = None
    methods: list[BindingEntry] = field(default_factory=list)
    static_methods: list[BindingEntry] = field(default_factory=list)
    properties: list[BindingEntry] = field(default_factory=list)
    operators: list[BindingEntry] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    duplicates: int = 0
    inherited: int = 0
    dropped_operators: int = 0

    @property
    def flavor(self) -> ClassFlavor:
        return self.record.flavor

    @property
    def entries(self) -> list[BindingEntry]:
        """Member bindings in emission order"""
        return self.methods + self.static_methods + self.properties + self.operators

    def layout(self, namespace_handle: str) -> UsertypeLayout:
        return UsertypeLayout(
            namespace_handle=namespace_handle,
            cpp_type=self.cpp_type,
            lua_name=self.lua_name,
            constructors=self.constructors,
            inheritance=self.inheritance,
            entries=self.entries,
        )


class ClassPlanBuilder:
    """Builds ClassBindingPlan objects from aggregated members"""

    def __init__(self, aggregator: MemberAggregator, emit_inheritance: bool = False):
        self.aggregator = aggregator
        self.emit_inheritance = emit_inheritance
        self.constructors = ConstructorSynthesizer()
        self.properties = PropertyAccessorSynthesizer()
        self.operators = OperatorMapper()

    def build(self, record: ExportRecord) -> ClassBindingPlan:
        members = self.aggregator.collect(record)
        cpp_type = record.qualified()
        plan = ClassBindingPlan(
            record=record,
            cpp_type=cpp_type,
            lua_name=record.lua_name,
            duplicates=members.duplicates,
            inherited=members.inherited,
        )

        if record.flavor is ClassFlavor.STATIC:
            # plain table: static functions only
            plan.static_methods = [self._function_entry(m) for m in members.static_methods]
            return plan

        if record.flavor is not ClassFlavor.ABSTRACT:
            plan.constructors = self.constructors.declarator(cpp_type, members.constructors)
        plan.inheritance = self._inheritance(record)

        plan.methods = [self._function_entry(m) for m in members.methods]
        plan.static_methods = [self._function_entry(m) for m in members.static_methods]
        if record.flavor is ClassFlavor.SINGLETON:
            self._add_singleton_accessor(plan, members.methods + members.static_methods)

        for prop in members.properties:
            accessor = self.properties.synthesize(prop)
            plan.properties.append(BindingEntry.named(accessor.lua_name, accessor.value))
            if accessor.setter_derived:
                plan.warnings.append(
                    f"property '{plan.lua_name}.{accessor.lua_name}': setter "
                    f"'{accessor.setter}' derived from naming convention, not verified")

        for op in members.operators:
            meta = self.operators.map(op.name)
            if meta is None:
                plan.dropped_operators += 1
                logger.debug(f'{plan.lua_name}: no meta function for {op.name}')
                continue
            plan.operators.append(BindingEntry(meta, f'&{op.qualified()}'))

        return plan

    @staticmethod
    def _function_entry(record: ExportRecord) -> BindingEntry:
        return BindingEntry.named(record.lua_name, f'&{record.qualified()}')

    @staticmethod
    def _add_singleton_accessor(plan: ClassBindingPlan, declared: list[ExportRecord]):
        if any(m.lua_name == SINGLETON_ACCESSOR for m in declared):
            return
        accessor = BindingEntry.named(SINGLETON_ACCESSOR, f'&{plan.cpp_type}::{SINGLETON_ACCESSOR}')
        plan.static_methods.insert(0, accessor)

    def _inheritance(self, record: ExportRecord) -> Optional[str]:
        """sol::bases<...> over exported bases only; None unless enabled"""
        if not self.emit_inheritance:
            return None
        bases = [base.qualified() for base in self.aggregator.exported_bases(record)]
        if not bases:
            return None
        return f"sol::base_classes, sol::bases<{', '.join(bases)}>()"
