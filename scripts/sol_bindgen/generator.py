"""
Main generator module

Orchestrates all components to turn one module's export records into a
single C++ registration source file.
"""

from collections import Counter
from dataclasses import dataclass, field, fields
from typing import Optional
import json
import logging
import os
import re

from .batching import ArgumentBudgetBatcher, TWO_PHASE
from .codegen import CodeGen, as_identifier, quoted
from .containers import ContainerBindingSynthesizer
from .enum import EnumGenerator
from .errors import StructuralError
from .func import FuncGenerator, is_module_marker
from .members import MEMBER_KINDS, MemberAggregator, OrderedRecordSet
from .namespaces import NamespaceResolver, NamespaceTable
from .plan import ClassPlanBuilder
from .records import ClassFlavor, ExportRecord, GLOBAL_NAMESPACE, RecordKind, validate_record

logger = logging.getLogger(__name__)

TOOL_NAME = 'sol_bindgen'


@dataclass
class GenerationOptions:
    """Settings for one generator instance"""
    output_directory: str = 'generated_bindings'
    generate_includes: bool = True
    generate_registration_function: bool = True
    indent_size: int = 4
    emit_inheritance: bool = False

    @classmethod
    def load(cls, json_path: str) -> 'GenerationOptions':
        """Load options from a JSON file"""
        with open(json_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'GenerationOptions':
        """Create options from a dictionary; unknown keys and wrong types are ValueErrors"""
        if not isinstance(data, dict):
            raise ValueError(f'generation options must be an object, got {type(data).__name__}')
        defaults = {f.name: f.default for f in fields(cls)}
        unknown = sorted(set(data) - set(defaults))
        if unknown:
            raise ValueError(f"unknown generation option(s): {', '.join(unknown)}")
        for name, value in data.items():
            expected = type(defaults[name])
            # bool is an int subclass, so compare exact types
            if type(value) is not expected:
                raise ValueError(f"option '{name}' must be {expected.__name__}, got {type(value).__name__}")
        if data.get('indent_size', 0) < 0:
            raise ValueError("option 'indent_size' must not be negative")
        return cls(**data)


@dataclass
class GenerationStats:
    """Counters for one generation pass"""
    records_received: int = 0
    records_rejected: int = 0
    duplicates_dropped: int = 0
    operators_dropped: int = 0
    inherited_methods: int = 0
    two_phase_classes: int = 0
    kinds: Counter = field(default_factory=Counter)


@dataclass
class GenerationResult:
    """Output of one generation pass; partial success is allowed"""
    generated_code: str = ''
    total_bindings: int = 0
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    success: bool = False
    stats: GenerationStats = field(default_factory=GenerationStats)
    output_path: Optional[str] = None


@dataclass
class _Pass:
    """State owned by a single generate_module() call"""
    module_name: str
    result: GenerationResult
    namespaces: NamespaceTable = field(default_factory=NamespaceTable)
    batcher: ArgumentBudgetBatcher = field(default_factory=ArgumentBudgetBatcher)
    resolved: dict[int, str] = field(default_factory=dict)
    container_names: set[str] = field(default_factory=set)


def registration_function_name(module_name: str) -> str:
    return f'register_{as_identifier(module_name)}_bindings'


class Generator:
    """Module assembler: records in, one registration source out"""

    def __init__(self, options: Optional[GenerationOptions] = None):
        self.options = options or GenerationOptions()
        self.resolver = NamespaceResolver()
        self.func_gen = FuncGenerator()
        self.enum_gen = EnumGenerator()
        self.container_gen = ContainerBindingSynthesizer()

    def generate_module(self, module_name: str, records: list[ExportRecord]) -> GenerationResult:
        """Run one generation pass"""
        result = GenerationResult()
        result.stats.records_received = len(records)
        logger.info(f'{module_name}: generating from {len(records)} records')

        valid = self._validate(records, result)
        state = _Pass(module_name=module_name, result=result)
        try:
            result.generated_code = self._generate(state, valid)
        except (StructuralError, MemoryError) as e:
            result.success = False
            result.errors.append(f'Generation failed: {e}')
            logger.error(f'{module_name}: generation failed: {e}')
            return result

        result.success = True
        logger.info(f'{module_name}: {result.total_bindings} bindings, '
                    f'{len(result.warnings)} warning(s), {len(result.errors)} error(s)')
        return result

    def generate_file(self, module_name: str, records: list[ExportRecord]) -> GenerationResult:
        """Run one pass and write <output_directory>/<module>_bindings.cpp on success"""
        result = self.generate_module(module_name, records)
        if not result.success:
            return result
        os.makedirs(self.options.output_directory, exist_ok=True)
        path = os.path.join(self.options.output_directory, f'{module_name}_bindings.cpp')
        with open(path, 'w', newline='\n') as f:
            f.write(result.generated_code)
        result.output_path = path
        return result

    def _validate(self, records: list[ExportRecord], result: GenerationResult) -> list[ExportRecord]:
        valid = []
        for index, record in enumerate(records):
            errors = validate_record(record)
            if errors:
                result.stats.records_rejected += 1
                result.errors.extend(f'record #{index}: {e}' for e in errors)
                continue
            result.stats.kinds[record.kind.value] += 1
            valid.append(record)
        return valid

    def _generate(self, state: _Pass, records: list[ExportRecord]) -> str:
        gen = CodeGen(self.options.indent_size)
        self._gen_file_header(state.module_name, gen)
        gen.line()
        if self.options.generate_includes:
            self._gen_includes(records, gen)
            gen.line()

        body = self._gen_bindings(state, records)
        if self.options.generate_registration_function:
            with gen.block(f'void {registration_function_name(state.module_name)}(sol::state& lua) {{'):
                gen.embed(body)
        else:
            gen.raw(body)
        gen.line()
        return gen.output()

    def _gen_file_header(self, module_name: str, gen: CodeGen):
        gen.block_comment([
            f'@file {module_name}_bindings.cpp',
            f'@brief Auto-generated Lua bindings for {module_name} module',
            '',
            f'This file is automatically generated by {TOOL_NAME}.',
            'Do not modify this file manually.',
        ])

    def _gen_includes(self, records: list[ExportRecord], gen: CodeGen):
        gen.line('#include <sol/sol.hpp>')
        headers = {re.split(r'[/\\]', r.source_file)[-1] for r in records if r.source_file}
        for header in sorted(headers):
            gen.line(f'#include {quoted(header)}')

    def _gen_bindings(self, state: _Pass, records: list[ExportRecord]) -> str:
        gen = CodeGen(self.options.indent_size)
        result = state.result
        aggregator = MemberAggregator(records)

        for orphan in aggregator.orphans():
            result.warnings.append(
                f"{orphan.kind.value} '{orphan.name}' has no exported owner class "
                f"'{orphan.owner_class}', skipped")

        for record in records:
            if record.kind in MEMBER_KINDS and not record.owner_class:
                result.warnings.append(f"{record.kind.value} '{record.name}' has no owner class, skipped")

        top_level = OrderedRecordSet(r for r in records if r.kind not in MEMBER_KINDS)
        result.stats.duplicates_dropped += top_level.dropped
        emitted = [r for r in top_level
                   if r.kind is not RecordKind.CLASS or r.exported]

        # namespaces first, in record order, so parents are declared before children;
        # members live in their class usertype and never open a table of their own
        for record in records:
            if record.kind in MEMBER_KINDS:
                continue
            if record.kind is RecordKind.CLASS and not record.exported:
                continue
            if record.kind is RecordKind.CONSTANT and is_module_marker(record):
                continue
            state.namespaces.get_handle(self._namespace_of(state, record))

        if state.namespaces.namespaces:
            state.namespaces.generate_declarations(gen)
            gen.line()

        by_kind: dict[RecordKind, list[ExportRecord]] = {}
        for record in emitted:
            by_kind.setdefault(record.kind, []).append(record)

        classes = by_kind.get(RecordKind.CLASS, [])
        if classes:
            gen.comment('Class bindings')
            builder = ClassPlanBuilder(aggregator, self.options.emit_inheritance)
            for record in classes:
                self._gen_class(state, builder, record, gen)
                gen.line()

        self._gen_grouped(state, by_kind.get(RecordKind.FUNCTION, []), 'function', gen)
        self._gen_grouped(state, [c for c in by_kind.get(RecordKind.CONSTANT, [])
                                  if not is_module_marker(c)], 'constant', gen)
        self._gen_grouped(state, by_kind.get(RecordKind.ENUM, []), 'enum', gen)

        containers = by_kind.get(RecordKind.CONTAINER, [])
        if containers:
            gen.comment('STL container bindings')
            for record in containers:
                self._gen_container(state, record, gen)

        return gen.output().rstrip('\n')

    def _namespace_of(self, state: _Pass, record: ExportRecord) -> str:
        key = id(record)
        if key not in state.resolved:
            state.resolved[key] = self.resolver.resolve(record)
        return state.resolved[key]

    def _handle_of(self, state: _Pass, record: ExportRecord) -> str:
        return state.namespaces.lookup(self._namespace_of(state, record))

    def _gen_class(self, state: _Pass, builder: ClassPlanBuilder, record: ExportRecord, gen: CodeGen):
        result = state.result
        plan = builder.build(record)
        handle = self._handle_of(state, record)

        result.warnings.extend(plan.warnings)
        result.stats.duplicates_dropped += plan.duplicates
        result.stats.inherited_methods += plan.inherited
        result.stats.operators_dropped += plan.dropped_operators

        if plan.flavor is ClassFlavor.STATIC:
            table = state.batcher.handle_name(plan.lua_name, '_table')
            gen.line(f'auto {table} = {handle}[{quoted(plan.lua_name)}].get_or_create<sol::table>();')
            for entry in plan.static_methods:
                gen.line(f'{table}[{entry.key}] = {entry.value};')
        else:
            strategy = state.batcher.generate(plan.layout(handle), gen)
            if strategy == TWO_PHASE:
                result.stats.two_phase_classes += 1
                logger.debug(f'{plan.lua_name}: registered in two phases')
        result.total_bindings += 1

    def _gen_grouped(self, state: _Pass, records: list[ExportRecord], kind: str, gen: CodeGen):
        """Functions, constants or enums, grouped by namespace in discovery order"""
        if not records:
            return
        gen.comment(f'{kind.capitalize()} bindings')
        groups: dict[str, list[ExportRecord]] = {}
        for record in records:
            groups.setdefault(self._namespace_of(state, record), []).append(record)

        for ns, group in groups.items():
            handle = state.namespaces.lookup(ns)
            if len(group) > 1:
                label = f'Global {kind}s' if ns == GLOBAL_NAMESPACE else f'{kind.capitalize()}s in namespace {ns}'
                gen.comment(label)
            for record in group:
                if kind == 'function':
                    self.func_gen.generate(record, handle, gen)
                elif kind == 'constant':
                    self.func_gen.generate_constant(record, handle, gen)
                else:
                    self.enum_gen.generate(record, handle, gen)
                state.result.total_bindings += 1
            if len(group) > 1:
                gen.line()

    def _gen_container(self, state: _Pass, record: ExportRecord, gen: CodeGen):
        result = state.result
        name = self.container_gen.display_name(record)
        if name in state.container_names:
            unique = name
            counter = 2
            while unique in state.container_names:
                unique = f'{name}{counter}'
                counter += 1
            result.warnings.append(f"container name '{name}' already used, registered as '{unique}'")
            name = unique

        layout = self.container_gen.layout(record, self._handle_of(state, record), name)
        if layout is None:
            result.warnings.append(f"container '{record.name}' has an unsupported shape, skipped")
            return
        state.container_names.add(name)
        state.batcher.generate(layout, gen)
        result.total_bindings += 1
