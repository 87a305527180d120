"""
Member aggregation module

Groups member records under their owning class, drops duplicate
declarations (first occurrence wins) and pulls in the public methods of base
classes that are not themselves exported.
"""

from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator, Optional
import logging

from .codegen import SCOPE_SEP, last_segment, split_scope
from .records import ExportRecord, RecordKind

logger = logging.getLogger(__name__)

MEMBER_KINDS = (
    RecordKind.CONSTRUCTOR, RecordKind.METHOD, RecordKind.STATIC_METHOD,
    RecordKind.PROPERTY, RecordKind.OPERATOR,
)


class OrderedRecordSet:
    """Insertion-ordered set of records keyed by ExportRecord.signature"""

    def __init__(self, records: Iterable[ExportRecord] = ()):
        self._items: dict[tuple, ExportRecord] = {}
        self.dropped = 0
        for record in records:
            self.add(record)

    def add(self, record: ExportRecord) -> bool:
        """Add a record; returns False (and keeps the earlier one) for a duplicate"""
        key = record.signature
        if key in self._items:
            self.dropped += 1
            return False
        self._items[key] = record
        return True

    def __contains__(self, record: ExportRecord) -> bool:
        return record.signature in self._items

    def __iter__(self) -> Iterator[ExportRecord]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)


@dataclass
class ClassMembers:
    """Deduplicated members of one class, partitioned by kind"""
    constructors: list[ExportRecord] = field(default_factory=list)
    methods: list[ExportRecord] = field(default_factory=list)
    static_methods: list[ExportRecord] = field(default_factory=list)
    properties: list[ExportRecord] = field(default_factory=list)
    operators: list[ExportRecord] = field(default_factory=list)
    duplicates: int = 0
    inherited: int = 0


def is_operator_name(name: str) -> bool:
    """operator+, 'operator []' and friends; operatorCount or operator_id are plain names"""
    rest = name[len('operator'):]
    if not name.startswith('operator') or not rest:
        return False
    return not (rest[0].isalnum() or rest[0] == '_')


def scoped_name(name: str) -> str:
    """'a.b' and 'a::b' spellings of a class name compare equal"""
    return SCOPE_SEP.join(split_scope(name))


def enclosing_scope(name: str) -> str:
    parts = split_scope(name)
    return SCOPE_SEP.join(parts[:-1])


class MemberAggregator:
    """Owner-class lookup over one module's validated records

    Classes are keyed by their qualified name. A member's owner is matched
    against that name first, then through the scope it was declared in, and
    by short name only when exactly one class carries it.
    """

    def __init__(self, records: list[ExportRecord]):
        self._classes: dict[str, ExportRecord] = {}
        self._short_names: dict[str, list[str]] = {}
        self._members: dict[str, list[ExportRecord]] = {}
        for record in records:
            if record.kind is RecordKind.CLASS:
                key = self.class_key(record)
                if key not in self._classes:
                    self._classes[key] = record
                    self._short_names.setdefault(last_segment(key), []).append(key)
        for record in records:
            if record.kind in MEMBER_KINDS and record.owner_class:
                self._members.setdefault(self.owner_key(record), []).append(record)

    @staticmethod
    def class_key(record: ExportRecord) -> str:
        return scoped_name(record.qualified())

    def resolve(self, name: str, scope: str = '') -> Optional[str]:
        """Key of the class a (possibly unqualified) name refers to from scope"""
        name = scoped_name(name)
        if name in self._classes:
            return name
        parts = split_scope(scope)
        while parts:
            candidate = SCOPE_SEP.join(parts + [name])
            if candidate in self._classes:
                return candidate
            parts.pop()
        if SCOPE_SEP not in name:
            matches = self._short_names.get(name, [])
            if len(matches) == 1:
                return matches[0]
        return None

    def owner_key(self, member: ExportRecord) -> str:
        """Key of the class owning a member; the raw owner name when no class matches"""
        owner = scoped_name(member.owner_class)
        if SCOPE_SEP in member.qualified_name:
            prefix = scoped_name(enclosing_scope(member.qualified_name))
            if last_segment(prefix) == last_segment(owner) and prefix in self._classes:
                return prefix
        return self.resolve(owner, member.namespace_hint) or owner

    def class_record(self, name: str, scope: str = '') -> Optional[ExportRecord]:
        key = self.resolve(name, scope)
        return self._classes.get(key) if key else None

    def is_exported(self, class_name: str, scope: str = '') -> bool:
        """True when the class has its own Class record marked as exported"""
        record = self.class_record(class_name, scope)
        return record is not None and record.exported

    def exported_bases(self, class_record: ExportRecord) -> list[ExportRecord]:
        """Direct bases that are exported classes themselves, in declaration order"""
        scope = enclosing_scope(self.class_key(class_record))
        bases = []
        for base in class_record.base_classes:
            record = self.class_record(base, scope)
            if record is not None and record.exported:
                bases.append(record)
        return bases

    def collect(self, class_record: ExportRecord) -> ClassMembers:
        """Members of a class, own declarations first, then flattened base methods"""
        key = self.class_key(class_record)
        own = self._members.get(key, [])
        # overloads share a signature; ConstructorSynthesizer dedups them by parameter list
        constructors = [r for r in own if r.kind is RecordKind.CONSTRUCTOR]
        unique = OrderedRecordSet(r for r in own if r.kind is not RecordKind.CONSTRUCTOR)
        duplicates = unique.dropped
        inherited = 0
        declared = {r.name for r in unique}
        for record in self._inherited_methods(class_record, class_record.base_classes,
                                             enclosing_scope(key), {key}):
            # a derived declaration hides every base overload of that name
            if record.name not in declared and unique.add(record):
                inherited += 1

        members = ClassMembers(constructors=constructors, duplicates=duplicates, inherited=inherited)
        for record in unique:
            self._partition(record, members)
        if duplicates:
            logger.debug(f'{class_record.name}: dropped {duplicates} duplicate member(s)')
        return members

    def orphans(self) -> list[ExportRecord]:
        """Member records whose owner is neither an exported class nor an ancestor of one"""
        known = set()
        pending = [key for key, record in self._classes.items() if record.exported]
        while pending:
            key = pending.pop()
            if key in known:
                continue
            known.add(key)
            record = self._classes.get(key)
            if record is None:
                continue
            scope = enclosing_scope(key)
            for base in record.base_classes:
                pending.append(self.resolve(base, scope) or scoped_name(base))

        result = []
        for owner, records in self._members.items():
            if owner not in known:
                result.extend(records)
        return result

    def _partition(self, record: ExportRecord, members: ClassMembers):
        kind = record.kind
        if kind is RecordKind.STATIC_METHOD:
            members.static_methods.append(record)
        elif kind is RecordKind.OPERATOR:
            members.operators.append(record)
        elif kind is RecordKind.PROPERTY:
            members.properties.append(record)
        elif is_operator_name(record.name):
            members.operators.append(record)
        elif record.is_static:
            members.static_methods.append(record)
        else:
            members.methods.append(record)

    def _inherited_methods(self, derived: ExportRecord, bases: list[str], scope: str,
                           visited: set[str]) -> Iterator[ExportRecord]:
        """Public instance methods of unexported ancestors, requalified under derived"""
        derived_qualified = derived.qualified()
        for base in bases:
            key = self.resolve(base, scope) or scoped_name(base)
            if key in visited:
                continue
            visited.add(key)
            base_record = self._classes.get(key)
            if base_record is not None and base_record.exported:
                # reachable through the runtime's own inheritance instead
                continue

            for record in self._members.get(key, []):
                if not self._is_flattenable(record, last_segment(key)):
                    continue
                yield replace(
                    record,
                    owner_class=derived.name,
                    qualified_name=derived_qualified + SCOPE_SEP + record.name,
                    namespace_hint='',
                    attributes={**record.attributes, 'inherited_from': key},
                )

            if base_record is not None:
                yield from self._inherited_methods(derived, base_record.base_classes,
                                                   enclosing_scope(key), visited)

    @staticmethod
    def _is_flattenable(record: ExportRecord, owner: str) -> bool:
        if record.kind is not RecordKind.METHOD or record.is_static:
            return False
        if record.name == owner or record.name.startswith('~') or is_operator_name(record.name):
            return False
        if record.attributes.get('access', 'public') in ('private', 'protected'):
            return False
        return record.attributes.get('deleted') != 'true'
