"""
Export record module

Normalized view of the declarations handed over by the source extractor,
and the JSON reader for the extractor's output file.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import json

from .codegen import SCOPE_SEP, split_scope

GLOBAL_NAMESPACE = 'global'


class RecordKind(str, Enum):
    """Declaration kinds understood by the generator"""

    CLASS = 'class'
    METHOD = 'method'
    STATIC_METHOD = 'static_method'
    CONSTRUCTOR = 'constructor'
    PROPERTY = 'property'
    FUNCTION = 'function'
    ENUM = 'enum'
    CONSTANT = 'constant'
    NAMESPACE = 'namespace'
    OPERATOR = 'operator'
    CONTAINER = 'container'


class PropertyAccess(str, Enum):
    NONE = 'none'
    READ_ONLY = 'readonly'
    READ_WRITE = 'readwrite'
    WRITE_ONLY = 'writeonly'


class ClassFlavor(str, Enum):
    """How a class is exposed: typed object, constructor-less, plain table or singleton"""

    REGULAR = 'regular'
    ABSTRACT = 'abstract'
    STATIC = 'static'
    SINGLETON = 'singleton'


class ContainerKind(str, Enum):
    VECTOR = 'vector'
    LIST = 'list'
    MAP = 'map'
    UNORDERED_MAP = 'unordered_map'
    SET = 'set'

    @property
    def family(self) -> str:
        """sequence, list, associative or set"""
        if self is ContainerKind.VECTOR:
            return 'sequence'
        if self in (ContainerKind.MAP, ContainerKind.UNORDERED_MAP):
            return 'associative'
        return self.value


@dataclass
class ExportRecord:
    """One extracted declaration destined for the scripting side"""
    kind: RecordKind
    name: str
    alias_name: str = ''
    qualified_name: str = ''
    owner_class: str = ''
    namespace_hint: str = ''
    parameter_types: list[str] = field(default_factory=list)
    return_type: str = ''
    is_static: bool = False
    is_const: bool = False
    base_classes: list[str] = field(default_factory=list)
    property_access: PropertyAccess = PropertyAccess.NONE
    attributes: dict[str, str] = field(default_factory=dict)
    enum_values: list[str] = field(default_factory=list)
    container_element_types: list[str] = field(default_factory=list)
    container_kind: Optional[ContainerKind] = None
    type_name: str = ''
    source_file: str = ''
    flavor: ClassFlavor = ClassFlavor.REGULAR
    exported: bool = True

    @property
    def lua_name(self) -> str:
        """Name visible from Lua: alias field, then alias attribute, then name"""
        return self.alias_name or self.attributes.get('alias', '') or self.name

    @property
    def signature(self) -> tuple[str, str, str, str]:
        """Deduplication key; equal keys describe the same declaration"""
        return (self.kind.value, self.name, self.qualified_name, self.owner_class)

    def qualified(self) -> str:
        """Fully qualified native name, built from the parts when not given"""
        if self.qualified_name:
            return self.qualified_name
        parts = []
        if self.namespace_hint and self.namespace_hint != GLOBAL_NAMESPACE:
            parts.extend(split_scope(self.namespace_hint))
        if self.owner_class:
            parts.append(self.owner_class)
        parts.append(self.name)
        return SCOPE_SEP.join(parts)


def validate_record(record: ExportRecord) -> list[str]:
    """Return the reasons a record cannot be bound (empty when it is usable)"""
    errors = []
    if not record.name:
        errors.append(f'{record.kind.value} record has empty name')
        return errors
    if record.kind in (RecordKind.METHOD, RecordKind.FUNCTION) and not record.return_type:
        errors.append(f"{record.kind.value} '{record.name}' has no return type")
    if record.kind is RecordKind.CONTAINER and not record.container_element_types:
        errors.append(f"container '{record.name}' has no element types")
    return errors


@dataclass
class RecordSet:
    """Ordered records of one module, as produced by the extractor"""
    module: str
    records: list[ExportRecord]
    errors: list[str] = field(default_factory=list)

    @classmethod
    def load(cls, json_path: str) -> 'RecordSet':
        """Load records from a JSON file"""
        with open(json_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'RecordSet':
        """Create a record set from a dictionary

        Malformed entries (unknown kind, wrong field shape) are not fatal:
        they are reported in ``errors`` and left out, like any other invalid
        record.
        """
        if not isinstance(data, dict):
            raise ValueError(f'records file must hold an object, got {type(data).__name__}')
        entries = _field(data, 'records', [])
        if not isinstance(entries, list):
            raise ValueError("'records' must be a list")
        records = []
        errors = []
        for index, entry in enumerate(entries):
            try:
                records.append(cls._parse_record(entry))
            except ValueError as e:
                errors.append(f'record #{index}: {e}')
        return cls(module=_field(data, 'module', ''), records=records, errors=errors)

    @staticmethod
    def _parse_record(entry: dict) -> ExportRecord:
        """Parse one record entry; JSON null reads as the field's default"""
        if not isinstance(entry, dict):
            raise ValueError(f'expected an object, got {type(entry).__name__}')
        attributes = _field(entry, 'attributes', {})
        if not isinstance(attributes, dict):
            raise ValueError("'attributes' must be an object")
        container_kind = _field(entry, 'container_kind', '')
        return ExportRecord(
            kind=RecordKind(_field(entry, 'kind', '')),
            name=_field(entry, 'name', ''),
            alias_name=_field(entry, 'alias_name', ''),
            qualified_name=_field(entry, 'qualified_name', ''),
            owner_class=_field(entry, 'owner_class', ''),
            namespace_hint=_field(entry, 'namespace_hint', ''),
            parameter_types=_names(entry, 'parameter_types'),
            return_type=_field(entry, 'return_type', ''),
            is_static=bool(_field(entry, 'is_static', False)),
            is_const=bool(_field(entry, 'is_const', False)),
            base_classes=_names(entry, 'base_classes'),
            property_access=PropertyAccess(_field(entry, 'property_access', 'none')),
            attributes={str(k): str(v) for k, v in attributes.items()},
            enum_values=_names(entry, 'enum_values'),
            container_element_types=_names(entry, 'container_element_types'),
            container_kind=ContainerKind(container_kind) if container_kind else None,
            type_name=_field(entry, 'type_name', ''),
            source_file=_field(entry, 'source_file', ''),
            flavor=ClassFlavor(_field(entry, 'flavor', 'regular')),
            exported=bool(_field(entry, 'exported', True)),
        )


def _field(entry: dict, key: str, default):
    value = entry.get(key)
    return default if value is None else value


def _names(entry: dict, key: str) -> list[str]:
    """List-of-strings field"""
    value = _field(entry, key, [])
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list")
    return [str(item) for item in value]
