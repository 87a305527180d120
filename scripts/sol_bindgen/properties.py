"""
Property binding module

Resolves a property's access mode and, for read-write properties, the name
of the paired setter.
"""

from dataclasses import dataclass
from typing import Optional

from .codegen import SCOPE_SEP, capitalize_first
from .records import ExportRecord, PropertyAccess


@dataclass
class PropertyAccessor:
    """Resolved accessor for one property"""
    lua_name: str
    access: PropertyAccess
    getter: str
    setter: Optional[str] = None
    setter_derived: bool = False

    @property
    def value(self) -> str:
        """Right-hand side of the binding entry"""
        if self.access is PropertyAccess.READ_WRITE:
            return f'sol::property(&{self.getter}, &{self.setter})'
        if self.access is PropertyAccess.WRITE_ONLY:
            return f'sol::writeonly_property(&{self.getter})'
        return f'sol::readonly_property(&{self.getter})'


def setter_name_for(property_name: str) -> str:
    """Conventional setter name for a property

    Examples:
        getHealth -> setHealth
        health -> setHealth
        get -> setGet
    """
    if property_name.startswith('get') and len(property_name) > 3:
        return 'set' + property_name[3:]
    return 'set' + capitalize_first(property_name)


def resolve_access(prop: ExportRecord) -> PropertyAccess:
    """Attribute flag, then the extractor's access value, then read-only"""
    attrs = prop.attributes
    if attrs.get('readonly') == 'true':
        return PropertyAccess.READ_ONLY
    if attrs.get('readwrite') == 'true':
        return PropertyAccess.READ_WRITE
    if attrs.get('writeonly') == 'true':
        return PropertyAccess.WRITE_ONLY
    if prop.property_access is not PropertyAccess.NONE:
        return prop.property_access
    return PropertyAccess.READ_ONLY


class PropertyAccessorSynthesizer:
    """Builds accessor entries; setters are never checked for existence"""

    def synthesize(self, prop: ExportRecord) -> PropertyAccessor:
        access = resolve_access(prop)
        getter = prop.qualified()
        accessor = PropertyAccessor(lua_name=prop.lua_name, access=access, getter=getter)
        if access is not PropertyAccess.READ_WRITE:
            return accessor

        explicit = prop.attributes.get('setter', '')
        setter = explicit or setter_name_for(prop.name)
        if SCOPE_SEP not in setter:
            scope = getter.rsplit(SCOPE_SEP, 1)[0] if SCOPE_SEP in getter else ''
            setter = f'{scope}{SCOPE_SEP}{setter}' if scope else setter
        accessor.setter = setter
        accessor.setter_derived = not explicit
        return accessor
