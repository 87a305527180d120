"""
Container binding module

Self-contained usertypes for STL container instantiations, and the friendly
Lua names they are registered under.
"""

import re
from typing import Optional

from .batching import BindingEntry, UsertypeLayout
from .codegen import SCOPE_SEP, capitalize_first, normalize_whitespace
from .records import ContainerKind, ExportRecord

# Spellings with a fixed short form; anything else is built from its scope segments
FRIENDLY_NAMES = {
    'int': 'Int',
    'double': 'Double',
    'float': 'Float',
    'char': 'Char',
    'bool': 'Bool',
    'size_t': 'SizeT',
    'int8_t': 'Int8',
    'uint8_t': 'Uint8',
    'int16_t': 'Int16',
    'uint16_t': 'Uint16',
    'int32_t': 'Int32',
    'uint32_t': 'Uint32',
    'int64_t': 'Int64',
    'uint64_t': 'Uint64',
    'string': 'String',
}

_PLAIN_TYPE_RE = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*(::[A-Za-z_][A-Za-z0-9_]*)*$')
_GENERIC_SEPARATORS = str.maketrans({':': '_', '<': '_', '>': '_', ' ': '_', ',': '_'})


def friendly_type_name(type_name: str) -> str:
    """Display form of a type spelling

    Examples:
        int -> Int
        std::string -> StdString
        game::Item -> GameItem
    """
    type_name = normalize_whitespace(type_name)
    if type_name in FRIENDLY_NAMES:
        return FRIENDLY_NAMES[type_name]
    friendly = ''.join(capitalize_first(part) for part in type_name.split(SCOPE_SEP) if part)
    return friendly or capitalize_first(type_name)


def generic_container_name(kind: str, raw_types: str) -> str:
    """Fallback name: Set_int, Map_std__string, ..."""
    return capitalize_first(kind) + '_' + raw_types.translate(_GENERIC_SEPARATORS)


def container_kind_of(record: ExportRecord) -> Optional[ContainerKind]:
    """Declared container kind, else the one spelled in type_name"""
    if record.container_kind is not None:
        return record.container_kind
    match = re.match(r'^(?:std::)?(\w+)\s*<', record.type_name)
    if match:
        try:
            return ContainerKind(match.group(1))
        except ValueError:
            return None
    return None


class ContainerBindingSynthesizer:
    """Builds container usertype layouts"""

    def display_name(self, record: ExportRecord) -> str:
        alias = record.alias_name or record.attributes.get('alias', '')
        if alias:
            return alias

        kind = container_kind_of(record)
        elements = [normalize_whitespace(t) for t in record.container_element_types]
        plain = all(_PLAIN_TYPE_RE.match(t) for t in elements)
        if kind is not None and plain:
            if kind.family == 'sequence' and len(elements) == 1:
                return friendly_type_name(elements[0]) + 'Vector'
            if kind.family == 'associative' and len(elements) == 2:
                return friendly_type_name(elements[0]) + friendly_type_name(elements[1]) + 'Map'

        kind_text = kind.value if kind is not None else 'container'
        return generic_container_name(kind_text, ','.join(record.container_element_types))

    def cpp_type(self, record: ExportRecord) -> str:
        if record.type_name:
            return normalize_whitespace(record.type_name)
        kind = container_kind_of(record)
        elements = ', '.join(normalize_whitespace(t) for t in record.container_element_types)
        return f'std::{kind.value}<{elements}>'

    def layout(self, record: ExportRecord, namespace_handle: str,
               lua_name: Optional[str] = None) -> Optional[UsertypeLayout]:
        """Usertype layout for a container, or None when its shape is unusable"""
        kind = container_kind_of(record)
        if kind is None:
            return None
        elements = [normalize_whitespace(t) for t in record.container_element_types]
        family = kind.family
        if family == 'associative':
            if len(elements) != 2:
                return None
        elif len(elements) != 1:
            return None

        cpp_type = self.cpp_type(record)
        if family == 'sequence':
            entries = self._sequence_entries(cpp_type, elements[0])
        elif family == 'list':
            entries = self._list_entries(cpp_type, elements[0])
        elif family == 'associative':
            entries = self._associative_entries(cpp_type, elements[0], elements[1])
        else:
            entries = self._set_entries(cpp_type, elements[0])

        return UsertypeLayout(
            namespace_handle=namespace_handle,
            cpp_type=cpp_type,
            lua_name=lua_name or self.display_name(record),
            constructors=f'sol::constructors<{cpp_type}()>()',
            entries=entries,
        )

    @staticmethod
    def _common_entries(t: str) -> list[BindingEntry]:
        return [
            BindingEntry.named('size', f'[](const {t}& self) {{ return self.size(); }}'),
            BindingEntry.named('empty', f'[](const {t}& self) {{ return self.empty(); }}'),
            BindingEntry.named('clear', f'[]({t}& self) {{ self.clear(); }}'),
        ]

    def _sequence_entries(self, t: str, e: str) -> list[BindingEntry]:
        return self._common_entries(t) + [
            BindingEntry.named('get', f'[](const {t}& self, size_t index) -> sol::optional<{e}> '
                                      f'{{ if (index < self.size()) return self[index]; return sol::nullopt; }}'),
            BindingEntry.named('set', f'[]({t}& self, size_t index, const {e}& value) '
                                      f'{{ if (index < self.size()) self[index] = value; }}'),
            BindingEntry.named('front', f'[](const {t}& self) -> sol::optional<{e}> '
                                        f'{{ if (!self.empty()) return self.front(); return sol::nullopt; }}'),
            BindingEntry.named('back', f'[](const {t}& self) -> sol::optional<{e}> '
                                       f'{{ if (!self.empty()) return self.back(); return sol::nullopt; }}'),
            BindingEntry.named('insert', f'[]({t}& self, size_t index, const {e}& item) '
                                         f'{{ if (index <= self.size()) self.insert(self.begin() + index, item); }}'),
            BindingEntry.named('erase', f'[]({t}& self, size_t index) '
                                        f'{{ if (index < self.size()) self.erase(self.begin() + index); }}'),
            BindingEntry.named('resize', f'[]({t}& self, size_t size) {{ self.resize(size); }}'),
            BindingEntry.named('reserve', f'[]({t}& self, size_t capacity) {{ self.reserve(capacity); }}'),
            BindingEntry.named('capacity', f'[](const {t}& self) {{ return self.capacity(); }}'),
            BindingEntry.named('push_back', f'[]({t}& self, const {e}& item) {{ self.push_back(item); }}'),
            BindingEntry.named('pop_back', f'[]({t}& self) {{ if (!self.empty()) self.pop_back(); }}'),
            BindingEntry.named('to_table', f'[](const {t}& self, sol::this_state s) '
                                           f'{{ sol::state_view lua(s); sol::table result = lua.create_table(); '
                                           f'for (size_t i = 0; i < self.size(); ++i) result[i + 1] = self[i]; '
                                           f'return result; }}'),
        ]

    def _list_entries(self, t: str, e: str) -> list[BindingEntry]:
        return self._common_entries(t) + [
            BindingEntry.named('push_back', f'[]({t}& self, const {e}& item) {{ self.push_back(item); }}'),
            BindingEntry.named('pop_back', f'[]({t}& self) {{ if (!self.empty()) self.pop_back(); }}'),
            BindingEntry.named('push_front', f'[]({t}& self, const {e}& item) {{ self.push_front(item); }}'),
            BindingEntry.named('pop_front', f'[]({t}& self) {{ if (!self.empty()) self.pop_front(); }}'),
            BindingEntry.named('front', f'[](const {t}& self) -> sol::optional<{e}> '
                                        f'{{ if (!self.empty()) return self.front(); return sol::nullopt; }}'),
            BindingEntry.named('back', f'[](const {t}& self) -> sol::optional<{e}> '
                                       f'{{ if (!self.empty()) return self.back(); return sol::nullopt; }}'),
            BindingEntry.named('to_table', f'[](const {t}& self, sol::this_state s) '
                                           f'{{ sol::state_view lua(s); sol::table result = lua.create_table(); '
                                           f'size_t i = 1; for (const auto& item : self) result[i++] = item; '
                                           f'return result; }}'),
        ]

    def _associative_entries(self, t: str, k: str, v: str) -> list[BindingEntry]:
        return self._common_entries(t) + [
            BindingEntry.named('get', f'[](const {t}& self, const {k}& key) -> sol::optional<{v}> '
                                      f'{{ auto it = self.find(key); if (it != self.end()) return it->second; '
                                      f'return sol::nullopt; }}'),
            BindingEntry.named('set', f'[]({t}& self, const {k}& key, const {v}& value) {{ self[key] = value; }}'),
            BindingEntry.named('has', f'[](const {t}& self, const {k}& key) {{ return self.find(key) != self.end(); }}'),
            BindingEntry.named('erase', f'[]({t}& self, const {k}& key) {{ return self.erase(key) > 0; }}'),
            BindingEntry.named('keys', f'[](const {t}& self) {{ std::vector<{k}> result; '
                                       f'for (const auto& pair : self) result.push_back(pair.first); return result; }}'),
            BindingEntry.named('values', f'[](const {t}& self) {{ std::vector<{v}> result; '
                                         f'for (const auto& pair : self) result.push_back(pair.second); return result; }}'),
        ]

    def _set_entries(self, t: str, e: str) -> list[BindingEntry]:
        return self._common_entries(t) + [
            BindingEntry.named('insert', f'[]({t}& self, const {e}& item) {{ return self.insert(item).second; }}'),
            BindingEntry.named('erase', f'[]({t}& self, const {e}& item) {{ return self.erase(item) > 0; }}'),
            BindingEntry.named('has', f'[](const {t}& self, const {e}& item) {{ return self.find(item) != self.end(); }}'),
            BindingEntry.named('to_vector', f'[](const {t}& self) {{ return std::vector<{e}>(self.begin(), self.end()); }}'),
        ]
