"""
Namespace resolution module

Decides which Lua table a declaration lands in and hands out the C++ variable
that holds each table.
"""

import logging

from .codegen import CodeGen, SCOPE_SEP, split_scope, last_segment, as_identifier, quoted
from .errors import StructuralError
from .records import ExportRecord, GLOBAL_NAMESPACE

logger = logging.getLogger(__name__)

ROOT_HANDLE = 'lua'


def canonical_namespace(path: str) -> str:
    """Normalize 'a.b' and 'a::b' spellings to 'a::b'; empty maps to global"""
    parts = split_scope(path)
    if not parts:
        return GLOBAL_NAMESPACE
    return SCOPE_SEP.join(parts)


class NamespaceResolver:
    """Maps records to namespace paths

    Precedence, first match wins:
      1. explicit namespace hint (unless it is "global")
      2. prefix of the qualified name, when it is not just the owning class
      3. "namespace" attribute
      4. global
    """

    def resolve(self, record: ExportRecord) -> str:
        hint = record.namespace_hint
        if hint and hint != GLOBAL_NAMESPACE:
            return canonical_namespace(hint)

        derived = self._from_qualified_name(record)
        if derived:
            return derived

        attr = record.attributes.get('namespace', '')
        if attr and attr != GLOBAL_NAMESPACE:
            return canonical_namespace(attr)

        return GLOBAL_NAMESPACE

    def _from_qualified_name(self, record: ExportRecord) -> str:
        qualified = record.qualified_name
        pos = qualified.rfind(SCOPE_SEP)
        if pos <= 0:
            return ''
        prefix = qualified[:pos]
        if prefix in (record.name, record.owner_class):
            return ''
        if record.owner_class:
            # game::Player::getHealth lives in game, not in a table named Player
            owner = last_segment(record.owner_class)
            parts = split_scope(prefix)
            if parts and parts[-1] == owner:
                parts = parts[:-1]
                return SCOPE_SEP.join(parts)
        return canonical_namespace(prefix)


class NamespaceTable:
    """Namespace path -> handle variable, in first-discovery order"""

    def __init__(self):
        self._handles: dict[str, str] = {}
        self._used_ids: set[str] = set()
        self._order: list[str] = []

    def get_handle(self, path: str) -> str:
        """Handle for a path, allocating it (and its parents) on first use"""
        if path == GLOBAL_NAMESPACE:
            return ROOT_HANDLE
        if path in self._handles:
            return self._handles[path]

        parts = split_scope(path)
        if len(parts) > 1:
            self.get_handle(SCOPE_SEP.join(parts[:-1]))

        handle = as_identifier('_'.join(parts)) + '_ns'
        suffix = 2
        while handle in self._used_ids:
            handle = f"{as_identifier('_'.join(parts))}_ns{suffix}"
            suffix += 1

        self._handles[path] = handle
        self._used_ids.add(handle)
        self._order.append(path)
        logger.debug(f'namespace {path} -> {handle}')
        return handle

    def lookup(self, path: str) -> str:
        """Handle for an already discovered path"""
        if path == GLOBAL_NAMESPACE:
            return ROOT_HANDLE
        handle = self._handles.get(path)
        if handle is None:
            raise StructuralError(f"namespace '{path}' used before it was discovered")
        return handle

    @property
    def namespaces(self) -> list[str]:
        """Discovered (non-global) paths, parents before children"""
        return list(self._order)

    def generate_declarations(self, gen: CodeGen):
        """Emit one table creation per discovered namespace"""
        for path in self._order:
            parts = split_scope(path)
            parent = SCOPE_SEP.join(parts[:-1]) if len(parts) > 1 else GLOBAL_NAMESPACE
            parent_handle = self.lookup(parent)
            gen.line(f'auto {self._handles[path]} = '
                     f'{parent_handle}[{quoted(parts[-1])}].get_or_create<sol::table>();')

    def clear(self):
        self._handles.clear()
        self._used_ids.clear()
        self._order.clear()
