"""
Function binding module

Free functions and constants are plain table assignments on their
namespace table.
"""

from .codegen import CodeGen, quoted
from .records import ExportRecord

MODULE_MARKER_PREFIX = '__lua_module_marker_'


def is_module_marker(record: ExportRecord) -> bool:
    """Constants the extractor plants to tag a module, never bound"""
    return record.name.startswith(MODULE_MARKER_PREFIX)


class FuncGenerator:
    """Generates function and constant bindings"""

    def generate(self, func: ExportRecord, namespace_handle: str, gen: CodeGen):
        gen.line(f'{namespace_handle}[{quoted(func.lua_name)}] = &{func.qualified()};')

    def generate_constant(self, const: ExportRecord, namespace_handle: str, gen: CodeGen):
        gen.line(f'{namespace_handle}[{quoted(const.lua_name)}] = {const.qualified()};')
