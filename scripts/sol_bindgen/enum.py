"""
Enum binding generation module

Generates new_enum registrations.
"""

from .codegen import CodeGen, SCOPE_SEP, normalize_whitespace, quoted
from .records import ExportRecord


class EnumGenerator:
    """Generates enum bindings"""

    def generate(self, enum: ExportRecord, namespace_handle: str, gen: CodeGen):
        """Generate a new_enum call, one "Name", Enum::Name pair per value"""
        lua_name = quoted(enum.lua_name)
        values = self.value_names(enum)
        if not values:
            gen.line(f'{namespace_handle}.new_enum({lua_name});')
            return

        qualified = enum.qualified()
        gen.line(f'{namespace_handle}.new_enum({lua_name},')
        gen.indent()
        for i, value in enumerate(values):
            suffix = ',' if i < len(values) - 1 else ''
            gen.line(f'{quoted(value)}, {qualified}{SCOPE_SEP}{value}{suffix}')
        gen.dedent()
        gen.line(');')

    @staticmethod
    def value_names(enum: ExportRecord) -> list[str]:
        """Enumerator identifiers, dropping explicit initializers ('Red = 1' -> 'Red')"""
        names = []
        for value in enum.enum_values:
            name = normalize_whitespace(value.split('=', 1)[0])
            if name and name not in names:
                names.append(name)
        return names
