"""
Code generation utilities

Indentation-aware line emission for the generated C++ registration code,
plus the small string helpers shared by the synthesizers.
"""

import re

SCOPE_SEP = '::'

_WS_RE = re.compile(r'\s+')
_IDENT_RE = re.compile(r'[^0-9A-Za-z_]')


class CodeGen:
    """Code generation helper with indentation support"""

    def __init__(self, indent_size: int = 4):
        self._lines: list[str] = []
        self._indent: int = 0
        self._indent_str: str = ' ' * indent_size

    def line(self, text: str = ''):
        """Add a line with current indentation"""
        if text:
            self._lines.append(self._indent_str * self._indent + text)
        else:
            self._lines.append('')

    def raw(self, text: str):
        """Add raw text without indentation processing"""
        self._lines.append(text)

    def embed(self, text: str):
        """Add a block of already generated text at the current indentation"""
        for text_line in text.split('\n'):
            self.line(text_line)

    def comment(self, text: str):
        self.line(f'// {text}')

    def block_comment(self, texts: list[str]):
        """Add a /* ... */ comment, one ' * ' line per entry"""
        self.line('/*')
        for text in texts:
            self.line(f' * {text}' if text else ' *')
        self.line(' */')

    def indent(self):
        """Increase indentation"""
        self._indent += 1

    def dedent(self):
        """Decrease indentation"""
        if self._indent > 0:
            self._indent -= 1

    def block(self, header: str, footer: str = '}'):
        """Context manager for code blocks"""
        return _BlockContext(self, header, footer)

    def output(self) -> str:
        """Get generated code as string"""
        return '\n'.join(self._lines)

    def clear(self):
        """Clear all generated code"""
        self._lines.clear()
        self._indent = 0


class _BlockContext:
    """Context manager for indented code blocks"""

    def __init__(self, gen: CodeGen, header: str, footer: str):
        self._gen = gen
        self._header = header
        self._footer = footer

    def __enter__(self):
        self._gen.line(self._header)
        self._gen.indent()
        return self

    def __exit__(self, *args):
        self._gen.dedent()
        self._gen.line(self._footer)


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace and trim both ends

    Examples:
        ' const  std::string & ' -> 'const std::string &'
    """
    return _WS_RE.sub(' ', text).strip()


def split_scope(name: str) -> list[str]:
    """Split a scoped name on '::' (or '.') into its non-empty segments"""
    return [part for part in name.replace('.', SCOPE_SEP).split(SCOPE_SEP) if part]


def last_segment(name: str) -> str:
    """Unqualified tail of a scoped name

    Examples:
        game::Player -> Player
        Player -> Player
    """
    parts = split_scope(name)
    return parts[-1] if parts else name


def capitalize_first(text: str) -> str:
    """Uppercase the first character only (getHealth-style names keep their case)"""
    if not text:
        return text
    return text[0].upper() + text[1:]


def as_identifier(text: str) -> str:
    """Replace every character that cannot appear in a C++ identifier with '_'"""
    return _IDENT_RE.sub('_', text)


def quoted(text: str) -> str:
    return f'"{text}"'
