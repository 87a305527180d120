import pytest

from sol_bindgen.codegen import (
    CodeGen, as_identifier, capitalize_first, last_segment, normalize_whitespace, split_scope,
)


def test_block_indents_body_and_closes() -> None:
    gen = CodeGen()
    with gen.block("void register_game_bindings(sol::state& lua) {"):
        gen.line("lua[\"x\"] = 1;")

    assert gen.output() == 'void register_game_bindings(sol::state& lua) {\n    lua["x"] = 1;\n}'


def test_indent_size_is_configurable() -> None:
    gen = CodeGen(indent_size=2)
    gen.indent()
    gen.line("a;")
    gen.indent()
    gen.line("b;")

    assert gen.output() == "  a;\n    b;"


def test_dedent_never_goes_negative() -> None:
    gen = CodeGen()
    gen.dedent()
    gen.line("a;")

    assert gen.output() == "a;"


def test_empty_line_carries_no_indentation() -> None:
    gen = CodeGen()
    gen.indent()
    gen.line()

    assert gen.output() == ""


def test_embed_reindents_generated_text() -> None:
    gen = CodeGen()
    gen.indent()
    gen.embed("a;\n\nb;")

    assert gen.output() == "    a;\n\n    b;"


def test_block_comment_and_comment() -> None:
    gen = CodeGen()
    gen.block_comment(["@file game_bindings.cpp", ""])
    gen.comment("Class bindings")

    assert gen.output() == "/*\n * @file game_bindings.cpp\n *\n */\n// Class bindings"


def test_clear_resets_lines_and_indent() -> None:
    gen = CodeGen()
    gen.indent()
    gen.line("a;")
    gen.clear()
    gen.line("b;")

    assert gen.output() == "b;"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        (" const  std::string & ", "const std::string &"),
        ("int", "int"),
        ("\tunsigned\n int", "unsigned int"),
    ],
)
def test_normalize_whitespace(text: str, expected: str) -> None:
    assert normalize_whitespace(text) == expected


def test_scope_helpers() -> None:
    assert split_scope("a::b::c") == ["a", "b", "c"]
    assert split_scope("a.b") == ["a", "b"]
    assert split_scope("") == []
    assert last_segment("game::Player") == "Player"
    assert last_segment("Player") == "Player"


def test_identifier_helpers() -> None:
    assert as_identifier("my-module.core") == "my_module_core"
    assert capitalize_first("getHealth") == "GetHealth"
    assert capitalize_first("") == ""
