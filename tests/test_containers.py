from collections.abc import Callable

import pytest

from sol_bindgen.containers import (
    ContainerBindingSynthesizer, container_kind_of, friendly_type_name, generic_container_name,
)
from sol_bindgen.records import ContainerKind, ExportRecord


@pytest.fixture
def make_container(make_record: Callable[..., ExportRecord]) -> Callable[..., ExportRecord]:
    def _make_container(kind: str, *elements: str, **overrides: object) -> ExportRecord:
        return make_record("container", overrides.pop("name", "values"),
                           container_kind=ContainerKind(kind),
                           container_element_types=list(elements), **overrides)

    return _make_container


@pytest.mark.parametrize(
    ("type_name", "expected"),
    [
        ("int", "Int"),
        ("size_t", "SizeT"),
        ("uint8_t", "Uint8"),
        ("string", "String"),
        ("std::string", "StdString"),
        ("game::Item", "GameItem"),
    ],
)
def test_friendly_type_name(type_name: str, expected: str) -> None:
    assert friendly_type_name(type_name) == expected


def test_sequence_and_associative_display_names(make_container: Callable[..., ExportRecord]) -> None:
    synthesizer = ContainerBindingSynthesizer()

    assert synthesizer.display_name(make_container("vector", "int")) == "IntVector"
    assert synthesizer.display_name(make_container("vector", "game::Item")) == "GameItemVector"
    assert synthesizer.display_name(make_container("map", "std::string", "int")) == "StdStringIntMap"
    assert synthesizer.display_name(make_container("unordered_map", "int", "float")) == "IntFloatMap"


def test_alias_attribute_wins(make_container: Callable[..., ExportRecord]) -> None:
    record = make_container("vector", "int", attributes={"alias": "Scores"})

    assert ContainerBindingSynthesizer().display_name(record) == "Scores"


def test_other_shapes_fall_back_to_generic_names(make_container: Callable[..., ExportRecord]) -> None:
    synthesizer = ContainerBindingSynthesizer()

    assert synthesizer.display_name(make_container("set", "int")) == "Set_int"
    assert synthesizer.display_name(make_container("vector", "std::pair<int, int>")) == \
        "Vector_std__pair_int__int_"
    assert generic_container_name("map", "std::string,int") == "Map_std__string_int"


def test_kind_is_parsed_from_type_name(make_record: Callable[..., ExportRecord]) -> None:
    record = make_record("container", "lookup", type_name="std::unordered_map<int, float>",
                         container_element_types=["int", "float"])

    assert container_kind_of(record) is ContainerKind.UNORDERED_MAP
    assert container_kind_of(make_record("container", "x", type_name="Foo")) is None


def test_vector_layout(make_container: Callable[..., ExportRecord]) -> None:
    layout = ContainerBindingSynthesizer().layout(make_container("vector", "int"), "lua")

    assert layout.cpp_type == "std::vector<int>"
    assert layout.lua_name == "IntVector"
    assert layout.constructors == "sol::constructors<std::vector<int>()>()"
    assert [e.key.strip('"') for e in layout.entries] == [
        "size", "empty", "clear", "get", "set", "front", "back", "insert", "erase",
        "resize", "reserve", "capacity", "push_back", "pop_back", "to_table",
    ]


def test_operation_sets_per_family(make_container: Callable[..., ExportRecord]) -> None:
    synthesizer = ContainerBindingSynthesizer()

    def names(record: ExportRecord) -> list[str]:
        return [e.key.strip('"') for e in synthesizer.layout(record, "lua").entries]

    assert names(make_container("map", "std::string", "int")) == [
        "size", "empty", "clear", "get", "set", "has", "erase", "keys", "values",
    ]
    assert names(make_container("set", "int")) == [
        "size", "empty", "clear", "insert", "erase", "has", "to_vector",
    ]
    assert names(make_container("list", "int")) == [
        "size", "empty", "clear", "push_back", "pop_back", "push_front", "pop_front",
        "front", "back", "to_table",
    ]


def test_layout_uses_explicit_type_name_and_lua_name(make_record: Callable[..., ExportRecord]) -> None:
    record = make_record("container", "lookup", type_name="std::map< std::string, int >",
                         container_element_types=["std::string", "int"])

    layout = ContainerBindingSynthesizer().layout(record, "game_ns", "Lookup")

    assert layout.cpp_type == "std::map< std::string, int >"
    assert layout.lua_name == "Lookup"
    assert layout.namespace_handle == "game_ns"


def test_malformed_shapes_have_no_layout(make_container: Callable[..., ExportRecord],
                                         make_record: Callable[..., ExportRecord]) -> None:
    synthesizer = ContainerBindingSynthesizer()

    assert synthesizer.layout(make_container("map", "int"), "lua") is None
    assert synthesizer.layout(make_container("vector", "int", "float"), "lua") is None
    assert synthesizer.layout(make_record("container", "x", container_element_types=["int"]), "lua") is None
