from collections.abc import Callable

import pytest

from sol_bindgen.codegen import CodeGen
from sol_bindgen.errors import StructuralError
from sol_bindgen.namespaces import NamespaceResolver, NamespaceTable, ROOT_HANDLE
from sol_bindgen.records import ExportRecord


@pytest.fixture
def resolver() -> NamespaceResolver:
    return NamespaceResolver()


def test_explicit_hint_wins_over_qualified_name(
    resolver: NamespaceResolver, make_record: Callable[..., ExportRecord],
) -> None:
    record = make_record("class", "Foo", namespace_hint="alpha", qualified_name="beta::Foo")

    assert resolver.resolve(record) == "alpha"


def test_global_hint_falls_through_to_qualified_name(
    resolver: NamespaceResolver, make_record: Callable[..., ExportRecord],
) -> None:
    record = make_record("function", "clamp", namespace_hint="global",
                         qualified_name="math::util::clamp", return_type="float")

    assert resolver.resolve(record) == "math::util"


def test_owner_class_prefix_is_not_a_namespace(
    resolver: NamespaceResolver, make_record: Callable[..., ExportRecord],
) -> None:
    member = make_record("method", "getHealth", owner_class="Player",
                         qualified_name="Player::getHealth", return_type="double")
    nested = make_record("method", "getHealth", owner_class="Player",
                         qualified_name="game::Player::getHealth", return_type="double")

    assert resolver.resolve(member) == "global"
    assert resolver.resolve(nested) == "game"


def test_namespace_attribute_is_used_last(
    resolver: NamespaceResolver, make_record: Callable[..., ExportRecord],
) -> None:
    record = make_record("function", "clamp", return_type="float", attributes={"namespace": "math"})

    assert resolver.resolve(record) == "math"
    assert resolver.resolve(make_record("function", "clamp", return_type="float")) == "global"


def test_dotted_hint_is_canonicalized(
    resolver: NamespaceResolver, make_record: Callable[..., ExportRecord],
) -> None:
    assert resolver.resolve(make_record("enum", "Color", namespace_hint="gfx.core")) == "gfx::core"


def test_handles_are_cached_and_global_maps_to_root() -> None:
    table = NamespaceTable()

    assert table.get_handle("global") == ROOT_HANDLE
    assert table.get_handle("game") == "game_ns"
    assert table.get_handle("game") == "game_ns"
    assert table.namespaces == ["game"]


def test_nested_path_registers_parent_first() -> None:
    table = NamespaceTable()
    table.get_handle("engine::render")

    assert table.namespaces == ["engine", "engine::render"]
    assert table.lookup("engine") == "engine_ns"
    assert table.lookup("engine::render") == "engine_render_ns"


def test_handle_collisions_get_a_suffix() -> None:
    table = NamespaceTable()

    assert table.get_handle("a_b") == "a_b_ns"
    assert table.get_handle("a::b") == "a_b_ns2"


def test_declarations_nest_under_parent_handles() -> None:
    table = NamespaceTable()
    table.get_handle("engine::render")
    table.get_handle("game")
    gen = CodeGen()

    table.generate_declarations(gen)

    assert gen.output().splitlines() == [
        'auto engine_ns = lua["engine"].get_or_create<sol::table>();',
        'auto engine_render_ns = engine_ns["render"].get_or_create<sol::table>();',
        'auto game_ns = lua["game"].get_or_create<sol::table>();',
    ]


def test_lookup_of_undiscovered_namespace_is_structural() -> None:
    table = NamespaceTable()

    with pytest.raises(StructuralError):
        table.lookup("missing")


def test_clear_forgets_everything() -> None:
    table = NamespaceTable()
    table.get_handle("game")
    table.clear()

    assert table.namespaces == []
    with pytest.raises(StructuralError):
        table.lookup("game")
