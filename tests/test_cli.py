import json
from pathlib import Path

import pytest

import gen_all_bindings
import gen_bindings
from sol_bindgen.generator import GenerationOptions

RECORDS = {
    "module": "game",
    "records": [
        {"kind": "class", "name": "Player", "qualified_name": "game::Player",
         "source_file": "include/game/player.h"},
        {"kind": "constructor", "name": "Player", "owner_class": "Player"},
        {"kind": "method", "name": "getHealth", "owner_class": "Player",
         "qualified_name": "game::Player::getHealth", "return_type": "double"},
        {"kind": "function", "name": "broken"},
    ],
}


@pytest.fixture
def records_file(tmp_path: Path) -> Path:
    path = tmp_path / "records.json"
    path.write_text(json.dumps(RECORDS), encoding="utf-8")
    return path


def test_parser_defaults() -> None:
    args = gen_bindings.build_parser().parse_args(["records.json"])

    assert args.module is None
    assert args.output is None
    assert args.indent is None
    assert not args.no_includes
    assert not args.emit_inheritance


def test_flags_override_config_file(tmp_path: Path) -> None:
    config = tmp_path / "options.json"
    config.write_text('{"indent_size": 8, "output_directory": "from_config"}', encoding="utf-8")
    args = gen_bindings.build_parser().parse_args(
        ["records.json", "--config", str(config), "-o", "cli_out", "--no-includes", "--emit-inheritance"])

    options = gen_bindings.load_options(args)

    assert options.output_directory == "cli_out"
    assert options.indent_size == 8
    assert not options.generate_includes
    assert options.emit_inheritance


def test_main_writes_bindings(tmp_path: Path, records_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out_dir = tmp_path / "out"

    code = gen_bindings.main([str(records_file), "-o", str(out_dir)])

    assert code == 0
    text = (out_dir / "game_bindings.cpp").read_text()
    assert "void register_game_bindings(sol::state& lua) {" in text
    assert '"getHealth", &game::Player::getHealth' in text
    output = capsys.readouterr().out
    assert f"{records_file} => game" in output
    assert "error: record #3: function 'broken' has no return type" in output


def test_main_module_override(tmp_path: Path, records_file: Path) -> None:
    out_dir = tmp_path / "out"

    assert gen_bindings.main([str(records_file), "-o", str(out_dir), "--module", "core"]) == 0
    assert (out_dir / "core_bindings.cpp").exists()


def test_main_fails_on_unreadable_input(tmp_path: Path) -> None:
    assert gen_bindings.main([str(tmp_path / "missing.json")]) == 1

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    assert gen_bindings.main([str(bad)]) == 1


def test_main_requires_a_module_name(tmp_path: Path) -> None:
    path = tmp_path / "records.json"
    path.write_text('{"records": []}', encoding="utf-8")

    assert gen_bindings.main([str(path), "-o", str(tmp_path / "out")]) == 1


def test_run_generator_for_one_module(tmp_path: Path, records_file: Path) -> None:
    options = GenerationOptions(output_directory=str(tmp_path / "out"))

    module, success, output = gen_all_bindings.run_generator(({"records": str(records_file)}, options))

    assert module == "game"
    assert success
    assert "error: record #3: function 'broken' has no return type" in output
    assert (tmp_path / "out" / "game_bindings.cpp").exists()


def test_run_generator_reports_bad_records_file(tmp_path: Path) -> None:
    entry = {"records": str(tmp_path / "missing.json"), "module": "ghost"}

    module, success, output = gen_all_bindings.run_generator((entry, GenerationOptions()))

    assert module == "ghost"
    assert not success
    assert output[0].startswith("error:")


def test_load_modules(tmp_path: Path) -> None:
    path = tmp_path / "modules.json"
    path.write_text('[{"records": "a.json", "module": "a"}]', encoding="utf-8")

    assert gen_all_bindings.load_modules(str(path)) == [{"records": "a.json", "module": "a"}]


def test_main_fails_on_mistyped_option(tmp_path: Path, records_file: Path) -> None:
    config = tmp_path / "options.json"
    config.write_text('{"indent_size": "4"}', encoding="utf-8")

    assert gen_bindings.main([str(records_file), "--config", str(config)]) == 1
