import sys
from collections.abc import Callable
from pathlib import Path

import pytest

SCRIPTS_DIR = Path(__file__).resolve().parent.parent / "scripts"
if str(SCRIPTS_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPTS_DIR))

from sol_bindgen import ExportRecord, GenerationOptions, Generator, PropertyAccess, RecordKind  # noqa: E402


@pytest.fixture
def make_record() -> Callable[..., ExportRecord]:
    def _make_record(kind: str | RecordKind, name: str, **overrides: object) -> ExportRecord:
        return ExportRecord(kind=RecordKind(kind), name=name, **overrides)

    return _make_record


@pytest.fixture
def player_records(make_record: Callable[..., ExportRecord]) -> list[ExportRecord]:
    return [
        make_record("class", "Player", qualified_name="game::Player", namespace_hint="game",
                    source_file="include/game/player.h"),
        make_record("constructor", "Player", owner_class="Player",
                    qualified_name="game::Player::Player"),
        make_record("constructor", "Player", owner_class="Player",
                    qualified_name="game::Player::Player", parameter_types=["int"]),
        make_record("method", "getHealth", owner_class="Player",
                    qualified_name="game::Player::getHealth", return_type="double", is_const=True),
        make_record("property", "health", owner_class="Player",
                    qualified_name="game::Player::health", property_access=PropertyAccess.READ_WRITE),
    ]


@pytest.fixture
def make_generator(tmp_path: Path) -> Callable[..., Generator]:
    def _make_generator(**overrides: object) -> Generator:
        options: dict[str, object] = {"output_directory": str(tmp_path / "out")}
        options.update(overrides)
        return Generator(GenerationOptions(**options))

    return _make_generator
