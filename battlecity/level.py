"""Level files: a header row followed by the block map."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

INVALID_POS = (-1, -1)


class LevelError(ValueError):
    """Raised when a level cannot be read or parsed."""


@dataclass(frozen=True)
class Level:
    """A parsed level: its id, enemy count, key positions and block rows."""

    level_id: int = -1
    enemy_count: int = 0
    player_pos: tuple[int, int] = (0, 0)
    base_pos: tuple[int, int] = (0, 0)
    structure: tuple[str, ...] = ()

    def is_ok(self) -> bool:
        """Whether the level has an id and valid player and base positions."""
        return (
            self.level_id != -1
            and self.player_pos != INVALID_POS
            and self.base_pos != INVALID_POS
        )


def _to_int(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        return 0


def parse_level(text: str) -> Level:
    """Parse the text of a level file.

    The first row holds the level id and the enemy count separated by a
    space; every following row is a row of the map.  The last row holding
    ``b`` (or ``B``) gives the base position, the last holding ``p`` the
    player position.
    """
    lines = [line.removesuffix("\r") for line in text.split("\n")]
    header = lines[0].split(" ")
    if len(header) < 2:
        raise LevelError("first row of a level must hold its id and enemy count")

    base_pos = (0, 0)
    player_pos = (0, 0)
    rows = lines[1:]
    for row_index, row in enumerate(rows):
        lowered = row.lower()
        if "b" in lowered:
            base_pos = (lowered.index("b"), row_index)
        if "p" in lowered:
            player_pos = (lowered.index("p"), row_index)

    return Level(
        level_id=_to_int(header[0]),
        enemy_count=_to_int(header[1]),
        player_pos=player_pos,
        base_pos=base_pos,
        structure=tuple(rows),
    )


def load_level(path: str | Path) -> Level:
    """Read and parse the level file at ``path``."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError as exc:
        raise LevelError(f"file {path} does not exist") from exc
    except OSError as exc:
        raise LevelError(f"cannot open {path}: {exc}") from exc
    return parse_level(text)