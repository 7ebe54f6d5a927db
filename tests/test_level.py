import pytest

from battlecity.level import INVALID_POS, Level, LevelError, load_level, parse_level

SAMPLE = "1 4\n 1 0 3\n2b  p\n00000"


def test_header_is_parsed():
    level = parse_level(SAMPLE)
    assert level.level_id == 1
    assert level.enemy_count == 4


def test_structure_holds_rows_after_header():
    level = parse_level(SAMPLE)
    assert level.structure == tuple(SAMPLE.split("\n")[1:])


def test_positions_point_at_markers():
    level = parse_level(SAMPLE)
    bx, by = level.base_pos
    px, py = level.player_pos
    assert level.structure[by][bx] == "b"
    assert level.structure[py][px] == "p"


def test_markers_are_case_insensitive():
    level = parse_level("2 1\nB\n  P")
    bx, by = level.base_pos
    px, py = level.player_pos
    assert level.structure[by][bx] == "B"
    assert level.structure[py][px] == "P"
    assert by < py


def test_last_row_with_marker_wins():
    level = parse_level("3 1\nb\n b\np")
    bx, by = level.base_pos
    assert by == len(level.structure) - 2
    assert level.structure[by][bx] == "b"


def test_carriage_returns_are_dropped():
    level = parse_level("1 2\r\n12\r\n34")
    assert all("\r" not in row for row in level.structure)
    assert level.enemy_count == 2


def test_empty_text_raises():
    with pytest.raises(LevelError):
        parse_level("")


def test_short_header_raises():
    with pytest.raises(LevelError):
        parse_level("7\n111")


def test_non_numeric_header_reads_as_zero():
    level = parse_level("x y\n1")
    assert level.level_id == 0
    assert level.enemy_count == 0


def test_is_ok_requires_level_id():
    assert parse_level(SAMPLE).is_ok()
    assert not Level().is_ok()


def test_is_ok_rejects_invalid_positions():
    assert not Level(level_id=1, player_pos=INVALID_POS).is_ok()
    assert not Level(level_id=1, base_pos=INVALID_POS).is_ok()


def test_load_level_round_trip(tmp_path):
    path = tmp_path / "level.txt"
    path.write_text(SAMPLE, encoding="utf-8")
    assert load_level(path) == parse_level(SAMPLE)


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(LevelError):
        load_level(tmp_path / "missing.txt")


def test_load_directory_raises(tmp_path):
    with pytest.raises(LevelError):
        load_level(tmp_path)