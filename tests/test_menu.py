import pytest

from battlecity.entity import Key
from battlecity.level import Level
from battlecity.menu import RED, WHITE, MenuScene, MenuTextItem


def _ok_level(level_id=1):
    return Level(level_id=level_id, enemy_count=2, player_pos=(0, 0), base_pos=(1, 1))


@pytest.fixture
def menu():
    scene = MenuScene()
    scene.init_levels([_ok_level(1), Level(), _ok_level(3)])
    return scene


def test_text_item_colour_follows_state():
    item = MenuTextItem("Play")
    assert item.color == WHITE
    assert not item
    item.state = True
    assert item.color == RED
    assert bool(item)


def test_hover_emits_and_selects():
    item = MenuTextItem("Play")
    seen = []
    item.hovered.connect(seen.append)
    item.hover()
    assert seen == [item]
    assert item.state


def test_click_emits_without_selecting():
    item = MenuTextItem("Quit")
    seen = []
    item.clicked.connect(seen.append)
    item.click()
    assert seen == [item]
    assert item.state is False


def test_start_screen_shows_play_and_quit(menu):
    assert menu.last_displayed == [menu.play_item, menu.quit_item]
    assert menu.play_item.visible and menu.quit_item.visible
    assert not menu.back_item.visible
    assert not menu.cursor.visible
    assert menu.play_item.y < menu.quit_item.y
    assert menu.play_item.x == menu.quit_item.x


def test_init_levels_skips_unusable_levels(menu):
    assert [item.text for item in menu.level_items] == ["1 Level", "3 Level"]
    assert all(not item.visible for item in menu.level_items)


def test_init_levels_only_once(menu):
    before = list(menu.level_items)
    menu.init_levels([_ok_level(), _ok_level(), _ok_level()])
    assert menu.level_items == before


def test_down_cycles_through_buttons(menu):
    menu.key_press(Key.DOWN)
    assert menu.play_item.state and not menu.quit_item.state
    assert menu.cursor.visible
    assert menu.cursor.x + menu.cursor.width == menu.play_item.x
    menu.key_press(Key.DOWN)
    assert menu.quit_item.state and not menu.play_item.state
    menu.key_press(Key.DOWN)
    assert menu.play_item.state and not menu.quit_item.state


def test_up_from_first_wraps_to_last(menu):
    menu.key_press(Key.DOWN)
    menu.key_press(Key.UP)
    assert menu.quit_item.state
    assert not menu.play_item.state


def test_other_keys_do_nothing(menu):
    menu.key_press(Key.LEFT)
    assert not any(item.state for item in menu.last_displayed)
    assert not menu.cursor.visible


def test_enter_on_play_opens_level_screen(menu):
    menu.key_press(Key.DOWN)
    menu.key_press(Key.RETURN)
    assert not menu.play_item.visible and not menu.quit_item.visible
    assert menu.back_item.visible
    assert all(item.visible for item in menu.level_items)
    assert menu.last_displayed == menu.level_items + [menu.back_item]
    assert not any(item.state for item in menu.last_displayed)
    assert all(item.y < menu.back_item.y for item in menu.level_items)


def test_back_returns_to_start_screen(menu):
    menu.to_level_screen()
    menu.key_press(Key.UP)
    assert menu.back_item.state
    menu.key_press(Key.ENTER)
    assert menu.last_displayed == [menu.play_item, menu.quit_item]
    assert not menu.back_item.visible
    assert all(not item.visible for item in menu.level_items)


def test_quit_emits_signal(menu):
    calls = []
    menu.quit.connect(lambda: calls.append(True))
    menu.key_press(Key.DOWN)
    menu.key_press(Key.DOWN)
    menu.key_press(Key.RETURN)
    assert calls == [True]


def test_clicking_level_starts_game_at_its_index(menu):
    started = []
    menu.start_game_at_level.connect(started.append)
    menu.to_level_screen()
    menu.level_items[1].click()
    assert started == [2]
    menu.level_items[0].click()
    assert started == [2, 0]


def test_enter_with_nothing_selected_does_nothing(menu):
    started = []
    menu.start_game_at_level.connect(started.append)
    menu.to_level_screen()
    menu.enter_pressed()
    assert started == []
    assert menu.back_item.visible


def test_hover_deselects_others_and_moves_cursor(menu):
    menu.play_item.state = True
    menu.quit_item.hover()
    assert not menu.play_item.state
    assert menu.quit_item.state
    assert menu.cursor.visible
    assert menu.cursor.y == menu.quit_item.y + menu.cursor.height // 2


def test_item_at_finds_visible_buttons_only(menu):
    play = menu.play_item
    assert menu.item_at(play.x + 1, play.y + 1) is play
    back = menu.back_item
    assert menu.item_at(back.x + 1, back.y + 1) is None
    assert menu.item_at(-10, -10) is None