"""The start menu: text buttons, the level list and a tank cursor."""

from __future__ import annotations

from typing import Iterable

from battlecity.entity import Entity, Key, Scene, Signal
from battlecity.level import Level

WHITE = (255, 255, 255)
RED = (255, 0, 0)

CHAR_WIDTH = 20
LINE_HEIGHT = 48
MENU_OFFSET = 20

LOGO_IMAGE = "images/logo.png"
CURSOR_IMAGE = "images/player2right.png"
LOGO_SIZE = (480, 160)
CURSOR_SIZE = (64, 64)


class MenuTextItem(Entity):
    """A text button that is either selected (red) or not (white)."""

    def __init__(self, text: str = "") -> None:
        super().__init__("", len(text) * CHAR_WIDTH, LINE_HEIGHT)
        self.text = text
        self.name = "MenuTextItem"
        self.clicked = Signal()
        self.hovered = Signal()
        self._state = False

    @property
    def state(self) -> bool:
        return self._state

    @state.setter
    def state(self, value: bool) -> None:
        self._state = bool(value)

    @property
    def color(self) -> tuple[int, int, int]:
        return RED if self._state else WHITE

    def __bool__(self) -> bool:
        return self._state

    def click(self) -> None:
        """Report a click on this item."""
        self.clicked.emit(self)

    def hover(self) -> None:
        """Report the pointer entering this item and select it."""
        self.hovered.emit(self)
        self.state = True


class MenuScene(Scene):
    """The start screen with Play and Quit, and the level screen with Back."""

    def __init__(
        self,
        width: float = 1280,
        height: float = 720,
        logo_size: tuple[int, int] = LOGO_SIZE,
        cursor_size: tuple[int, int] = CURSOR_SIZE,
    ) -> None:
        super().__init__(width, height)
        self.start_game_at_level = Signal()
        self.quit = Signal()
        self.offset = MENU_OFFSET

        self.play_item = MenuTextItem("Play")
        self.quit_item = MenuTextItem("Quit")
        self.back_item = MenuTextItem("Back")
        self.level_items: list[MenuTextItem] = []
        self.last_displayed: list[MenuTextItem] = []
        self.logo = Entity(LOGO_IMAGE, *logo_size)
        self.cursor = Entity(CURSOR_IMAGE, *cursor_size)

        for item in (self.play_item, self.back_item, self.quit_item):
            self._connect(item)

        self.add_item(self.logo)
        self.logo.set_pos(self.width / 2 - self.logo.width // 2, 0)

        for item in (self.play_item, self.quit_item, self.back_item, self.cursor):
            self.add_item(item)
        self.back_item.visible = False
        self.cursor.visible = False

        self.to_start_screen()

    def _connect(self, item: MenuTextItem) -> None:
        item.clicked.connect(self._on_item_clicked)
        item.hovered.connect(self._on_item_hovered)

    def init_levels(self, levels: Iterable[Level]) -> None:
        """Add a hidden button for every usable level; only the first call counts."""
        if self.level_items:
            return
        for index, level in enumerate(levels):
            if not level.is_ok():
                continue
            item = MenuTextItem(f"{index + 1} Level")
            self._connect(item)
            self.level_items.append(item)
            self.add_item(item)
            item.visible = False

    def to_start_screen(self) -> None:
        """Show Play and Quit."""
        self._hide_last_shown()
        self.last_displayed.extend((self.play_item, self.quit_item))
        self.play_item.visible = True
        self.quit_item.visible = True
        top = self.logo.height
        self.play_item.set_pos(self.width / 2, top + self.offset * 2)
        self.quit_item.set_pos(self.width / 2, top + self.offset * 5)

    def to_level_screen(self) -> None:
        """Show the level buttons followed by Back."""
        self._hide_last_shown()
        step = self.offset * 2
        top = self.logo.height
        for index, item in enumerate(self.level_items):
            item.visible = True
            item.set_pos(self.width / 2, top + step * (index + 2))
            self.last_displayed.append(item)
        self.last_displayed.append(self.back_item)
        self.back_item.visible = True
        self.back_item.set_pos(self.width / 2, top + step * (len(self.level_items) + 3))

    def key_press(self, key: Key) -> None:
        """Arrows move the selection; Enter or Return activates it."""
        if key in (Key.DOWN, Key.UP):
            self.change_current_button(key)
        elif key in (Key.ENTER, Key.RETURN):
            self.enter_pressed()

    def enter_pressed(self) -> None:
        """Activate the selected button, if any."""
        if self.play_item:
            self.to_level_screen()
        elif self.quit_item:
            self.quit.emit()
        elif self.back_item:
            self.to_start_screen()
        else:
            for item in self.level_items:
                if item:
                    number = item.text.split(" ", 1)[0]
                    try:
                        level_number = int(number)
                    except ValueError:
                        level_number = 0
                    self.start_game_at_level.emit(level_number - 1)
                    return

    def change_current_button(self, key: Key) -> None:
        """Move the selection up or down, wrapping around at the ends."""
        self.cursor.visible = True
        step = -1 if key == Key.UP else 1
        current = next(
            (index for index, item in enumerate(self.last_displayed) if item.state),
            None,
        )
        if current is None:
            target = self.last_displayed[0]
        else:
            self.last_displayed[current].state = False
            target = self.last_displayed[(current + step) % len(self.last_displayed)]
        target.state = True
        self._move_cursor_to(target)

    def item_at(self, x: float, y: float) -> MenuTextItem | None:
        """The topmost visible menu button at the point, if any."""
        for item in self.items():
            if isinstance(item, MenuTextItem) and item.is_visible() and item.contains(x, y):
                return item
        return None

    def _on_item_clicked(self, sender: MenuTextItem) -> None:
        self._select_only(sender)
        self.enter_pressed()

    def _on_item_hovered(self, sender: MenuTextItem) -> None:
        self._select_only(sender)

    def _select_only(self, sender: MenuTextItem) -> None:
        for item in self.items():
            if isinstance(item, MenuTextItem):
                item.state = False
        sender.state = True
        self._move_cursor_to(sender)
        self.cursor.visible = True

    def _hide_last_shown(self) -> None:
        for item in self.last_displayed:
            item.visible = False
            item.state = False
        self.last_displayed.clear()
        self.cursor.visible = False

    def _move_cursor_to(self, item: Entity) -> None:
        self.cursor.set_pos(
            item.x - self.cursor.width, item.y + self.cursor.height // 2
        )