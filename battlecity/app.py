"""The game window: switches between the menu and a level in play."""

from __future__ import annotations

import argparse
import os
import random
from pathlib import Path
from typing import Iterable, Sequence

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

from battlecity.entity import Entity, EntityType, Key, Scene  # noqa: E402
from battlecity.game_scene import FPS, GameScene  # noqa: E402
from battlecity.level import Level, LevelError, load_level  # noqa: E402
from battlecity.menu import LINE_HEIGHT, WHITE, MenuScene, MenuTextItem  # noqa: E402

ASSET_DIR = Path(__file__).parent
LEVEL_COUNT = 4
BACKGROUND = (126, 126, 126)
LABEL_FONT_SIZE = 24

_FALLBACK_COLORS = {
    EntityType.PLAYER_TANK: (230, 200, 40),
    EntityType.ENEMY_TANK: (200, 200, 200),
    EntityType.BULLET: (255, 255, 255),
    EntityType.STATIC_BLOCK: (150, 80, 40),
    EntityType.BONUS: (220, 40, 220),
    EntityType.BASE: (240, 150, 0),
    EntityType.EXPLOSION: (255, 90, 0),
    EntityType.SHIELD: (60, 220, 240),
}
_DEFAULT_COLOR = (60, 60, 60)

_PYGAME_KEYS = {
    pygame.K_UP: Key.UP,
    pygame.K_DOWN: Key.DOWN,
    pygame.K_LEFT: Key.LEFT,
    pygame.K_RIGHT: Key.RIGHT,
    pygame.K_SPACE: Key.SPACE,
    pygame.K_RETURN: Key.RETURN,
    pygame.K_KP_ENTER: Key.ENTER,
    pygame.K_ESCAPE: Key.ESCAPE,
}


def _default_level_paths(directory: str | Path | None = None) -> list[Path]:
    base = Path(directory) if directory is not None else ASSET_DIR / "levels"
    return [base / f"{number}_level.txt" for number in range(1, LEVEL_COUNT + 1)]


def _read_level(path: str | Path) -> Level:
    try:
        return load_level(path)
    except LevelError:
        return Level()


class GameView:
    """Owns the menu and the current game and routes input and time to them."""

    def __init__(
        self,
        width: float = 1280,
        height: float = 720,
        level_paths: Iterable[str | Path] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self._rng = rng
        paths = list(level_paths) if level_paths is not None else _default_level_paths()
        self.levels = [_read_level(path) for path in paths]

        self.menu_scene = MenuScene(width, height)
        self.menu_scene.init_levels(self.levels)
        self.menu_scene.start_game_at_level.connect(self.start_game_at_level)
        self.menu_scene.quit.connect(self.close)

        self.game_scene: GameScene | None = None
        self.closed = False
        self.scene: Scene = self.menu_scene
        self.to_menu()

    def start_game_at_level(self, level_id: int) -> GameScene:
        """Start a fresh game on the level with the given index."""
        if not 0 <= level_id < len(self.levels):
            raise IndexError(f"no level with index {level_id}")
        self.game_scene = GameScene(self.width, self.height, rng=self._rng)
        self.game_scene.load_level(self.levels[level_id])
        self.scene = self.game_scene
        self.game_scene.to_menu.connect(self.to_menu)
        return self.game_scene

    def to_menu(self) -> None:
        """Show the menu."""
        self.scene = self.menu_scene

    def close(self) -> None:
        self.closed = True

    def handle_key(self, key: Key, pressed: bool) -> None:
        """Pass a key press or release to whatever is on screen."""
        if self.scene is self.menu_scene:
            if pressed:
                self.menu_scene.key_press(key)
            return
        player = self.game_scene.player if self.game_scene is not None else None
        if player is None or player.deleted:
            return
        if pressed:
            player.key_press(key)
        else:
            player.key_release(key)

    def update(self, elapsed: int) -> None:
        """Let ``elapsed`` ms pass in the scene on screen."""
        self.scene.tick(elapsed)


class _Renderer:
    def __init__(self, screen: pygame.Surface) -> None:
        self.screen = screen
        self._images: dict[tuple, pygame.Surface | None] = {}
        self._fonts: dict[int, pygame.font.Font] = {}

    def _font(self, size: int) -> pygame.font.Font:
        if size not in self._fonts:
            self._fonts[size] = pygame.font.Font(None, size)
        return self._fonts[size]

    def _surface(self, item: Entity) -> pygame.Surface | None:
        turned = item.rotation % 180 != 0
        size = (
            (int(item.height), int(item.width))
            if turned
            else (int(item.width), int(item.height))
        )
        key = (item.image, size, item.rotation)
        if key not in self._images:
            self._images[key] = self._load(item.image, size, item.rotation)
        return self._images[key]

    @staticmethod
    def _load(image: str, size: tuple[int, int], rotation: int) -> pygame.Surface | None:
        path = ASSET_DIR / image
        if not image or not path.is_file() or size[0] <= 0 or size[1] <= 0:
            return None
        try:
            surface = pygame.image.load(str(path)).convert_alpha()
        except pygame.error:
            return None
        surface = pygame.transform.scale(surface, size)
        if rotation:
            surface = pygame.transform.rotate(surface, -rotation)
        return surface

    def draw(self, scene: Scene) -> None:
        self.screen.fill(BACKGROUND)
        for item in reversed(scene.items()):
            if not item.is_visible():
                continue
            x, y = item.scene_pos
            text = getattr(item, "text", None)
            if text is not None:
                size = LINE_HEIGHT if isinstance(item, MenuTextItem) else LABEL_FONT_SIZE
                color = getattr(item, "color", WHITE)
                self.screen.blit(self._font(size).render(text, True, color), (x, y))
                continue
            surface = self._surface(item)
            if surface is not None:
                self.screen.blit(surface, (x, y))
            elif item.width > 0 and item.height > 0:
                color = _FALLBACK_COLORS.get(item.entity_type, _DEFAULT_COLOR)
                pygame.draw.rect(
                    self.screen, color, pygame.Rect(x, y, item.width, item.height)
                )


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="battlecity", description="Tank battle game.")
    parser.add_argument("--windowed", action="store_true", help="run in a window")
    parser.add_argument("--width", type=int, default=1280, help="window width")
    parser.add_argument("--height", type=int, default=720, help="window height")
    parser.add_argument("--levels-dir", default=None, help="directory of level files")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Open the game window and run until the player quits."""
    args = _parse_args(argv)
    pygame.init()
    try:
        if args.windowed:
            screen = pygame.display.set_mode((args.width, args.height))
        else:
            screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
        pygame.display.set_caption("Battle City")
        width, height = screen.get_size()
        view = GameView(width, height, _default_level_paths(args.levels_dir))
        renderer = _Renderer(screen)
        clock = pygame.time.Clock()
        hovered: MenuTextItem | None = None

        while not view.closed:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    view.close()
                elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                    key = _PYGAME_KEYS.get(event.key)
                    if key is not None:
                        view.handle_key(key, event.type == pygame.KEYDOWN)
                elif view.scene is view.menu_scene:
                    if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                        item = view.menu_scene.item_at(*event.pos)
                        if item is not None:
                            item.click()
                    elif event.type == pygame.MOUSEMOTION:
                        item = view.menu_scene.item_at(*event.pos)
                        if item is not hovered and item is not None:
                            item.hover()
                        hovered = item
            view.update(clock.tick(FPS))
            renderer.draw(view.scene)
            pygame.display.flip()
    finally:
        pygame.quit()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())