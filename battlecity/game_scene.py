"""The playing field: map blocks, player, base, enemies, bonuses and score."""

from __future__ import annotations

import random
from dataclasses import dataclass

from battlecity.effects import (
    BlockType,
    Base,
    Bonus,
    BonusType,
    Explosion,
    GameOverItem,
    StaticBody,
)
from battlecity.entity import (
    BONUS_DURATION,
    SWAP_FRAMES_DELTA,
    Entity,
    Scene,
    Signal,
    Timer,
)
from battlecity.level import Level, LevelError
from battlecity.tanks import Blink, EnemyTank, PlayerTank

FPS = 60
FPS_DELTA = 1000 // FPS
ENEMY_RESPAWN_DELTA = 6000
BONUS_RESPAWN_DELTA = 6000
BORDER_BLINK_LEAD = 2000
POINTS_PER_ENEMY = 100

ENEMY_ICON_IMAGE = "images/enemy.png"
SCORE_LABEL_TEXT = "Score: "


def _digit_image(digit: int) -> str:
    return f"images/digits/{digit}.png"


@dataclass(frozen=True)
class _Rect:
    x: float
    y: float
    width: float
    height: float


class _Label(Entity):
    """A text item without a hit area."""

    def __init__(self, text: str) -> None:
        super().__init__("", 0, 0)
        self.text = text
        self.name = "Label"


_BORDER_OFFSETS = (
    (1, 0),
    (-1, 0),
    (1, -1),
    (0, -1),
    (-1, -1),
    (-1, 1),
    (0, 1),
    (1, 1),
)


class GameScene(Scene):
    """A level in play: the gameplay field on the left, the status panel on the right."""

    def __init__(
        self,
        width: float = 1280,
        height: float = 720,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(width, height)
        self._rng = rng or random.Random()
        self.to_menu = Signal()

        self.game_timer = self.add_timer(Timer())
        self.bonus_timer = self.add_timer(Timer())
        self.enemy_spawn_timer = self.add_timer(Timer())
        self.border_timer = self.add_timer(Timer())
        self.border_blink_timer = self.add_timer(Timer())

        self.level_id = -1
        self.gameplay_rect = _Rect(0, 0, width - width / 4, height)
        self.interface_rect = _Rect(3 * width / 4, 0, width / 4, height)

        self.length_block = 0
        self.last_height = 0
        self.enemy_spawned = 0
        self.enemy_count = 0
        self.score = 0
        self.score_x = 0
        self.score_y = 0

        self.player: PlayerTank | None = None
        self.base: Base | None = None
        self.score_label: _Label | None = None
        self.score_items: list[Entity] = []
        self.enemy_lives: list[Entity] = []
        self.hides: list[Entity] = []
        self.border: list[StaticBody] = []

    def load_level(self, level: Level) -> bool:
        """Build the level's field and start the game; False if the level is unusable."""
        if not level.is_ok():
            return False
        structure = level.structure
        if not structure or not structure[0]:
            raise LevelError("level has no map rows")

        self.level_id = level.level_id
        self.enemy_count = level.enemy_count
        self.length_block = int(
            min(
                self.gameplay_rect.height / len(structure),
                self.gameplay_rect.width / len(structure[0]),
            )
        )
        lb = self.length_block
        self.last_height = lb * len(structure)

        for row_index, row in enumerate(structure):
            for col_index, char in enumerate(row):
                if not char.isdigit() or int(char) not in iter(BlockType):
                    continue
                body = StaticBody(BlockType(int(char)), lb)
                self.add_item(body)
                body.set_pos(col_index * lb, row_index * lb)
        if structure[-1]:
            self.gameplay_rect = _Rect(
                0, 0, len(structure[-1]) * lb, len(structure) * lb
            )

        self._init_player(level.player_pos)
        self._init_base(level.base_pos)
        self._init_interface()

        self.game_timer.timeout.connect(self.advance)
        self.enemy_spawn_timer.timeout.connect(self.spawn_enemy)
        self.bonus_timer.timeout.connect(self.spawn_bonus)
        self.base.destroyed.connect(self.player.set_require_to_destroy)
        self.player.destroyed.connect(self.game_over)
        self.player.bonus_picked.connect(self.player_picked_bonus)

        self.game_timer.start(FPS_DELTA)
        self.enemy_spawn_timer.start(ENEMY_RESPAWN_DELTA)
        self.bonus_timer.start(BONUS_RESPAWN_DELTA)
        return True

    def _init_player(self, pos: tuple[int, int]) -> None:
        lb = self.length_block
        self.player = PlayerTank(lb - 4)
        self.add_item(self.player)
        self.player.set_respawn_pos(pos[0] * lb, pos[1] * lb)
        self.player.border = (self.gameplay_rect.width, self.last_height)

    def _init_base(self, pos: tuple[int, int]) -> None:
        lb = self.length_block
        self.base = Base(lb)
        self.add_item(self.base)
        self.base.set_pos(pos[0] * lb, pos[1] * lb)

    def _init_interface(self) -> None:
        lb = self.length_block
        init_width = int(self.interface_rect.x + lb * 2)
        init_height = int(self.interface_rect.y + 10)

        for index in range(self.enemy_count):
            init_width += lb if index % 2 else -lb
            icon = Entity(ENEMY_ICON_IMAGE, lb, lb)
            self.add_item(icon)
            icon.set_pos(init_width, init_height)
            if index % 2:
                init_height += lb
            self.enemy_lives.append(icon)
        if self.enemy_count % 2:
            init_height += lb

        init_width -= lb

        self.score_label = _Label(SCORE_LABEL_TEXT)
        self.add_item(self.score_label)
        self.score_label.set_pos(init_width, init_height)

        self.score_items.append(Entity(_digit_image(0), lb // 2, lb // 2))
        self.score_y = init_height + lb
        self.score_x = init_width
        self._show_score()

    def game_over(self) -> GameOverItem:
        """Stop spawning and raise the game-over banner; it leads back to the menu."""
        self.bonus_timer.stop()
        self.enemy_spawn_timer.stop()
        lb = self.length_block
        rect = self.gameplay_rect
        banner = GameOverItem((rect.width / 2 - lb / 2, rect.height / 2 - lb / 2))
        self.add_item(banner)
        banner.set_pos(rect.width / 2 - banner.width / 2, rect.height)
        banner.moved_to_center.connect(self.to_menu.emit)
        return banner

    def game_win(self) -> None:
        """Stop spawning and return to the menu."""
        self.bonus_timer.stop()
        self.enemy_spawn_timer.stop()
        self.to_menu.emit()

    def spawn_enemy(self) -> Blink | None:
        """Start a spawn animation at a free cell unless every enemy has come."""
        if self.enemy_spawned >= self.enemy_count:
            return None
        x, y = self.available_point()
        blink = Blink(self.length_block, self._rng)
        if self.player is not None:
            blink.border = self.player.border
        self.add_item(blink)
        blink.set_pos(x, y)
        blink.start_animation()
        blink.enemy_respawned.connect(self._watch_enemy)
        self.enemy_spawned += 1
        return blink

    def _watch_enemy(self, enemy: EnemyTank) -> None:
        enemy.destroyed.connect(self.enemy_destroyed)

    def spawn_bonus(self) -> Bonus:
        """Drop a random bonus at a free cell."""
        if self.player is None:
            raise RuntimeError("bonuses need a player; load a level first")
        x, y = self.available_point()
        bonus = Bonus(self.length_block, rng=self._rng)
        self.add_item(bonus)
        bonus.set_pos(x, y)
        bonus.bonus_picked.connect(self.player.pickup_bonus)
        return bonus

    def spawn_border(self) -> None:
        """Wall the base in with concrete for a limited time."""
        if self.base is None:
            return
        bx, by = self.base.scene_pos
        lb = self.length_block
        for ox, oy in _BORDER_OFFSETS:
            self._hide_entity_and_create_concrete(bx + ox * lb, by + oy * lb)
        self._reset_border_timers()

    def _hide_entity_and_create_concrete(self, x: float, y: float) -> None:
        lb = self.length_block
        entity = self.item_at(x + lb // 2, y + lb // 2)
        if entity is not None and entity.name == "StaticBody":
            self.hides.append(entity)
            entity.visible = False
        concrete = StaticBody(BlockType.CONCRETE, lb)
        self.border.append(concrete)
        self.add_item(concrete)
        if entity is not None:
            concrete.set_pos(entity.x, entity.y)
        else:
            concrete.set_pos(x, y)

    def _reset_border_timers(self) -> None:
        if self.border_timer.active:
            self.border_timer.stop()
            self.border_blink_timer.stop()
            self.border_blink_timer.timeout.disconnect(self._border_blink)
            self.border_blink_timer.timeout.disconnect(self._start_border_blinking)
            for item in self.border:
                item.visible = True
        self.border_blink_timer.timeout.disconnect(self._start_border_blinking)
        self.border_blink_timer.timeout.connect(self._start_border_blinking)
        self.border_timer.timeout.disconnect(self.remove_border)
        self.border_timer.timeout.connect(self.remove_border)

        self.border_timer.start(BONUS_DURATION)
        self.border_blink_timer.start(BONUS_DURATION - BORDER_BLINK_LEAD)

    def _start_border_blinking(self) -> None:
        self.border_blink_timer.stop()
        self.border_blink_timer.timeout.disconnect(self._start_border_blinking)
        self.border_blink_timer.timeout.connect(self._border_blink)
        self.border_blink_timer.start(SWAP_FRAMES_DELTA)

    def _border_blink(self) -> None:
        for item in self.border:
            item.visible = not item.visible

    def remove_border(self) -> None:
        """Take the concrete wall down and show what it covered."""
        for item in self.border:
            item.set_require_to_destroy(True)
        self.border.clear()
        for item in self.hides:
            item.visible = True
        self.hides.clear()
        self.border_timer.stop()
        self.border_blink_timer.stop()
        self.border_blink_timer.timeout.disconnect(self._border_blink)
        self.border_blink_timer.timeout.disconnect(self._start_border_blinking)

    def destroy_all_enemies(self) -> None:
        """Blow up every enemy tank on the field."""
        for item in self.items():
            if item.name == "Enemy":
                self._spawn_explosion_at(item)
                item.set_require_to_destroy(True)

    def _spawn_explosion_at(self, entity: Entity) -> None:
        explosion = Explosion(
            (entity.x - entity.width, entity.y - entity.height), entity.width
        )
        self.add_item(explosion)
        explosion.start_animation()

    def enemy_destroyed(self) -> None:
        """Count a kill: add points, update the panel, win after the last enemy."""
        self.score += POINTS_PER_ENEMY
        if self.score == self.enemy_count * POINTS_PER_ENEMY:
            self.game_win()
        self._rebuild_score()
        if self.enemy_lives:
            self.enemy_lives.pop().set_require_to_destroy(True)

    def score_digits(self) -> list[int]:
        """Decimal digits of the score, most significant first; none for zero."""
        if not self.score:
            return []
        return [int(char) for char in str(self.score)]

    def _rebuild_score(self) -> None:
        for item in self.score_items:
            item.set_require_to_destroy(True)
        half = self.length_block // 2
        self.score_items = [
            Entity(_digit_image(digit), half, half) for digit in self.score_digits()
        ]
        self._show_score()

    def _show_score(self) -> None:
        for index, item in enumerate(self.score_items):
            self.add_item(item)
            item.set_pos(self.score_x + index * self.length_block, self.score_y)

    def player_picked_bonus(self, bonus: BonusType) -> None:
        """Apply the scene-wide part of a bonus the player picked up."""
        bonus = BonusType(bonus)
        if bonus is BonusType.GRENADE:
            self.destroy_all_enemies()
        elif bonus is BonusType.SHOVEL:
            self.spawn_border()

    def available_point(self) -> tuple[int, int]:
        """A random free cell's top-left corner."""
        span_x = int(self.interface_rect.width - self.length_block)
        span_y = int(self.last_height - self.length_block)
        if span_x <= 0 or span_y <= 0:
            raise ValueError("no room to place an item")
        while True:
            x = self._rng.randrange(span_x)
            y = self._rng.randrange(span_y)
            if self.is_cell_available(x, y):
                return (x, y)

    def is_cell_available(self, x: float, y: float) -> bool:
        """Whether a block-sized cell at the point is free of items."""
        lb = self.length_block
        points = (
            (x, y),
            (x + lb, y),
            (x, y + lb),
            (x + lb, y + lb),
            (x + lb // 2, y + lb // 2),
        )
        if any(self.item_at(px, py) is not None for px, py in points):
            return False
        return self.item_at(x, y) not in self.border