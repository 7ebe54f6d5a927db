"""Blocks, the base, bonuses and short-lived visual effects."""

from __future__ import annotations

import enum
import random

from battlecity.entity import (
    BONUS_DURATION,
    SCORE_DURATION,
    SWAP_FRAMES_DELTA,
    Entity,
    EntityType,
    Signal,
    Timer,
)

BRICK_IMAGE = "images/static_blocks/brick.png"
BUSH_IMAGE = "images/static_blocks/bush.png"
CONCRETE_IMAGE = "images/static_blocks/concrete.png"
WATER_FRAMES = (
    "images/static_blocks/water1.png",
    "images/static_blocks/water2.png",
)
EXPLOSION_FRAMES = tuple(
    f"images/explosion/explosion{index}.png" for index in range(1, 6)
)
SCORE_IMAGE = "images/100point.png"
SHIELD_FRAMES = ("images/shield/shield1.png", "images/shield/shield2.png")
BASE_IMAGE = "images/base.png"
LOSS_IMAGE = "images/loss.png"
GAME_OVER_IMAGE = "images/gameover.png"

BONUS_BLINK_LEAD = 2000


def _timer(owner: Entity, interval: int, slot) -> Timer:
    timer = Timer()
    timer.timeout.connect(slot)
    owner.timers.append(timer)
    timer.start(interval)
    return timer


class BlockType(enum.IntEnum):
    BRICK = 0
    BUSH = 1
    CONCRETE = 2
    WATER = 3


class StaticBody(Entity):
    """A map block: brick, bush, concrete or animated water."""

    def __init__(self, block_type: BlockType, width: float) -> None:
        super().__init__("", width, width)
        self.block_type = BlockType(block_type)
        self._show_second_frame = True
        self.lives_left = 1
        if self.block_type is BlockType.BRICK:
            self.image = BRICK_IMAGE
            self.destructible = True
            self.bullet_can_pass = False
            self.actor_can_pass = False
        elif self.block_type is BlockType.BUSH:
            self.image = BUSH_IMAGE
            self.destructible = False
            self.bullet_can_pass = True
            self.actor_can_pass = True
            self.z = 2
        elif self.block_type is BlockType.CONCRETE:
            self.image = CONCRETE_IMAGE
            self.destructible = False
            self.bullet_can_pass = False
            self.actor_can_pass = False
        else:
            self.image = WATER_FRAMES[0]
            self.destructible = False
            self.bullet_can_pass = True
            self.actor_can_pass = False
            _timer(self, SWAP_FRAMES_DELTA, self.change_frame)
        self.name = "StaticBody"
        self.entity_type = EntityType.STATIC_BLOCK

    def change_frame(self) -> None:
        """Alternate between the two water frames."""
        self.image = WATER_FRAMES[1] if self._show_second_frame else WATER_FRAMES[0]
        self._show_second_frame = not self._show_second_frame


class Explosion(Entity):
    """An explosion animation kept centred on a fixed point."""

    def __init__(self, center: tuple[float, float], width: float) -> None:
        super().__init__("", width, width)
        self.center = center
        self.destructible = False
        self.bullet_can_pass = True
        self.actor_can_pass = True
        self.lives_left = 1
        self.z = 3
        self.entity_type = EntityType.EXPLOSION
        self.frame = 0
        self._frame_timer: Timer | None = None
        self.change_frame()

    def start_animation(self) -> None:
        self._frame_timer = _timer(self, SWAP_FRAMES_DELTA // 2, self.change_frame)

    def change_frame(self) -> None:
        """Show the next frame; after the last one ask to be destroyed."""
        self.image = EXPLOSION_FRAMES[self.frame]
        self.frame += 1
        cx, cy = self.center
        self.set_pos(cx - self.height, cy - self.width)
        if self.frame == len(EXPLOSION_FRAMES):
            if self._frame_timer is not None:
                self._frame_timer.stop()
            self.set_require_to_destroy(True)


class ScorePopup(Entity):
    """The points label that drifts up after an enemy dies."""

    def __init__(self, width: float) -> None:
        super().__init__(SCORE_IMAGE, width // 2, width // 2)
        self.destructible = False
        self.bullet_can_pass = True
        self.actor_can_pass = True
        self.z = 3
        _timer(self, SCORE_DURATION, lambda: self.set_require_to_destroy(True))

    def advance(self) -> None:
        self.move_by(1, -1)
        super().advance()


class Shield(Entity):
    """A blinking shield attached to its owner for a limited time."""

    def __init__(self, parent: Entity, width: float) -> None:
        super().__init__(SHIELD_FRAMES[0], width, width, parent)
        self.entity_type = EntityType.SHIELD
        self._show_second_frame = True
        self._blink_timer = _timer(self, SWAP_FRAMES_DELTA, self.swap_frames)
        self._remaining_timer = _timer(
            self, BONUS_DURATION, lambda: self.set_require_to_destroy(True)
        )

    def reset_timer(self) -> None:
        """Restart the shield's full duration."""
        self._remaining_timer.stop()
        self._remaining_timer.start(BONUS_DURATION)

    def swap_frames(self) -> None:
        self.image = SHIELD_FRAMES[1] if self._show_second_frame else SHIELD_FRAMES[0]
        self._show_second_frame = not self._show_second_frame


class Base(Entity):
    """The player's base; leaves a ruin behind when destroyed."""

    def __init__(self, width: float) -> None:
        super().__init__(BASE_IMAGE, width, width)
        self.destructible = True
        self.entity_type = EntityType.BASE

    def advance(self) -> None:
        if self.require_to_destroy and self.scene is not None:
            ruin = Entity(LOSS_IMAGE, self.width, self.width)
            self.scene.add_item(ruin)
            ruin.set_pos(*self.scene_pos)
        super().advance()


class BonusType(enum.IntEnum):
    SHOVEL = 0
    GRENADE = 1
    STAR = 2
    SHIELD = 3


BONUS_IMAGES = {
    BonusType.GRENADE: "images/bonus/granade.png",
    BonusType.SHIELD: "images/bonus/helmet.png",
    BonusType.SHOVEL: "images/bonus/shovel.png",
    BonusType.STAR: "images/bonus/star.png",
}


class Bonus(Entity):
    """A pick-up that blinks before it expires."""

    def __init__(
        self,
        width: float,
        parent: Entity | None = None,
        bonus_type: BonusType | None = None,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__("", width, width, parent)
        self.destructible = False
        self.bullet_can_pass = True
        self.actor_can_pass = True
        self.lives_left = 1
        self.name = "Bonus"
        self.entity_type = EntityType.BONUS
        if bonus_type is None:
            bonus_type = BonusType((rng or random).randrange(len(BonusType)))
        self.bonus_type = BonusType(bonus_type)
        self.image = BONUS_IMAGES[self.bonus_type]
        self._hide_next = True
        self._frame_timer = _timer(
            self, BONUS_DURATION - BONUS_BLINK_LEAD, self._start_blinking
        )
        _timer(self, BONUS_DURATION, lambda: self.set_require_to_destroy(True))

    def _start_blinking(self) -> None:
        self._frame_timer.stop()
        self._frame_timer.timeout.disconnect(self._start_blinking)
        self._frame_timer.timeout.connect(self.toggle_visible)
        self._frame_timer.start(SWAP_FRAMES_DELTA)

    def toggle_visible(self) -> None:
        self.visible = not self._hide_next
        self._hide_next = not self._hide_next

    def advance(self) -> None:
        if self.picked:
            self.bonus_picked.emit(self.bonus_type)
            self.set_require_to_destroy(True)
        super().advance()


class GameOverItem(Entity):
    """The game-over banner that rises to the centre of the field."""

    def __init__(
        self, center: tuple[float, float], width: float = 0, height: float = 0
    ) -> None:
        super().__init__(GAME_OVER_IMAGE, width, height)
        self.center = center
        self.z = 5
        self.moved_to_center = Signal()

    def advance(self) -> None:
        if self.y > self.center[1]:
            self.move_by(0, -2)
        else:
            self.moved_to_center.emit()
            self.set_require_to_destroy(True)
        super().advance()