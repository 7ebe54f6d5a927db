"""Bullets, tanks and the spawn animation that brings enemies in."""

from __future__ import annotations

import random
from typing import Callable

from battlecity.audio import Audio
from battlecity.effects import BonusType, Explosion, ScorePopup, Shield
from battlecity.entity import (
    BULLET_SPEED,
    ENEMY_SHOOT_DELTA,
    ENEMY_SWAP_DIRECTION_DELTA,
    SWAP_FRAMES_DELTA,
    TANK_SPEED,
    Direction,
    Entity,
    EntityType,
    Key,
    RigidBody,
    Signal,
    Timer,
    rotation_angle,
)

BULLET_IMAGE = "images/bullet.png"
PLAYER_IMAGE = "images/tank.png"
ENEMY_FAST_IMAGE = "images/tank1up.png"
ENEMY_SLOW_IMAGE = "images/tank2up.png"
BLINK_FRAMES = tuple(f"images/blink/blink{index}.png" for index in range(1, 5))

ARROW_KEYS = (Key.UP, Key.DOWN, Key.LEFT, Key.RIGHT)

_VELOCITIES = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


def _start_timer(owner: Entity, interval: int, slot: Callable[[], object]) -> Timer:
    timer = Timer()
    timer.timeout.connect(slot)
    owner.timers.append(timer)
    timer.start(interval)
    return timer


class Bullet(RigidBody):
    """A shot flying straight until it hits something or leaves the field."""

    def __init__(self, direction: Direction, width: float) -> None:
        super().__init__(BULLET_IMAGE, width, width)
        self.destructible = True
        self.lives_left = 1
        self.bullet_can_pass = False
        self.actor_can_pass = False
        self.entity_type = EntityType.BULLET

        Audio.instance().play_shoot()

        direction = Direction(direction)
        self.rotate(rotation_angle(self.direction, direction))
        self.direction = direction
        ux, uy = _VELOCITIES[direction]
        self.dx = ux * BULLET_SPEED
        self.dy = uy * BULLET_SPEED

    def advance(self) -> None:
        self.move_by(self.dx, self.dy)
        self._handle_border()
        if self.scene is not None:
            for item in self.scene.colliding_items(self):
                self._handle_collision(item)
        super().advance()

    def _handle_collision(self, entity: Entity) -> None:
        if entity.bullet_can_pass:
            return
        explosion = Explosion(
            (entity.x + entity.width, entity.y + entity.height), entity.width
        )
        self.scene.add_item(explosion)
        explosion.start_animation()
        self.set_require_to_destroy(True)
        if entity.destructible:
            entity.take_damage()

    def _handle_border(self) -> None:
        bx, by = self.border
        if self.x < 0 or self.x >= bx or self.y >= by or self.y < 0:
            self.set_require_to_destroy(True)


class Tank(RigidBody):
    """A vehicle that drives in its facing direction and fires one shot at a time."""

    def __init__(
        self,
        image: str = "",
        width: float = 0,
        height: float | None = None,
        parent: Entity | None = None,
    ) -> None:
        super().__init__(image, width, width if height is None else height, parent)
        self.destructible = True
        self.bullet_can_pass = False
        self.actor_can_pass = False
        self.can_fire = True
        self.speed = 0

    def can_move_in_direction(self, dx: float, dy: float) -> bool:
        """Whether the point offset from the tank's corner may be entered."""
        sx, sy = self.scene_pos
        px, py = sx + dx, sy + dy
        item = self.scene.item_at(px, py) if self.scene is not None else None
        if item is not None:
            return item.actor_can_pass
        bx, by = self.border
        return 0 < px < bx and 0 < py < by

    def move_and_collide(self, dx: float, dy: float) -> None:
        """Move by the offset if the leading edge is clear at three points."""
        w, h = self.width, self.height
        if self.direction is Direction.UP:
            points = ((dx, dy), (w // 2 + dx, dy), (w + dx, dy))
        elif self.direction is Direction.DOWN:
            points = ((dx, dy + h), (w // 2 + dx, dy + h), (w + dx, dy + h))
        elif self.direction is Direction.RIGHT:
            points = ((dx + w, dy), (dx + w, dy + h // 2), (dx + h, dy + h))
        else:
            points = ((dx, dy), (dx, dy + h // 2), (dx, dy + h))
        if all(self.can_move_in_direction(px, py) for px, py in points):
            self.move_by(dx, dy)

    def advance(self) -> None:
        if self.speed:
            ux, uy = _VELOCITIES[self.direction]
            self.move_and_collide(ux * self.speed, uy * self.speed)
        super().advance()

    def shoot(self) -> Bullet | None:
        """Fire a bullet unless one of ours is still flying."""
        if not self.can_fire:
            return None
        if self.scene is None:
            raise RuntimeError("a tank can only shoot inside a scene")
        self.can_fire = False

        bullet = Bullet(self.direction, self.width // 5)
        bullet.border = self.border
        self.scene.add_item(bullet)
        w, h, bw, bh = self.width, self.height, bullet.width, bullet.height
        if self.direction is Direction.UP:
            pos = (self.x + w // 2 - bw // 2, self.y - bh)
        elif self.direction is Direction.DOWN:
            pos = (self.x + w // 2 - bw // 2, self.y + h + bw)
        elif self.direction is Direction.LEFT:
            pos = (self.x - bw, self.y + h // 2 - bw // 2)
        else:
            pos = (self.x + w + bw, self.y + h // 2 - bw // 2)
        bullet.set_pos(*pos)
        bullet.destroyed.connect(self._reload)
        return bullet

    def _reload(self) -> None:
        self.can_fire = True


class EnemyTank(Tank):
    """A computer-driven tank that turns and fires on timers."""

    def __init__(self, width: float, rng: random.Random | None = None) -> None:
        super().__init__(ENEMY_FAST_IMAGE, width)
        self._rng = rng or random.Random()
        if self._rng.randrange(2):
            self.image = ENEMY_SLOW_IMAGE
            self.speed = TANK_SPEED
            self.lives_left = 1
        else:
            self.speed = TANK_SPEED * 2
            self.lives_left = 2
        self.change_direction()

        self.name = "Enemy"
        self.entity_type = EntityType.ENEMY_TANK
        self.destroyed.connect(Audio.instance().play_explosion)

        self._direction_timer = _start_timer(
            self, ENEMY_SWAP_DIRECTION_DELTA, self.change_direction
        )
        self._shoot_timer = _start_timer(self, ENEMY_SHOOT_DELTA, self.shoot)

    def change_direction(self) -> Direction:
        """Face a random direction."""
        return self.turn_to(ARROW_KEYS[self._rng.randrange(len(ARROW_KEYS))])

    def advance(self) -> None:
        if self.require_to_destroy and self.scene is not None:
            popup = ScorePopup(self.width)
            self.scene.add_item(popup)
            popup.set_pos(*self.scene_pos)
        super().advance()


class PlayerTank(Tank):
    """The keyboard-driven tank; respawns under a shield when hit."""

    def __init__(self, width: float) -> None:
        super().__init__(PLAYER_IMAGE, width)
        self.entity_type = EntityType.PLAYER_TANK
        self.shield: Shield | None = None
        self.respawn_pos: tuple[float, float] = (0.0, 0.0)
        self._direction_queue: list[Key] = []
        self.lives_left = 3

    def pickup_bonus(self, bonus_type: BonusType) -> None:
        """Apply a picked bonus; scene-wide effects are passed on as signals."""
        bonus_type = BonusType(bonus_type)
        if bonus_type in (BonusType.GRENADE, BonusType.SHOVEL):
            self.bonus_picked.emit(bonus_type)
        elif bonus_type is BonusType.SHIELD:
            self._create_shield()
        else:
            self.bonus_picked.emit(BonusType.SHOVEL)
            self.bonus_picked.emit(BonusType.GRENADE)
            self._create_shield()

    def set_respawn_pos(self, x: float, y: float) -> None:
        self.respawn_pos = (x, y)
        self.respawn()

    def respawn(self) -> None:
        self.set_pos(*self.respawn_pos)
        self._create_shield()

    def key_press(self, key: Key) -> None:
        if key in ARROW_KEYS:
            self.speed = TANK_SPEED
            self.turn_to(key)
            if key not in self._direction_queue:
                self._direction_queue.append(key)
        elif key == Key.SPACE:
            self.shoot()

    def key_release(self, key: Key) -> None:
        if key not in ARROW_KEYS:
            return
        if key in self._direction_queue:
            self._direction_queue.remove(key)
        if self._direction_queue:
            self.turn_to(self._direction_queue[-1])
        else:
            self.speed = 0

    def can_move_in_direction(self, dx: float, dy: float) -> bool:
        if self.scene is not None:
            sx, sy = self.scene_pos
            item = self.scene.item_at(sx + dx, sy + dy)
            if item is not None and item.name == "Bonus":
                item.set_picked(True)
        return super().can_move_in_direction(dx, dy)

    def take_damage(self) -> None:
        if self.shield is not None:
            return
        self.respawn()
        super().take_damage()

    def _create_shield(self) -> None:
        if self.shield is not None:
            self.shield.reset_timer()
            return
        self.shield = Shield(self, self.width)
        self.shield.destroyed.connect(self._drop_shield)

    def _drop_shield(self) -> None:
        self.shield = None


class Blink(Entity):
    """The flashing marker that turns into an enemy tank when it finishes."""

    def __init__(self, width: float, rng: random.Random | None = None) -> None:
        super().__init__("", width, width)
        self.destructible = False
        self.bullet_can_pass = True
        self.actor_can_pass = False
        self.enemy_respawned = Signal()
        self.frame = 0
        self._rng = rng
        self._frames_timer: Timer | None = None
        self.change_frame()

    def start_animation(self) -> None:
        self._frames_timer = _start_timer(self, SWAP_FRAMES_DELTA, self.change_frame)

    def change_frame(self) -> None:
        """Show the next frame; after the last one spawn the enemy."""
        self.image = BLINK_FRAMES[self.frame]
        self.frame += 1
        if self.frame == len(BLINK_FRAMES):
            if self._frames_timer is not None:
                self._frames_timer.stop()
            self._create_enemy()
            self.set_require_to_destroy(True)

    def _create_enemy(self) -> None:
        if self.scene is None:
            raise RuntimeError("an enemy can only spawn inside a scene")
        enemy = EnemyTank(self.width, self._rng)
        enemy.border = self.border
        self.scene.add_item(enemy)
        enemy.set_pos(*self.scene_pos)
        self.enemy_respawned.emit(enemy)