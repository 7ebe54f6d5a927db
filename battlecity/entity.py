"""Signals, timers, the scene and the entities that live in it."""

from __future__ import annotations

import enum
import itertools
from typing import Any, Callable

SWAP_FRAMES_DELTA = 150
BONUS_DURATION = 7000
ENEMY_SWAP_DIRECTION_DELTA = 1000
ENEMY_SHOOT_DELTA = 1000
TANK_SPEED = 4
BULLET_SPEED = 6
SCORE_DURATION = 2000


class Signal:
    """A list of callbacks invoked together."""

    def __init__(self) -> None:
        self._slots: list[Callable[..., Any]] = []

    def __len__(self) -> int:
        return len(self._slots)

    def connect(self, slot: Callable[..., Any]) -> None:
        self._slots.append(slot)

    def disconnect(self, slot: Callable[..., Any]) -> bool:
        """Remove one connection of ``slot``; report whether there was one."""
        try:
            self._slots.remove(slot)
        except ValueError:
            return False
        return True

    def emit(self, *args: Any) -> None:
        for slot in list(self._slots):
            slot(*args)


class Timer:
    """A repeating timer driven by elapsed milliseconds."""

    def __init__(self) -> None:
        self.timeout = Signal()
        self.interval = 0
        self.active = False
        self._elapsed = 0

    def start(self, interval: int) -> None:
        if interval <= 0:
            raise ValueError("timer interval must be positive")
        self.interval = interval
        self._elapsed = 0
        self.active = True

    def stop(self) -> None:
        self.active = False
        self._elapsed = 0

    def tick(self, elapsed: int) -> int:
        """Advance by ``elapsed`` ms, firing timeouts; return how many fired."""
        if elapsed < 0:
            raise ValueError("elapsed time cannot be negative")
        if not self.active:
            return 0
        self._elapsed += elapsed
        fired = 0
        while self.active and self._elapsed >= self.interval:
            self._elapsed -= self.interval
            fired += 1
            self.timeout.emit()
        return fired


class Key(enum.IntEnum):
    ESCAPE = 0x01000000
    RETURN = 0x01000004
    ENTER = 0x01000005
    LEFT = 0x01000012
    UP = 0x01000013
    RIGHT = 0x01000014
    DOWN = 0x01000015
    SPACE = 0x20


class EntityType(enum.IntEnum):
    UNKNOWN = 0
    PLAYER_TANK = 1
    ENEMY_TANK = 2
    BULLET = 3
    STATIC_BLOCK = 4
    BONUS = 5
    BASE = 6
    EXPLOSION = 7
    SHIELD = 8


class Direction(enum.IntEnum):
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3

    @staticmethod
    def from_key(key: Key) -> Direction:
        """The direction an arrow key points; anything else counts as up."""
        return _KEY_DIRECTIONS.get(key, Direction.UP)


_KEY_DIRECTIONS = {
    Key.UP: Direction.UP,
    Key.DOWN: Direction.DOWN,
    Key.LEFT: Direction.LEFT,
    Key.RIGHT: Direction.RIGHT,
}

_HEADINGS = {
    Direction.UP: 0,
    Direction.RIGHT: 90,
    Direction.DOWN: 180,
    Direction.LEFT: 270,
}


def rotation_angle(current: Direction, new: Direction) -> int:
    """Degrees to turn an image facing ``current`` so it faces ``new``."""
    delta = (_HEADINGS[new] - _HEADINGS[current]) % 360
    return -90 if delta == 270 else delta


class Scene:
    """Holds entities and timers and drives them forward."""

    def __init__(self, width: float = 0.0, height: float = 0.0) -> None:
        self.width = width
        self.height = height
        self._items: list[Entity] = []
        self._timers: list[Timer] = []
        self._pending: list[Entity] = []
        self._order = itertools.count()

    def add_item(self, item: Entity) -> None:
        if item.scene is self:
            return
        if item.scene is not None:
            item.scene.remove_item(item)
        item.scene = self
        item._stack_order = next(self._order)
        self._items.append(item)
        for child in item.children:
            self.add_item(child)

    def remove_item(self, item: Entity) -> None:
        if item.scene is not self:
            raise ValueError("item is not in this scene")
        for child in item.children:
            if child.scene is self:
                self.remove_item(child)
        self._items.remove(item)
        item.scene = None

    def items(self) -> list[Entity]:
        """All items, topmost first."""
        return sorted(self._items, key=lambda item: item._stacking_key(), reverse=True)

    def item_at(self, x: float, y: float) -> Entity | None:
        """The topmost visible item covering the point, if any."""
        for item in self.items():
            if item.is_visible() and item.contains(x, y):
                return item
        return None

    def colliding_items(self, entity: Entity) -> list[Entity]:
        return [
            item
            for item in self.items()
            if item is not entity and item.is_visible() and entity.collides_with(item)
        ]

    def add_timer(self, timer: Timer) -> Timer:
        self._timers.append(timer)
        return timer

    def tick(self, elapsed: int) -> None:
        """Let ``elapsed`` ms pass for the scene's timers and its items' timers."""
        for timer in list(self._timers):
            timer.tick(elapsed)
        for item in list(self._items):
            if item.scene is self:
                for timer in list(item.timers):
                    timer.tick(elapsed)

    def advance(self) -> None:
        """Advance every item one step, then delete those that asked for it."""
        for item in list(self._items):
            if item.scene is self:
                item.advance()
        pending, self._pending = self._pending, []
        for item in pending:
            self._delete(item)

    def _defer_delete(self, item: Entity) -> None:
        if not item.deleted and item not in self._pending:
            self._pending.append(item)

    def _delete(self, item: Entity) -> None:
        if item.deleted:
            return
        if item.scene is self:
            self.remove_item(item)
        for child in list(item.children):
            self._delete(child)
        if item.parent is not None and item in item.parent.children:
            item.parent.children.remove(item)
        item._deleted = True
        item.destroyed.emit()


class Entity:
    """A sized, positioned game object with gameplay flags."""

    def __init__(
        self,
        image: str = "",
        width: float = 0,
        height: float = 0,
        parent: Entity | None = None,
    ) -> None:
        self.image = image
        self.width = width
        self.height = height
        self.x = 0.0
        self.y = 0.0
        self.z = 0.0
        self.visible = True
        self.rotation = 0
        self.scene: Scene | None = None
        self.parent = parent
        self.children: list[Entity] = []
        self.timers: list[Timer] = []

        self.bonus_picked = Signal()
        self.lives_left_changed = Signal()
        self.about_to_be_destroyed = Signal()
        self.destroyed = Signal()

        self.border = (0.0, 0.0)
        self.destructible = False
        self.bullet_can_pass = False
        self.actor_can_pass = False
        self.pickable = False
        self.picked = False
        self.name = "Entity"
        self.entity_type = EntityType.UNKNOWN
        self._lives_left = 1
        self._require_to_destroy = False
        self._deleted = False
        self._stack_order = 0

        if parent is not None:
            parent.children.append(self)
            if parent.scene is not None:
                parent.scene.add_item(self)

    @property
    def lives_left(self) -> int:
        return self._lives_left

    @lives_left.setter
    def lives_left(self, value: int) -> None:
        if value < 0:
            raise ValueError("lives left cannot be negative")
        self._lives_left = value
        self.lives_left_changed.emit(value)
        if value == 0:
            self.set_require_to_destroy(True)

    @property
    def require_to_destroy(self) -> bool:
        return self._require_to_destroy

    @property
    def deleted(self) -> bool:
        return self._deleted

    @property
    def scene_pos(self) -> tuple[float, float]:
        if self.parent is None:
            return (self.x, self.y)
        px, py = self.parent.scene_pos
        return (px + self.x, py + self.y)

    def _stacking_key(self) -> tuple:
        own = ((self.z, self._stack_order),)
        if self.parent is None:
            return own
        return self.parent._stacking_key() + own

    def is_visible(self) -> bool:
        return self.visible and (self.parent is None or self.parent.is_visible())

    def set_pos(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    def move_by(self, dx: float, dy: float) -> None:
        self.x += dx
        self.y += dy

    def contains(self, x: float, y: float) -> bool:
        """Whether the scene point lies within this entity's rectangle."""
        sx, sy = self.scene_pos
        return sx <= x < sx + self.width and sy <= y < sy + self.height

    def collides_with(self, other: Entity) -> bool:
        ax, ay = self.scene_pos
        bx, by = other.scene_pos
        return (
            ax < bx + other.width
            and bx < ax + self.width
            and ay < by + other.height
            and by < ay + self.height
        )

    def set_require_to_destroy(self, state: bool = True) -> None:
        if self._require_to_destroy != state:
            self._require_to_destroy = state
            if state:
                self.about_to_be_destroyed.emit()

    def take_damage(self) -> None:
        if self.lives_left > 0:
            self.lives_left -= 1

    def set_picked(self, state: bool = True) -> None:
        self.picked = state

    def advance(self) -> None:
        if self._require_to_destroy and self.scene is not None:
            self.scene._defer_delete(self)


class RigidBody(Entity):
    """An entity that faces one of four directions."""

    def __init__(
        self,
        image: str = "",
        width: float = 0,
        height: float = 0,
        parent: Entity | None = None,
    ) -> None:
        super().__init__(image, width, height, parent)
        self.direction = Direction.UP

    def rotate(self, angle: int) -> None:
        """Turn the image by a multiple of 90 degrees."""
        if angle % 90:
            raise ValueError("rotation must be a multiple of 90 degrees")
        self.rotation = (self.rotation + angle) % 360
        if angle % 180:
            self.width, self.height = self.height, self.width

    def turn_to(self, key: Key) -> Direction:
        """Face the direction of ``key`` and return it."""
        new = Direction.from_key(key)
        self.rotate(rotation_angle(self.direction, new))
        self.direction = new
        return new