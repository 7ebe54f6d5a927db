import random

import pytest

from battlecity.effects import BlockType, Bonus, BonusType, Explosion, ScorePopup, StaticBody
from battlecity.entity import (
    BULLET_SPEED,
    ENEMY_SHOOT_DELTA,
    SWAP_FRAMES_DELTA,
    TANK_SPEED,
    Direction,
    Key,
    Scene,
)
from battlecity.tanks import BLINK_FRAMES, Blink, Bullet, EnemyTank, PlayerTank, Tank


def _scene():
    return Scene(200, 200)


def _bullet(scene, direction, x, y, width=4):
    bullet = Bullet(direction, width)
    bullet.border = (100, 100)
    scene.add_item(bullet)
    bullet.set_pos(x, y)
    return bullet


def test_bullet_moves_at_bullet_speed():
    scene = _scene()
    bullet = _bullet(scene, Direction.RIGHT, 10, 10)
    scene.advance()
    assert (bullet.x, bullet.y) == (10 + BULLET_SPEED, 10)
    assert bullet.direction is Direction.RIGHT


def test_bullet_moving_up_decreases_y():
    scene = _scene()
    bullet = _bullet(scene, Direction.UP, 50, 50)
    scene.advance()
    assert (bullet.x, bullet.y) == (50, 50 - BULLET_SPEED)


def test_bullet_leaving_border_is_deleted():
    scene = _scene()
    bullet = _bullet(scene, Direction.RIGHT, 98, 10)
    scene.advance()
    assert bullet.deleted
    assert bullet not in scene.items()


def test_bullet_damages_brick():
    scene = _scene()
    brick = StaticBody(BlockType.BRICK, 10)
    scene.add_item(brick)
    brick.set_pos(20, 0)
    bullet = _bullet(scene, Direction.RIGHT, 14, 2)
    scene.advance()
    assert brick.lives_left == 0
    assert brick.require_to_destroy
    assert bullet.deleted
    assert any(isinstance(item, Explosion) for item in scene.items())


def test_bullet_stopped_by_concrete_without_damage():
    scene = _scene()
    concrete = StaticBody(BlockType.CONCRETE, 10)
    scene.add_item(concrete)
    concrete.set_pos(20, 0)
    bullet = _bullet(scene, Direction.RIGHT, 14, 2)
    scene.advance()
    assert concrete.lives_left == 1
    assert not concrete.require_to_destroy
    assert bullet.deleted


def test_bullet_passes_through_bush():
    scene = _scene()
    bush = StaticBody(BlockType.BUSH, 10)
    scene.add_item(bush)
    bush.set_pos(20, 0)
    bullet = _bullet(scene, Direction.RIGHT, 14, 2)
    scene.advance()
    assert not bullet.deleted
    assert bullet in scene.items()
    assert not any(isinstance(item, Explosion) for item in scene.items())


def _tank(scene, x=50, y=50, width=20):
    tank = Tank("", width)
    tank.border = (200, 200)
    scene.add_item(tank)
    tank.set_pos(x, y)
    return tank


def test_can_move_inside_border_on_empty_field():
    scene = _scene()
    tank = _tank(scene)
    assert tank.can_move_in_direction(0, -4)
    assert not tank.can_move_in_direction(0, -60)


def test_can_move_depends_on_block_type():
    scene = _scene()
    tank = _tank(scene)
    concrete = StaticBody(BlockType.CONCRETE, 10)
    scene.add_item(concrete)
    concrete.set_pos(50, 40)
    bush = StaticBody(BlockType.BUSH, 10)
    scene.add_item(bush)
    bush.set_pos(70, 40)
    assert not tank.can_move_in_direction(0, -4)
    assert tank.can_move_in_direction(22, -4)


def test_tank_advance_moves_when_clear():
    scene = _scene()
    tank = _tank(scene)
    tank.speed = TANK_SPEED
    tank.turn_to(Key.LEFT)
    scene.advance()
    assert (tank.x, tank.y) == (50 - TANK_SPEED, 50)


def test_tank_blocked_by_concrete():
    scene = _scene()
    tank = _tank(scene)
    concrete = StaticBody(BlockType.CONCRETE, 20)
    scene.add_item(concrete)
    concrete.set_pos(50, 30)
    tank.speed = TANK_SPEED
    scene.advance()
    assert (tank.x, tank.y) == (50, 50)


def test_shoot_one_bullet_at_a_time():
    scene = _scene()
    tank = _tank(scene)
    bullet = tank.shoot()
    assert isinstance(bullet, Bullet)
    assert tank.shoot() is None
    assert sum(isinstance(item, Bullet) for item in scene.items()) == 1
    assert bullet.y == tank.y - bullet.height
    assert bullet.border == tank.border


def test_shoot_again_after_bullet_deleted():
    scene = _scene()
    tank = _tank(scene, x=50, y=10)
    bullet = tank.shoot()
    scene.advance()
    assert bullet.deleted
    assert tank.can_fire
    assert isinstance(tank.shoot(), Bullet)


def test_shoot_outside_scene_raises():
    with pytest.raises(RuntimeError):
        Tank("", 20).shoot()


@pytest.mark.parametrize("seed", range(6))
def test_enemy_speed_matches_lives(seed):
    enemy = EnemyTank(20, random.Random(seed))
    assert enemy.speed in (TANK_SPEED, TANK_SPEED * 2)
    assert (enemy.speed == TANK_SPEED) == (enemy.lives_left == 1)
    assert enemy.name == "Enemy"
    assert enemy.direction in tuple(Direction)


def test_enemy_shoots_on_timer():
    scene = _scene()
    enemy = EnemyTank(20, random.Random(1))
    enemy.border = (200, 200)
    scene.add_item(enemy)
    enemy.set_pos(90, 90)
    scene.tick(ENEMY_SHOOT_DELTA)
    assert sum(isinstance(item, Bullet) for item in scene.items()) == 1


def test_destroyed_enemy_leaves_score_popup():
    scene = _scene()
    enemy = EnemyTank(20, random.Random(2))
    scene.add_item(enemy)
    enemy.set_pos(30, 40)
    enemy.set_require_to_destroy(True)
    scene.advance()
    popups = [item for item in scene.items() if isinstance(item, ScorePopup)]
    assert len(popups) == 1
    assert (popups[0].x, popups[0].y) == (30, 40)
    assert enemy.deleted


def _player(scene=None):
    player = PlayerTank(20)
    player.border = (200, 200)
    if scene is not None:
        scene.add_item(player)
    return player


def test_player_starts_with_three_lives_and_shield_on_respawn():
    scene = _scene()
    player = _player(scene)
    assert player.lives_left == 3
    player.set_respawn_pos(40, 60)
    assert (player.x, player.y) == (40, 60)
    assert player.shield is not None
    assert player.shield in scene.items()


def test_shield_absorbs_damage_until_gone():
    scene = _scene()
    player = _player(scene)
    player.set_respawn_pos(40, 60)
    player.take_damage()
    assert player.lives_left == 3
    player.shield.set_require_to_destroy(True)
    scene.advance()
    assert player.shield is None
    player.set_pos(100, 100)
    player.take_damage()
    assert player.lives_left == 2
    assert (player.x, player.y) == (40, 60)
    assert player.shield is not None


def test_key_queue_controls_direction_and_speed():
    player = _player()
    player.key_press(Key.UP)
    assert player.speed == TANK_SPEED
    assert player.direction is Direction.UP
    player.key_press(Key.LEFT)
    assert player.direction is Direction.LEFT
    player.key_release(Key.LEFT)
    assert player.direction is Direction.UP
    assert player.speed == TANK_SPEED
    player.key_release(Key.UP)
    assert player.speed == 0


def test_space_shoots():
    scene = _scene()
    player = _player(scene)
    player.set_pos(50, 50)
    player.key_press(Key.SPACE)
    assert sum(isinstance(item, Bullet) for item in scene.items()) == 1
    assert not player.can_fire


def test_star_emits_shovel_then_grenade_and_shields():
    player = _player()
    received = []
    player.bonus_picked.connect(received.append)
    player.pickup_bonus(BonusType.STAR)
    assert received == [BonusType.SHOVEL, BonusType.GRENADE]
    assert player.shield is not None


def test_grenade_is_passed_on_without_shield():
    player = _player()
    received = []
    player.bonus_picked.connect(received.append)
    player.pickup_bonus(BonusType.GRENADE)
    assert received == [BonusType.GRENADE]
    assert player.shield is None


def test_driving_onto_bonus_picks_it():
    scene = _scene()
    player = _player(scene)
    player.set_pos(50, 50)
    bonus = Bonus(20, bonus_type=BonusType.SHIELD)
    scene.add_item(bonus)
    bonus.set_pos(50, 30)
    assert player.can_move_in_direction(0, -4)
    assert bonus.picked


def test_blink_spawns_enemy_after_last_frame():
    scene = _scene()
    blink = Blink(20, random.Random(3))
    blink.border = (200, 200)
    scene.add_item(blink)
    blink.set_pos(60, 70)
    spawned = []
    blink.enemy_respawned.connect(spawned.append)
    blink.start_animation()
    scene.tick(SWAP_FRAMES_DELTA * (len(BLINK_FRAMES) - 1))
    assert len(spawned) == 1
    enemy = spawned[0]
    assert isinstance(enemy, EnemyTank)
    assert (enemy.x, enemy.y) == (60, 70)
    assert enemy.border == blink.border
    assert blink.frame == len(BLINK_FRAMES)
    assert blink.require_to_destroy
    assert enemy in scene.items()