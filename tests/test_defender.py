"""
Tests for the Defender (wave shooter) cartridge.
"""

import random

from server.games.defender.game import DefenderGame
from server.games.keys import KEY_LEFT, KEY_RIGHT, KEY_SPACE


class TestDefenderSetup:
    """Formation and player basics."""

    def test_initial_formation(self, context):
        game = DefenderGame(context)

        columns = list(range(2, 28, 3))
        assert len(game.enemies) == 4 * len(columns)
        assert {x for x, _ in game.enemies} == set(columns)
        assert {y for _, y in game.enemies} == {0, 1, 2, 3}
        assert game.player_x == 15
        assert game.move_interval == 5

    def test_player_stays_on_board(self, context):
        game = DefenderGame(context)
        game.player_x = 0
        game.handle_input(KEY_LEFT)
        assert game.player_x == 0

        game.player_x = 29
        game.handle_input(KEY_RIGHT)
        assert game.player_x == 29

        game.handle_input(KEY_LEFT)
        assert game.player_x == 28

    def test_fire_spawns_above_player(self, context):
        game = DefenderGame(context)
        game.handle_input(KEY_SPACE)

        assert game.bullets == [(15, 13)]

    def test_frame_shows_entities(self, context):
        game = DefenderGame(context)
        game.handle_input(KEY_SPACE)
        lines = game.frame().split('\n')

        assert lines[0] == '╔' + '═' * 30 + '╗'
        assert lines[1 + 14][1 + 15] == '^'
        assert lines[1 + 13][1 + 15] == '|'
        assert lines[1 + 0][1 + 2] == 'W'


class TestDefenderTick:
    """Per-tick simulation order."""

    def test_bullets_rise_and_leave_the_top(self, context):
        game = DefenderGame(context)
        game.enemies = [(0, 0)]
        game.bullets = [(10, 5), (20, 0)]

        game.tick()

        assert game.bullets == [(10, 4)]

    def test_formation_moves_on_cadence(self, context):
        game = DefenderGame(context)
        start = list(game.enemies)

        for _ in range(4):
            game.tick()
        assert game.enemies == start

        game.tick()
        assert game.enemies == [(x + 1, y) for x, y in start]
        assert game.move_timer == 0

    def test_right_wall_flips_and_descends(self, context):
        game = DefenderGame(context)
        game.enemies = [(28, 3), (25, 3)]
        game.move_timer = game.move_interval - 1

        game.tick()

        assert game.enemies == [(28, 4), (25, 4)]
        assert game.enemy_direction == -1

    def test_left_wall_flips_and_descends(self, context):
        game = DefenderGame(context)
        game.enemies = [(1, 3)]
        game.enemy_direction = -1
        game.move_timer = game.move_interval - 1

        game.tick()

        assert game.enemies == [(1, 4)]
        assert game.enemy_direction == 1

    def test_reaching_player_row_ends_game(self, context, clock):
        game = DefenderGame(context)
        game.start()
        game.enemies = [(28, 13)]
        game.move_timer = game.move_interval - 1

        game.tick()

        assert game.is_over
        assert not clock.running

    def test_row_above_player_is_still_alive(self, context):
        game = DefenderGame(context)
        game.enemies = [(20, 13)]

        game.tick()

        assert not game.is_over


class TestDefenderHits:
    """Bullet/enemy collisions and wave clears."""

    def test_hit_removes_both(self, context):
        game = DefenderGame(context)
        game.enemies = [(10, 5), (20, 5)]
        game.bullets = [(10, 6)]

        game.tick()

        assert game.enemies == [(20, 5)]
        assert game.bullets == []
        assert game.score == 10

    def test_older_bullet_wins_shared_target(self, context):
        game = DefenderGame(context)
        game.enemies = [(10, 5), (20, 5)]
        game.bullets = [(10, 6), (10, 6)]

        game.tick()

        assert game.score == 10
        assert game.enemies == [(20, 5)]
        assert game.bullets == [(10, 5)]

    def test_point_blank_shot_hits_enemy_above_player(self, context):
        game = DefenderGame(context)
        game.enemies = [(game.player_x, game.player_row - 1), (0, 0)]
        game.move_timer = -100

        game.handle_input(KEY_SPACE)
        game.tick()

        assert (15, 13) not in game.enemies
        assert game.enemies == [(0, 0)]
        assert game.bullets == []
        assert game.score == 10
        assert not game.is_over

    def test_clearing_wave_levels_up(self, context):
        game = DefenderGame(context)
        game.enemies = [(10, 5)]
        game.bullets = [(10, 6)]
        prior_cadence = game.move_interval

        game.tick()

        assert not game.is_over
        assert game.score == 10 + 100
        assert len(game.enemies) == 36
        assert game.move_interval == prior_cadence - 1
        assert game.level == 2

    def test_cadence_floor(self, context):
        game = DefenderGame(context)
        game.move_interval = 1
        game.move_timer = -10
        game.enemies = [(10, 5)]
        game.bullets = [(10, 6)]

        game.tick()

        assert game.move_interval == 1
        assert game.enemies


class TestDefenderProperties:
    """Invariants under random play."""

    def test_enemies_never_below_player_row_while_running(self, context):
        game = DefenderGame(context)
        rng = random.Random(5)
        keys = [KEY_LEFT, KEY_RIGHT, KEY_SPACE, KEY_SPACE]
        last_score = 0

        for _ in range(2000):
            if game.is_over:
                break
            game.handle_input(rng.choice(keys))
            game.tick()
            assert game.score >= last_score
            last_score = game.score
            if not game.is_over:
                assert all(y < game.player_row for _, y in game.enemies)
                assert game.enemies
