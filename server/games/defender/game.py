"""Defender - a wave shooter in the style of Space Invaders.

The formation marches sideways in lockstep, dropping a row at each wall.
Clearing a wave only raises the pace; the game ends when the formation
reaches the player's row.
"""

from typing import List

from ..base_game import BaseGame, Cell, EngineContext
from ..keys import KEY_LEFT, KEY_RIGHT, KEY_SPACE


class DefenderGame(BaseGame):
    GAME_ID = "defender"
    GAME_NAME = "Space Invaders"
    START_MESSAGE = "Starting Defender... (Arrows to move, SPACE to shoot, ESC to exit)"
    WIDTH = 30
    HEIGHT = 15
    INITIAL_TICK_MS = 100
    CONTROLS = "←/→ Move | SPACE Shoot | ESC Exit"

    HIT_POINTS = 10
    WAVE_BONUS = 100
    INITIAL_MOVE_INTERVAL = 5  # ticks between formation steps
    MIN_MOVE_INTERVAL = 1
    FORMATION_ROWS = 4
    FORMATION_SPACING = 3

    def __init__(self, context: EngineContext):
        super().__init__(context)
        self.player_x: int = self.WIDTH // 2
        self.bullets: List[Cell] = []
        self.enemies: List[Cell] = []
        self.enemy_direction: int = 1
        self.move_timer: int = 0
        self.move_interval: int = self.INITIAL_MOVE_INTERVAL
        self.level: int = 1
        self.spawn_enemies()

    @property
    def player_row(self) -> int:
        return self.HEIGHT - 1

    def spawn_enemies(self) -> None:
        self.enemies = [
            (x, y)
            for y in range(self.FORMATION_ROWS)
            for x in range(2, self.WIDTH - 2, self.FORMATION_SPACING)
        ]
        self.enemy_direction = 1

    def _handle_play_input(self, key):
        if key == KEY_LEFT:
            if self.player_x > 0:
                self.player_x -= 1
                return True
        elif key == KEY_RIGHT:
            if self.player_x < self.WIDTH - 1:
                self.player_x += 1
                return True
        elif key == KEY_SPACE:
            self.bullets.append((self.player_x, self.player_row - 1))
            return True
        return False

    def _step(self):
        # 1. Point-blank shots fired since the last tick land before they climb
        self._resolve_hits()

        # 2. Bullets climb one row; anything past the top is gone
        self.bullets = [(x, y - 1) for x, y in self.bullets if y - 1 >= 0]

        # 3. Formation moves on its own cadence
        self.move_timer += 1
        if self.move_timer >= self.move_interval:
            self.move_timer = 0
            self._advance_formation()

        # 4. Overrun
        if any(y >= self.player_row for _, y in self.enemies):
            self.game_over()
            return

        # 5. Hits
        self._resolve_hits()

        # 6. Next wave
        if not self.enemies:
            self.level_up()

    def _advance_formation(self) -> None:
        if not self.enemies:
            return
        leftmost = min(x for x, _ in self.enemies)
        rightmost = max(x for x, _ in self.enemies)

        at_wall = ((self.enemy_direction == 1 and rightmost >= self.WIDTH - 2) or
                   (self.enemy_direction == -1 and leftmost <= 1))
        if at_wall:
            self.enemy_direction *= -1
            self.enemies = [(x, y + 1) for x, y in self.enemies]
        else:
            self.enemies = [(x + self.enemy_direction, y) for x, y in self.enemies]

    def _resolve_hits(self) -> None:
        """
        Remove every bullet/enemy pair sharing a cell.

        Bullets are resolved oldest first. Each bullet destroys at most one
        enemy and each enemy dies once, so when two bullets share an enemy's
        cell the older one scores and the newer one keeps flying.
        """
        alive = set(self.enemies)
        surviving_bullets = []
        for bullet in self.bullets:
            if bullet in alive:
                alive.discard(bullet)
                self.score += self.HIT_POINTS
            else:
                surviving_bullets.append(bullet)
        self.bullets = surviving_bullets
        self.enemies = [enemy for enemy in self.enemies if enemy in alive]

    def level_up(self) -> None:
        self.score += self.WAVE_BONUS
        self.level += 1
        self.move_interval = max(self.MIN_MOVE_INTERVAL, self.move_interval - 1)
        self.spawn_enemies()

    def _board_lines(self):
        bullets = set(self.bullets)
        enemies = set(self.enemies)
        lines = ['╔' + '═' * self.WIDTH + '╗']
        for y in range(self.HEIGHT):
            row = []
            for x in range(self.WIDTH):
                if y == self.player_row and x == self.player_x:
                    row.append('^')
                elif (x, y) in bullets:
                    row.append('|')
                elif (x, y) in enemies:
                    row.append('W')
                else:
                    row.append(' ')
            lines.append('║' + ''.join(row) + '║')
        lines.append('╚' + '═' * self.WIDTH + '╝')
        return lines

    def get_status(self):
        status = super().get_status()
        status['level'] = self.level
        status['enemies'] = len(self.enemies)
        return status
