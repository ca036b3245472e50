"""Snake - grow by eating, die on walls or yourself.

The body is an ordered list of cells, head first. Direction changes are
staged by input and only applied at the start of the next tick.
"""

from typing import List, Optional

from ..base_game import BaseGame, Cell, EngineContext
from ..keys import KEY_UP, KEY_DOWN, KEY_LEFT, KEY_RIGHT

UP = (0, -1)
DOWN = (0, 1)
LEFT = (-1, 0)
RIGHT = (1, 0)

DIRECTION_KEYS = {
    KEY_UP: UP,
    KEY_DOWN: DOWN,
    KEY_LEFT: LEFT,
    KEY_RIGHT: RIGHT,
}


class SnakeGame(BaseGame):
    GAME_ID = "snake"
    GAME_NAME = "Classic Snake"
    START_MESSAGE = "Starting Snake Game... (Arrows to move, ESC to exit)"
    WIDTH = 30
    HEIGHT = 15
    INITIAL_TICK_MS = 100
    CONTROLS = "Controls: Arrow Keys | Exit: ESC"

    FOOD_POINTS = 10
    SPEEDUP_STEP_MS = 2
    MIN_TICK_MS = 50
    START_CELL: Cell = (5, 5)

    def __init__(self, context: EngineContext):
        super().__init__(context)
        self.body: List[Cell] = [self.START_CELL]
        self.direction: Cell = RIGHT
        self.next_direction: Cell = RIGHT
        self.food: Optional[Cell] = self.spawn_food()

    @property
    def head(self) -> Cell:
        return self.body[0]

    def _handle_play_input(self, key):
        direction = DIRECTION_KEYS.get(key)
        if direction is not None:
            self.next_direction = direction
        return False

    def _step(self):
        # A 180 degree turn would run straight into the neck
        dx, dy = self.next_direction
        if (-dx, -dy) != self.direction:
            self.direction = self.next_direction
        self.next_direction = self.direction

        hx, hy = self.head
        new_head = (hx + self.direction[0], hy + self.direction[1])

        if not self.in_bounds(new_head) or new_head in self.body:
            self.game_over()
            return

        self.body.insert(0, new_head)

        if new_head == self.food:
            self.score += self.FOOD_POINTS
            self.food = self.spawn_food()
            if self.tick_interval_ms > self.MIN_TICK_MS:
                self.restart_clock(max(self.MIN_TICK_MS, self.tick_interval_ms - self.SPEEDUP_STEP_MS))
        else:
            self.body.pop()

    def spawn_food(self) -> Optional[Cell]:
        """Pick a random free cell; None once the body fills the board."""
        if len(self.body) >= self.WIDTH * self.HEIGHT:
            return None
        occupied = set(self.body)
        while True:
            cell = self.random_cell()
            if cell not in occupied:
                return cell

    def _board_lines(self):
        segments = {cell: index for index, cell in enumerate(self.body)}
        lines = ['┌' + '─' * self.WIDTH + '┐']
        for y in range(self.HEIGHT):
            row = []
            for x in range(self.WIDTH):
                char = ' '
                index = segments.get((x, y))
                if index is not None:
                    char = 'O' if index == 0 else 'o'
                if self.food == (x, y):
                    char = '@'
                row.append(char)
            lines.append('│' + ''.join(row) + '│')
        lines.append('└' + '─' * self.WIDTH + '┘')
        return lines

    def get_status(self):
        status = super().get_status()
        status['length'] = len(self.body)
        return status
