"""Tetris - falling block stacker.

The board is a grid of EMPTY / WALL / LOCKED cells with permanent walls on
the left and right columns and a floor on the bottom row. The falling piece
is a boolean shape matrix anchored at its top-left corner.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..base_game import BaseGame, EngineContext
from ..keys import KEY_UP, KEY_DOWN, KEY_LEFT, KEY_RIGHT, KEY_SPACE

EMPTY = 0
WALL = 1
LOCKED = 2

Shape = Tuple[Tuple[int, ...], ...]

SHAPES = {
    'I': ((1, 1, 1, 1),),
    'O': ((1, 1),
          (1, 1)),
    'T': ((0, 1, 0),
          (1, 1, 1)),
    'L': ((1, 0, 0),
          (1, 1, 1)),
    'J': ((0, 0, 1),
          (1, 1, 1)),
    'S': ((0, 1, 1),
          (1, 1, 0)),
    'Z': ((1, 1, 0),
          (0, 1, 1)),
}


def rotate(shape: Shape) -> Shape:
    """One 90 degree clockwise turn: transpose, then reverse each row."""
    return tuple(
        tuple(row[col] for row in reversed(shape))
        for col in range(len(shape[0]))
    )


@dataclass
class Piece:
    shape: Shape
    x: int
    y: int

    def cells(self, dx: int = 0, dy: int = 0, shape: Optional[Shape] = None):
        shape = shape if shape is not None else self.shape
        for sy, row in enumerate(shape):
            for sx, filled in enumerate(row):
                if filled:
                    yield self.x + sx + dx, self.y + sy + dy


class TetrisGame(BaseGame):
    GAME_ID = "tetris"
    GAME_NAME = "Block Stacking"
    START_MESSAGE = "Starting Tetris... (Arrows to move, UP to rotate, SPACE to drop, ESC to exit)"
    WIDTH = 12  # 10 playable + 2 walls
    HEIGHT = 20
    INITIAL_TICK_MS = 1000
    CONTROLS = "Rotate: UP | Drop: SPACE | Exit: ESC"

    LINE_POINTS = 100

    def __init__(self, context: EngineContext):
        super().__init__(context)
        self.board: List[List[int]] = self._new_board()
        self.piece: Optional[Piece] = None
        self.lines_cleared = 0
        self.spawn_piece()

    def _new_board(self) -> List[List[int]]:
        board = [self._empty_row() for _ in range(self.HEIGHT - 1)]
        board.append([WALL] * self.WIDTH)
        return board

    def _empty_row(self) -> List[int]:
        return [WALL] + [EMPTY] * (self.WIDTH - 2) + [WALL]

    # =========================================================================
    # Piece movement
    # =========================================================================

    def spawn_piece(self, shape: Optional[Shape] = None) -> None:
        """Drop a new piece in at the top centre; a blocked spawn ends the game."""
        if shape is None:
            shape = self.rng.choice(list(SHAPES.values()))
        self.piece = Piece(shape=shape, x=(self.WIDTH - len(shape[0])) // 2, y=0)

        if self.collides(0, 0):
            self.game_over()

    def collides(self, dx: int, dy: int, shape: Optional[Shape] = None) -> bool:
        for bx, by in self.piece.cells(dx, dy, shape):
            if by >= self.HEIGHT or bx < 0 or bx >= self.WIDTH:
                return True
            if by >= 0 and self.board[by][bx] != EMPTY:
                return True
        return False

    def rotate_piece(self) -> bool:
        rotated = rotate(self.piece.shape)
        if self.collides(0, 0, rotated):
            return False
        self.piece.shape = rotated
        return True

    def hard_drop(self) -> None:
        while not self.collides(0, 1):
            self.piece.y += 1
        self.lock_piece()

    def _handle_play_input(self, key):
        if key == KEY_LEFT:
            if not self.collides(-1, 0):
                self.piece.x -= 1
        elif key == KEY_RIGHT:
            if not self.collides(1, 0):
                self.piece.x += 1
        elif key == KEY_DOWN:
            if not self.collides(0, 1):
                self.piece.y += 1
        elif key == KEY_UP:
            self.rotate_piece()
        elif key == KEY_SPACE:
            self.hard_drop()
        else:
            return False
        return True

    def _step(self):
        if not self.collides(0, 1):
            self.piece.y += 1
        else:
            self.lock_piece()

    # =========================================================================
    # Locking and line clears
    # =========================================================================

    def lock_piece(self) -> None:
        for bx, by in self.piece.cells():
            if 0 <= by < self.HEIGHT:
                self.board[by][bx] = LOCKED

        cleared = self.clear_lines()
        if cleared:
            self.score += cleared * self.LINE_POINTS
            self.lines_cleared += cleared

        self.spawn_piece()

    def clear_lines(self) -> int:
        """
        Drop every full playable row and compact the rest downwards.

        Rows are rebuilt rather than spliced: surviving rows keep their order,
        fresh empty rows are stacked on top, and the floor stays last.

        Returns:
            Number of rows removed
        """
        playable, floor = self.board[:-1], self.board[-1]
        remaining = [row for row in playable if not self._is_full(row)]
        cleared = len(playable) - len(remaining)
        if cleared:
            self.board = [self._empty_row() for _ in range(cleared)] + remaining + [floor]
        return cleared

    @staticmethod
    def _is_full(row: List[int]) -> bool:
        return all(cell != EMPTY for cell in row[1:-1])

    # =========================================================================
    # Rendering
    # =========================================================================

    def _board_lines(self):
        piece_cells = set(self.piece.cells()) if self.piece else set()
        lines = []
        for y, board_row in enumerate(self.board):
            row = []
            for x, cell in enumerate(board_row):
                if (x, y) in piece_cells:
                    cell = LOCKED
                if cell == WALL:
                    row.append('│')
                elif cell == LOCKED:
                    row.append('█')
                else:
                    row.append(' ')
            lines.append(''.join(row))
        return lines

    def get_status(self):
        status = super().get_status()
        status['lines_cleared'] = self.lines_cleared
        return status
