"""
Tests for the Tetris cartridge.
"""

from server.games.keys import KEY_UP, KEY_DOWN, KEY_LEFT, KEY_RIGHT, KEY_SPACE
from server.games.tetris.game import TetrisGame, Piece, SHAPES, rotate, EMPTY, WALL, LOCKED


def fill_row(game, y, gaps=()):
    for x in range(1, game.WIDTH - 1):
        if x not in gaps:
            game.board[y][x] = LOCKED


def full_playable_rows(game):
    return [y for y, row in enumerate(game.board[:-1]) if all(cell != EMPTY for cell in row[1:-1])]


class TestTetrisBoard:
    """Board layout and spawning."""

    def test_walls_and_floor(self, context):
        game = TetrisGame(context)

        assert len(game.board) == 20
        assert all(row[0] == WALL and row[-1] == WALL for row in game.board)
        assert game.board[-1] == [WALL] * 12
        assert all(cell == EMPTY for row in game.board[:-1] for cell in row[1:-1])

    def test_spawn_is_centred_at_top(self, context):
        game = TetrisGame(context)
        game.spawn_piece(SHAPES['O'])

        assert (game.piece.x, game.piece.y) == (5, 0)
        game.spawn_piece(SHAPES['I'])
        assert (game.piece.x, game.piece.y) == (4, 0)

    def test_blocked_spawn_ends_game(self, context):
        game = TetrisGame(context)
        game.board[0][5] = LOCKED

        game.spawn_piece(SHAPES['O'])

        assert game.is_over

    def test_frame_rows(self, context):
        game = TetrisGame(context)
        game.spawn_piece(SHAPES['O'])
        lines = game.frame().split('\n')

        assert len(lines[0]) == 12
        assert lines[0][0] == '│' and lines[0][-1] == '│'
        assert lines[0][5:7] == '██'
        assert lines[19] == '│' * 12
        assert 'Score: 0' in lines[20]


class TestTetrisMovement:
    """Input-driven movement and rotation."""

    def test_walls_block_sideways_moves(self, context):
        game = TetrisGame(context)
        game.spawn_piece(SHAPES['I'])

        for _ in range(10):
            game.handle_input(KEY_LEFT)
        assert game.piece.x == 1

        for _ in range(10):
            game.handle_input(KEY_RIGHT)
        assert game.piece.x == 12 - 1 - 4

    def test_soft_drop_moves_one_row(self, context):
        game = TetrisGame(context)
        game.spawn_piece(SHAPES['T'])

        game.handle_input(KEY_DOWN)

        assert game.piece.y == 1

    def test_rotate_is_transpose_then_reverse(self):
        assert rotate(SHAPES['I']) == ((1,), (1,), (1,), (1,))
        assert rotate(SHAPES['T']) == ((1, 0), (1, 1), (1, 0))
        assert rotate(rotate(rotate(rotate(SHAPES['S'])))) == SHAPES['S']

    def test_rotation_commits_when_free(self, context):
        game = TetrisGame(context)
        game.spawn_piece(SHAPES['T'])
        game.piece.y = 5

        game.handle_input(KEY_UP)

        assert game.piece.shape == ((1, 0), (1, 1), (1, 0))

    def test_rejected_rotation_keeps_shape(self, context):
        game = TetrisGame(context)
        game.piece = Piece(shape=SHAPES['I'], x=4, y=5)

        assert game.rotate_piece()
        vertical = game.piece.shape
        game.board[5][6] = LOCKED

        assert not game.rotate_piece()
        assert game.piece.shape == vertical
        assert game.piece.shape is vertical

    def test_rotation_against_floor_rejected(self, context):
        game = TetrisGame(context)
        game.piece = Piece(shape=SHAPES['I'], x=4, y=18)

        game.handle_input(KEY_UP)

        assert game.piece.shape == SHAPES['I']


class TestTetrisLocking:
    """Hard drop, gravity and line clears."""

    def test_hard_drop_o_piece_lands_on_floor(self, context):
        game = TetrisGame(context)
        game.spawn_piece(SHAPES['O'])

        game.handle_input(KEY_SPACE)

        for y in (17, 18):
            assert game.board[y][5] == LOCKED
            assert game.board[y][6] == LOCKED
        assert sum(cell == LOCKED for row in game.board for cell in row) == 4
        assert game.score == 0
        assert not game.is_over
        assert game.piece.y == 0

    def test_gravity_then_lock(self, context):
        game = TetrisGame(context)
        game.spawn_piece(SHAPES['O'])

        for _ in range(17):
            game.tick()
        assert game.piece.y == 17
        assert game.board[18][5] == EMPTY

        game.tick()
        assert game.board[18][5] == LOCKED
        assert game.piece.y == 0

    def test_clearing_two_rows(self, context):
        game = TetrisGame(context)
        fill_row(game, 17, gaps=(5, 6))
        fill_row(game, 18, gaps=(5, 6))
        game.board[16][1] = LOCKED
        game.spawn_piece(SHAPES['O'])

        game.hard_drop()

        assert game.score == 200
        assert game.lines_cleared == 2
        assert full_playable_rows(game) == []
        # The marker above the cleared rows fell by two
        assert game.board[18][1] == LOCKED
        assert game.board[16][1] == EMPTY
        assert game.board[0] == [WALL] + [EMPTY] * 10 + [WALL]

    def test_non_adjacent_rows_compact_in_order(self, context):
        game = TetrisGame(context)
        fill_row(game, 18)
        game.board[17][3] = LOCKED
        fill_row(game, 16)
        game.board[15][8] = LOCKED

        cleared = game.clear_lines()

        assert cleared == 2
        assert game.board[18][3] == LOCKED
        assert game.board[17][8] == LOCKED
        assert full_playable_rows(game) == []
        assert game.board[-1] == [WALL] * 12
        assert len(game.board) == 20

    def test_lock_never_leaves_full_rows(self, context):
        game = TetrisGame(context)
        fill_row(game, 18, gaps=(1, 2, 3, 4))
        fill_row(game, 17, gaps=(1, 2, 3, 4))
        game.piece = Piece(shape=SHAPES['I'], x=1, y=0)
        game.hard_drop()
        game.piece = Piece(shape=SHAPES['I'], x=1, y=0)
        game.hard_drop()

        assert full_playable_rows(game) == []
        assert game.score == 200

    def test_stack_to_top_ends_game(self, context, exits):
        game = TetrisGame(context)
        game.start()

        for _ in range(50):
            if game.is_over:
                break
            game.handle_input(KEY_SPACE)

        assert game.is_over
        assert exits == []
