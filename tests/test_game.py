import pytest

from blockfall.game import (
    MIN_INTERVAL,
    PIECE_ORDER,
    SHAPES,
    SPAWN_X,
    SPAWN_Y,
    START_INTERVAL,
    Action,
    Game,
    draw_tetromino,
    piece_for_tick,
)
from blockfall.pieces import (
    BLOCK_SIZE,
    BOARD_HEIGHT,
    GRID_POS_X,
    GRID_POS_Y,
    L_BLOCK,
    LONG_BLOCK,
    OFFSET_X,
    SQUARE_BLOCK,
    Tetromino,
    rotated_clockwise,
    rotated_counter_clockwise,
)


class FakeSurface:
    def __init__(self):
        self.blits = []
        self.fills = []

    def blit(self, texture, pos):
        self.blits.append((texture, pos))

    def fill(self, color):
        self.fills.append(color)


@pytest.fixture
def textures():
    return {name: f"tex-{name}" for name in (*PIECE_ORDER, "grid")}


@pytest.fixture
def game(textures):
    return Game(textures)


@pytest.mark.parametrize("tick", range(12))
def test_piece_for_tick_cycles(tick):
    assert piece_for_tick(tick) == PIECE_ORDER[tick % 6]


def test_piece_order_matches_source():
    assert [piece_for_tick(t) for t in range(6)] == ["L", "Square", "T", "R", "Left", "Long"]


def test_initial_state(game):
    assert game.block.shape == L_BLOCK
    assert game.block.x == GRID_POS_X - 16
    assert game.block.y == GRID_POS_Y + 16
    assert game.block.texture == "tex-L"
    assert game.interval == START_INTERVAL
    assert (game.num_blocks, game.cur_block) == (1, 0)


def test_update_waits_for_interval(game):
    y = game.block.y
    assert game.update(START_INTERVAL - 1) is False
    assert game.block.y == y
    assert game.interval == START_INTERVAL


def test_update_moves_piece_down(game):
    y = game.block.y
    assert game.update(START_INTERVAL) is True
    assert game.block.y == y + BLOCK_SIZE
    assert game.last_tick == START_INTERVAL
    assert game.interval == START_INTERVAL - 5


def test_update_locks_and_spawns(game):
    game.spawn(SQUARE_BLOCK, "tex-Square", SPAWN_X, SPAWN_Y)
    game.block.hard_drop()
    game.update(START_INTERVAL)
    rows = [r for r, _, _ in game.board.filled_cells()]
    assert len(rows) == 4
    assert max(rows) == BOARD_HEIGHT - 1
    name = piece_for_tick(START_INTERVAL)
    assert game.block.shape == SHAPES[name]
    assert game.block.texture == f"tex-{name}"
    assert (game.block.x, game.block.y) == (SPAWN_X, SPAWN_Y)
    assert (game.num_blocks, game.cur_block) == (2, 1)


def test_interval_never_drops_below_minimum(game):
    now = 0
    for _ in range(200):
        now += game.interval
        game.update(now)
    assert game.interval == MIN_INTERVAL


def test_spawn_replaces_block(game):
    piece = game.spawn(LONG_BLOCK, "x", SPAWN_X, SPAWN_Y)
    assert game.block is piece
    assert piece.board is game.board
    assert piece.shape == LONG_BLOCK


def test_handle_key_moves_right_then_left(game):
    game.spawn(LONG_BLOCK, "x", SPAWN_X, SPAWN_Y)
    game.handle_key({Action.RIGHT}, repeat=False)
    assert game.block.x == SPAWN_X + BLOCK_SIZE
    game.handle_key({Action.LEFT}, repeat=False)
    assert game.block.x == SPAWN_X


def test_handle_key_left_blocked_by_wall(game):
    game.spawn(LONG_BLOCK, "x", OFFSET_X, SPAWN_Y)
    game.handle_key({Action.LEFT}, repeat=False)
    assert game.block.x == OFFSET_X


def test_handle_key_down_and_hard_drop(game):
    y = game.block.y
    game.handle_key({Action.DOWN}, repeat=False)
    assert game.block.y == y + BLOCK_SIZE
    game.handle_key({Action.HARD_DROP}, repeat=False)
    assert not game.block.check_under()


def test_handle_key_rotation_ignores_repeats(game):
    game.spawn(LONG_BLOCK, "x", SPAWN_X, SPAWN_Y)
    game.handle_key({Action.ROTATE_CLOCKWISE}, repeat=True)
    assert game.block.shape == LONG_BLOCK
    game.handle_key({Action.ROTATE_CLOCKWISE}, repeat=False)
    assert game.block.shape == rotated_clockwise(LONG_BLOCK)


def test_handle_key_counter_clockwise(game):
    game.spawn(SQUARE_BLOCK, "x", SPAWN_X, SPAWN_Y)
    game.handle_key({Action.ROTATE_COUNTER_CLOCKWISE}, repeat=False)
    assert game.block.shape == rotated_counter_clockwise(SQUARE_BLOCK)


def test_draw_tetromino_blits_each_cell():
    surface = FakeSurface()
    piece = Tetromino(SQUARE_BLOCK, SPAWN_X, SPAWN_Y)
    draw_tetromino(piece, surface, "t")
    expected = sorted(
        ("t", (SPAWN_X + j * BLOCK_SIZE, SPAWN_Y + i * BLOCK_SIZE)) for i, j in piece.cells()
    )
    assert sorted(surface.blits) == expected


def test_draw_tetromino_without_texture_draws_nothing():
    surface = FakeSurface()
    draw_tetromino(Tetromino(SQUARE_BLOCK), surface, None)
    assert surface.blits == []


def test_draw_renders_grid_piece_and_board(game):
    game.spawn(SQUARE_BLOCK, "tex-Square", SPAWN_X, SPAWN_Y)
    game.block.lock()
    surface = FakeSurface()
    game.draw(surface)
    assert surface.fills == [(0, 0, 0)]
    assert surface.blits[0] == ("tex-grid", (GRID_POS_X, GRID_POS_Y))
    piece_blits = surface.blits[1:5]
    board_blits = surface.blits[5:]
    assert len(board_blits) == 4
    # A locked piece is drawn exactly where it was when locked.
    assert sorted(board_blits) == sorted(piece_blits)