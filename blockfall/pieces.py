"""Board state, tetromino shapes and the movement rules that act on them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Tuple

WINDOW_WIDTH = 960
WINDOW_HEIGHT = 768
GRID_POS_W = 352
GRID_POS_H = 672
GRID_POS_X = 320
GRID_POS_Y = 32
OFFSET_Y = 16
OFFSET_X = 336
BOARD_WIDTH = 10
BOARD_HEIGHT = 20
BLOCK_SIZE = 32
TETROMINO_GRID = 4

# Horizontal pixel limits a piece cell may occupy.
LEFT_WALL = 320
RIGHT_WALL = 640

Shape = Tuple[Tuple[int, ...], ...]

EMPTY_SHAPE: Shape = tuple((0,) * TETROMINO_GRID for _ in range(TETROMINO_GRID))

L_BLOCK: Shape = (
    (0, 1, 0, 0),
    (0, 1, 0, 0),
    (0, 1, 1, 0),
    (0, 0, 0, 0),
)

SQUARE_BLOCK: Shape = (
    (0, 0, 0, 0),
    (0, 1, 1, 0),
    (0, 1, 1, 0),
    (0, 0, 0, 0),
)

T_BLOCK: Shape = (
    (0, 0, 0, 0),
    (1, 1, 1, 0),
    (0, 1, 0, 0),
    (0, 0, 0, 0),
)

R_BLOCK: Shape = (
    (0, 1, 1, 0),
    (1, 1, 0, 0),
    (0, 0, 0, 0),
    (0, 0, 0, 0),
)

LONG_BLOCK: Shape = (
    (1, 0, 0, 0),
    (1, 0, 0, 0),
    (1, 0, 0, 0),
    (1, 0, 0, 0),
)

LEFT_BLOCK: Shape = (
    (1, 1, 0, 0),
    (0, 1, 1, 0),
    (0, 0, 0, 0),
    (0, 0, 0, 0),
)


def _tdiv(a: int, b: int) -> int:
    """Integer division that truncates toward zero."""
    if (a < 0) != (b < 0):
        return -(-a // b)
    return a // b


def _occupied(shape: Shape) -> Iterator[Tuple[int, int]]:
    for i, row in enumerate(shape):
        for j, value in enumerate(row):
            if value != 0:
                yield i, j


def rotated_clockwise(shape: Shape) -> Shape:
    """Return the shape turned a quarter turn clockwise."""
    return tuple(zip(*reversed(shape)))


def rotated_counter_clockwise(shape: Shape) -> Shape:
    """Return the shape turned a quarter turn counter-clockwise."""
    return tuple(zip(*shape))[::-1]


@dataclass
class Tile:
    """One cell of the board."""

    texture: Any = None
    filled: bool = False


class Board:
    """Grid of locked cells, indexed by row then column."""

    def __init__(self, width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> None:
        self.width = width
        self.height = height
        self._tiles = [[Tile() for _ in range(width)] for _ in range(height)]

    def _in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def is_filled(self, row: int, col: int) -> bool:
        """Whether a cell is locked; cells off the board read as empty."""
        return self._in_bounds(row, col) and self._tiles[row][col].filled

    def fill(self, row: int, col: int, texture: Any) -> None:
        """Lock a cell with the given texture."""
        if not self._in_bounds(row, col):
            raise IndexError(f"cell ({row}, {col}) is outside the board")
        tile = self._tiles[row][col]
        tile.filled = True
        tile.texture = texture

    def filled_cells(self) -> Iterator[Tuple[int, int, Any]]:
        """Yield (row, col, texture) for every locked cell, top to bottom."""
        for r, row in enumerate(self._tiles):
            for c, tile in enumerate(row):
                if tile.filled:
                    yield r, c, tile.texture

    def clear(self) -> None:
        """Empty every cell."""
        for row in self._tiles:
            for tile in row:
                tile.filled = False
                tile.texture = None


@dataclass
class Tetromino:
    """A falling piece, positioned in screen pixels."""

    shape: Shape = EMPTY_SHAPE
    x: int = 0
    y: int = 0
    texture: Any = None
    board: Board = field(default_factory=Board)

    def cells(self) -> Iterator[Tuple[int, int]]:
        """Yield (row, col) inside the piece grid for each occupied cell."""
        return _occupied(self.shape)

    def rotate_clockwise(self) -> None:
        rotated = rotated_clockwise(self.shape)
        if not self.check_collision(rotated):
            self.shape = rotated

    def rotate_counter_clockwise(self) -> None:
        rotated = rotated_counter_clockwise(self.shape)
        if not self.check_collision(rotated):
            self.shape = rotated

    def check_under(self) -> bool:
        """Whether the piece may move down one more step."""
        for i, j in self.cells():
            new_y = self.y + BLOCK_SIZE + i * BLOCK_SIZE
            new_x = self.x + j * BLOCK_SIZE
            row = _tdiv(new_y - OFFSET_Y, BLOCK_SIZE)
            col = _tdiv(new_x - OFFSET_X, BLOCK_SIZE)
            if (
                row > self.board.height
                or col < 0
                or col > self.board.width
                or self.board.is_filled(row, col)
            ):
                return False
        return True

    def _can_drop(self) -> bool:
        for i, j in self.cells():
            row = _tdiv(self.y + i * BLOCK_SIZE - OFFSET_Y, BLOCK_SIZE)
            col = _tdiv(self.x + j * BLOCK_SIZE - OFFSET_X, BLOCK_SIZE)
            if (
                row >= self.board.height
                or col < 0
                or col > self.board.width
                or self.board.is_filled(row, col)
            ):
                return False
        return True

    def hard_drop(self) -> None:
        """Move the piece down until it rests on the floor or a locked cell."""
        if not any(True for _ in self.cells()):
            return
        while self._can_drop():
            self.y += BLOCK_SIZE

    def lock(self) -> None:
        """Write the piece's cells into the board."""
        for i, j in self.cells():
            row = _tdiv(self.y + i * BLOCK_SIZE - OFFSET_Y, BLOCK_SIZE) - 1
            col = _tdiv(self.x + j * BLOCK_SIZE - OFFSET_X, BLOCK_SIZE)
            if 0 <= row < self.board.height and 0 <= col < self.board.width:
                self.board.fill(row, col, self.texture)

    def check_collision(self, new_shape: Shape) -> bool:
        """Whether the piece would hit a wall or locked cell with this shape."""
        for i, j in _occupied(new_shape):
            new_x = self.x + j * BLOCK_SIZE
            new_y = self.y + i * BLOCK_SIZE
            board_x = _tdiv(new_x, BLOCK_SIZE) - 10
            board_y = _tdiv(new_y, BLOCK_SIZE) - 1
            if (
                new_x < LEFT_WALL
                or new_x > RIGHT_WALL
                or self.board.is_filled(board_x, board_y)
            ):
                return True
        return False

    def check_wall(self, distance: int) -> bool:
        """Whether shifting the piece sideways by distance pixels hits a wall."""
        for _, j in self.cells():
            new_x = distance + self.x + j * BLOCK_SIZE
            if new_x < LEFT_WALL or new_x > RIGHT_WALL:
                return True
        return False