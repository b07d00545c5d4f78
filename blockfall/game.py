"""Game loop: timed falling, piece spawning, input handling and drawing."""

from __future__ import annotations

import argparse
import enum
import logging
import os
from typing import Any, Collection, Mapping, Optional, Sequence

from blockfall.pieces import (
    BLOCK_SIZE,
    GRID_POS_H,
    GRID_POS_W,
    GRID_POS_X,
    GRID_POS_Y,
    L_BLOCK,
    LEFT_BLOCK,
    LONG_BLOCK,
    OFFSET_X,
    OFFSET_Y,
    R_BLOCK,
    SQUARE_BLOCK,
    T_BLOCK,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
    Board,
    Shape,
    Tetromino,
)

log = logging.getLogger(__name__)

PIECE_ORDER = ("L", "Square", "T", "R", "Left", "Long")

SHAPES: Mapping[str, Shape] = {
    "L": L_BLOCK,
    "Square": SQUARE_BLOCK,
    "T": T_BLOCK,
    "R": R_BLOCK,
    "Left": LEFT_BLOCK,
    "Long": LONG_BLOCK,
}

TEXTURE_FILES: Mapping[str, str] = {
    "L": "L_Tetromino.png",
    "Square": "Square_Tetromino.png",
    "T": "T_tetromino.png",
    "R": "R_tetromino.png",
    "Left": "Left_tetromino.png",
    "Long": "Long_Tetromino.png",
    "grid": "tetris_grid.png",
}

# Textures whose absence is only reported rather than fatal.
_OPTIONAL_TEXTURES = frozenset({"Long"})

START_INTERVAL = 1000
MIN_INTERVAL = 250
INTERVAL_STEP = 5

SPAWN_X = GRID_POS_X + 16
SPAWN_Y = GRID_POS_Y + 16
FIRST_SPAWN_X = GRID_POS_X - 16


class Action(enum.Enum):
    ROTATE_CLOCKWISE = "rotate_clockwise"
    ROTATE_COUNTER_CLOCKWISE = "rotate_counter_clockwise"
    LEFT = "left"
    RIGHT = "right"
    DOWN = "down"
    HARD_DROP = "hard_drop"


def piece_for_tick(tick: int) -> str:
    """Name of the piece spawned when a lock happens at this tick."""
    return PIECE_ORDER[tick % len(PIECE_ORDER)]


def draw_tetromino(tetromino: Tetromino, surface: Any, texture: Any) -> None:
    """Blit one texture per occupied cell of the piece."""
    if texture is None:
        return
    for i, j in tetromino.cells():
        surface.blit(texture, (tetromino.x + j * BLOCK_SIZE, tetromino.y + i * BLOCK_SIZE))


class Game:
    """State of a running game."""

    def __init__(self, textures: Mapping[str, Any]) -> None:
        self.textures = dict(textures)
        self.board = Board()
        self.last_tick = 0
        self.interval = START_INTERVAL
        self.num_blocks = 1
        self.cur_block = 0
        self.block = Tetromino(board=self.board)
        self.spawn(L_BLOCK, self.textures.get("L"), FIRST_SPAWN_X, SPAWN_Y)

    def spawn(self, shape: Shape, texture: Any, x: int, y: int) -> Tetromino:
        """Replace the falling piece with a new one."""
        self.block = Tetromino(shape, x, y, texture, self.board)
        return self.block

    def handle_key(self, pressed: Collection[Action], repeat: bool) -> None:
        """React to a key press given the set of actions currently held."""
        block = self.block
        if not repeat:
            if Action.ROTATE_CLOCKWISE in pressed:
                block.rotate_clockwise()
            elif Action.ROTATE_COUNTER_CLOCKWISE in pressed:
                block.rotate_counter_clockwise()
        if Action.LEFT in pressed and not block.check_wall(-BLOCK_SIZE):
            block.x -= BLOCK_SIZE
        elif Action.RIGHT in pressed and not block.check_wall(BLOCK_SIZE):
            block.x += BLOCK_SIZE
        elif Action.DOWN in pressed:
            block.y += BLOCK_SIZE
        elif Action.HARD_DROP in pressed:
            block.hard_drop()

    def update(self, now: int) -> bool:
        """Advance the game to time now (ms); return whether a step happened."""
        if now - self.last_tick < self.interval:
            return False
        if not self.block.check_under():
            self.block.lock()
            self.cur_block += 1
            self.num_blocks += 1
            name = piece_for_tick(now)
            self.spawn(SHAPES[name], self.textures.get(name), SPAWN_X, SPAWN_Y)
        else:
            self.block.y += BLOCK_SIZE
        self.last_tick = now
        if self.interval > MIN_INTERVAL:
            self.interval -= INTERVAL_STEP
        return True

    def draw(self, surface: Any) -> None:
        """Render the grid, the falling piece and the locked cells."""
        surface.fill((0, 0, 0))
        grid = self.textures.get("grid")
        if grid is not None:
            surface.blit(grid, (GRID_POS_X, GRID_POS_Y))
        draw_tetromino(self.block, surface, self.block.texture)
        for row, col, texture in self.board.filled_cells():
            if texture is not None:
                surface.blit(
                    texture,
                    (col * BLOCK_SIZE + OFFSET_X, row * BLOCK_SIZE + OFFSET_Y + BLOCK_SIZE),
                )


def load_textures(asset_dir: str) -> dict:
    """Load the block and grid images from a directory, scaled for drawing."""
    import pygame

    textures: dict = {}
    for name, filename in TEXTURE_FILES.items():
        path = os.path.join(asset_dir, filename)
        try:
            image = pygame.image.load(path)
        except (pygame.error, FileNotFoundError) as exc:
            if name in _OPTIONAL_TEXTURES:
                log.warning("Couldn't load image %s: %s", path, exc)
                textures[name] = None
                continue
            raise
        if pygame.display.get_surface() is not None:
            image = image.convert_alpha()
        size = (GRID_POS_W, GRID_POS_H) if name == "grid" else (BLOCK_SIZE, BLOCK_SIZE)
        textures[name] = pygame.transform.scale(image, size)
    return textures


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Open the game window and run until it is closed."""
    parser = argparse.ArgumentParser(prog="blockfall", description="Falling block puzzle.")
    parser.add_argument("--assets", default="./assets", help="directory holding the images")
    args = parser.parse_args(argv)

    import pygame

    keymap = (
        (pygame.K_UP, Action.ROTATE_CLOCKWISE),
        (pygame.K_z, Action.ROTATE_CLOCKWISE),
        (pygame.K_x, Action.ROTATE_COUNTER_CLOCKWISE),
        (pygame.K_LEFT, Action.LEFT),
        (pygame.K_RIGHT, Action.RIGHT),
        (pygame.K_DOWN, Action.DOWN),
        (pygame.K_SPACE, Action.HARD_DROP),
    )

    try:
        pygame.init()
        screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption("Tetris")
        textures = load_textures(args.assets)
    except (pygame.error, FileNotFoundError) as exc:
        log.error("Couldn't start: %s", exc)
        pygame.quit()
        return 1

    game = Game(textures)
    try:
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    keys = pygame.key.get_pressed()
                    pressed = {action for key, action in keymap if keys[key]}
                    game.handle_key(pressed, repeat=False)
            game.update(pygame.time.get_ticks())
            game.draw(screen)
            pygame.display.flip()
    finally:
        pygame.quit()
    return 0