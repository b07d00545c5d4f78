# blockfall

A small falling-block puzzle game that draws with pygame. Pieces drop into a
10 × 20 well one row at a time. A piece that can fall no further locks into
the board, and the next piece appears. Each step makes the drop a little
faster. The interval starts at 1000 ms and shrinks by 5 ms per step until it
reaches 250 ms.

## Installing

```
pip install .
```

## Playing

```
blockfall
```

The game loads its images from `./assets` by default. To use another
directory, pass `--assets`:

```
blockfall --assets path/to/assets
```

The directory has to contain these files:

- `L_Tetromino.png`
- `Square_Tetromino.png`
- `T_tetromino.png`
- `R_tetromino.png`
- `Left_tetromino.png`
- `Long_Tetromino.png` (if this one is missing, a warning is logged and that piece is drawn without an image)
- `tetris_grid.png`

If any other image is missing, or the window cannot be opened, the command
logs the error and exits with status 1.

### Controls

| Key            | Action                    |
|----------------|---------------------------|
| Up / Z         | rotate clockwise          |
| X              | rotate counter-clockwise  |
| Left / Right   | move sideways             |
| Down           | move down one row         |
| Space          | hard drop                 |

Close the window to quit.

### What the game does not do

Full rows are never cleared. There is no score and no level display. There is
no game-over check: pieces keep spawning at the top until you close the
window. The next piece depends on the millisecond tick at the moment the
current piece locks. Pieces come in the order L, Square, T, R, Left, Long,
taken as `tick % 6`.

## Using the pieces from code

`blockfall.pieces` holds the board and piece logic. It does not need a
display.

```python
from blockfall.pieces import Board, Tetromino, L_BLOCK, rotated_clockwise

board = Board(10, 20)
print(rotated_clockwise(L_BLOCK))

piece = Tetromino(L_BLOCK, x=336, y=48, board=board)
piece.hard_drop()
piece.lock()
print(list(board.filled_cells()))
```

- A `Board` supports `is_filled(row, col)`, `fill(row, col, texture)`,
  `filled_cells()` and `clear()`. `is_filled` reports cells off the board as
  empty. `fill` raises `IndexError` for cells off the board.
- A `Tetromino` is positioned in screen pixels.
  - `rotate_clockwise()` and `rotate_counter_clockwise()` turn the piece only
    if `check_collision()` finds nothing in the way.
  - `check_under()` reports whether the piece can move down one step.
  - `check_wall(distance)` reports whether a sideways shift would go past the
    walls.
  - `hard_drop()` moves the piece down as far as it can go.
  - `lock()` writes the piece's cells into its board.
- `rotated_clockwise(shape)` and `rotated_counter_clockwise(shape)` return
  rotated copies of a shape tuple.

`blockfall.game.Game(textures)` adds the game rules:

- `spawn` places a new piece.
- `handle_key(pressed, repeat)` takes a set of `Action` values.
- `update(now)` advances the game to a time in milliseconds.
- `draw(surface)` draws onto any pygame surface.

`piece_for_tick(tick)` names the piece that is spawned at a given tick.
`load_textures(asset_dir)` loads and scales the images.

## Running the tests

```
pip install .[test]
pytest
```