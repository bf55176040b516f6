# src/tetris_bot/game/core/constants.py
from __future__ import annotations

# Board / cell encoding
EMPTY_CELL: int = 0

# Filled cells per tetromino (asset-level invariant)
CELLS_PER_PIECE: int = 4

# SRS rotation states: 0, R, 2, L
NUM_ROTATION_STATES: int = 4

# Pieces spawn with their mask box this many rows above the visible field
SPAWN_ROWS_ABOVE: int = 2
