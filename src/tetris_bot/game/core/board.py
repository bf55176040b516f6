# src/tetris_bot/game/core/board.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from tetris_bot.game.core.constants import EMPTY_CELL
from tetris_bot.game.core.types import CELL_CODES, CellState


@dataclass(frozen=True, eq=False)
class Board:
    """
    Playfield snapshot.

    Contracts:
      - grid is (h, w) uint8, stored TOP-DOWN (row 0 is the highest row).
      - cell codes follow CELL_CODES (0=empty, 1=piece, 2=garbage).
      - wire rows arrive BOTTOM-UP (row 0 is the floor); from_rows() flips them.
      - a Board is never mutated after construction; simulations copy the grid.
    """

    h: int
    w: int
    grid: np.ndarray

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[CellState]]) -> "Board":
        if len(rows) == 0:
            raise ValueError("board must have at least one row")
        w = len(rows[0])
        if w == 0:
            raise ValueError("board rows must be non-empty")
        for i, row in enumerate(rows):
            if len(row) != w:
                raise ValueError(f"board must be rectangular: row {i} has {len(row)} cells, expected {w}")
        codes = np.asarray([[CELL_CODES[CellState(c)] for c in row] for row in rows], dtype=np.uint8)
        return cls(h=len(rows), w=w, grid=np.flipud(codes).copy())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.h == other.h and self.w == other.w and bool(np.array_equal(self.grid, other.grid))

    __hash__ = None  # type: ignore[assignment]


def clear_full_lines(grid: np.ndarray, *, empty_cell: int = EMPTY_CELL) -> tuple[np.ndarray, int]:
    """
    Pure numpy line-clear on a top-down grid. Returns (new_grid, cleared).
    Does NOT mutate the input.
    """
    if grid.ndim != 2:
        raise ValueError(f"grid must be 2D, got shape={grid.shape}")

    full = np.all(grid != empty_cell, axis=1)
    cleared = int(full.sum())
    if cleared <= 0:
        return grid, 0

    kept = grid[~full]
    new_rows = np.full((cleared, grid.shape[1]), empty_cell, dtype=grid.dtype)
    return np.vstack([new_rows, kept]), cleared


__all__ = ["Board", "clear_full_lines"]
