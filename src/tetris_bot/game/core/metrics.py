# src/tetris_bot/game/core/metrics.py
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from tetris_bot.game.core.constants import EMPTY_CELL


@dataclass(frozen=True)
class BoardSnapshotMetrics:
    """
    Metrics of a LOCKED top-down grid.

    holes:
      empty cells that have at least one occupied cell above in same column
    bumpiness:
      sum(abs(h[i+1] - h[i])) over column heights
    max_height:
      max column height
    agg_height:
      sum of column heights
    """
    holes: int
    bumpiness: int
    max_height: int
    agg_height: int


def board_snapshot_metrics_from_grid(grid: np.ndarray) -> BoardSnapshotMetrics:
    if not isinstance(grid, np.ndarray):
        raise TypeError(f"grid must be np.ndarray, got {type(grid).__name__}")
    if grid.ndim != 2:
        raise ValueError(f"grid must be 2D, got shape={getattr(grid, 'shape', None)}")

    occ = np.not_equal(grid, EMPTY_CELL)
    heights = _column_heights_from_occ(occ)

    return BoardSnapshotMetrics(
        holes=_count_holes_from_occ(occ),
        bumpiness=_bumpiness_from_heights(heights),
        max_height=int(heights.max()) if heights.size > 0 else 0,
        agg_height=int(heights.sum()) if heights.size > 0 else 0,
    )


# -----------------------------------------------------------------------------
# Internals
# -----------------------------------------------------------------------------
def _column_heights_from_occ(occ: np.ndarray) -> np.ndarray:
    h, _w = occ.shape
    any_filled = occ.any(axis=0)

    # argmax returns 0 when all-false; mask those to 0 height
    first_filled = np.argmax(occ, axis=0)
    return np.where(any_filled, h - first_filled, 0).astype(np.int64, copy=False)


def _count_holes_from_occ(occ: np.ndarray) -> int:
    # filled_seen[y,x] True if any filled cell exists at or above y in that column
    filled_seen = np.maximum.accumulate(occ, axis=0)
    return int(np.sum((~occ) & filled_seen))


def _bumpiness_from_heights(heights: np.ndarray) -> int:
    if heights.size <= 1:
        return 0
    return int(np.abs(np.diff(heights)).sum())


__all__ = ["BoardSnapshotMetrics", "board_snapshot_metrics_from_grid"]
