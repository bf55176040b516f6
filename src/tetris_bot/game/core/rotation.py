# src/tetris_bot/game/core/rotation.py
from __future__ import annotations

from tetris_bot.game.core.board import Board
from tetris_bot.game.core.pieceset import PieceSet
from tetris_bot.game.core.types import PieceKind


def collides(*, board: Board, pieces: PieceSet, kind: PieceKind, rot: int, px: int, py: int) -> bool:
    """
    True if the mask at (px, py) overlaps a wall, the floor or an occupied cell.

    Rows above the visible field (y < 0) are the engine's spawn buffer. The wire
    board never carries them, so they are always empty here.
    """
    m = pieces.mask(kind, rot)

    h, w = m.shape
    for yy in range(h):
        for xx in range(w):
            if m[yy, xx] == 0:
                continue
            x = px + xx
            y = py + yy
            if x < 0 or x >= board.w or y >= board.h:
                return True
            if y < 0:
                continue
            if board.grid[y, x] != 0:
                return True
    return False


__all__ = ["collides"]
