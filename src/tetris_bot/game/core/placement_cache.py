# src/tetris_bot/game/core/placement_cache.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from tetris_bot.game.core.constants import SPAWN_ROWS_ABOVE
from tetris_bot.game.core.pieceset import PieceSet
from tetris_bot.game.core.types import ActivePiece, PieceKind


@dataclass(frozen=True)
class StaticPlacementCache:
    """
    Asset-dependent + board-width-dependent GEOMETRY cache for placements.

    Important:
      - This cache is board-content-agnostic (no collision checks).
      - Placements are addressed as (rot, bbox_left_col):
          bbox_left_col is the board column of the LEFTMOST filled cell in the rotated mask.
          pose x (top-left of the mask box) is px = bbox_left_col - minx.

    Stores per (kind, rot):
      - minx: leftmost filled x in mask coords
      - bbox_w: width of filled bbox in mask coords
      - bbox_left_max: max legal bbox-left col on the board: board_w - bbox_w

    Spawn pose per kind:
      - rot 0, box-left x = (board_w - box_w) // 2, box top SPAWN_ROWS_ABOVE rows above the visible field
    """

    board_w: int

    # (kind, rot) -> (minx, bbox_w, bbox_left_max)
    geom: Dict[Tuple[PieceKind, int], Tuple[int, int, int]]

    # kind -> n_rots (valid rotations)
    n_rots: Dict[PieceKind, int]

    # kind -> spawn box-left x
    spawn_x: Dict[PieceKind, int]

    @classmethod
    def build(cls, *, pieces: PieceSet, board_w: int) -> "StaticPlacementCache":
        bw = int(board_w)
        if bw <= 0:
            raise ValueError(f"board_w must be positive, got {bw}")

        geom: Dict[Tuple[PieceKind, int], Tuple[int, int, int]] = {}
        n_rots: Dict[PieceKind, int] = {}
        spawn_x: Dict[PieceKind, int] = {}

        for kind in pieces.kinds():
            nr = max(1, int(pieces.num_rotations(kind)))
            n_rots[kind] = nr
            spawn_x[kind] = int((bw - pieces.box_width(kind)) // 2)

            for r in range(nr):
                minx, _maxx, bbox_w = pieces.bbox_x_range(kind, int(r))
                bbox_left_max = bw - int(bbox_w)
                geom[(kind, int(r))] = (int(minx), int(bbox_w), int(bbox_left_max))

        return cls(board_w=bw, geom=geom, n_rots=n_rots, spawn_x=spawn_x)

    def is_valid_rotation(self, kind: PieceKind, rot: int) -> bool:
        return (PieceKind(kind), int(rot)) in self.geom

    def bbox_params(self, kind: PieceKind, rot: int) -> Tuple[int, int, int]:
        """
        Return (minx, bbox_w, bbox_left_max) for (kind, rot).
        Raises KeyError if rot is invalid for this kind.
        """
        try:
            return self.geom[(PieceKind(kind), int(rot))]
        except KeyError as e:
            raise KeyError(f"invalid rotation: kind={kind!r}, rot={int(rot)}") from e

    def bbox_left_to_engine_x(self, kind: PieceKind, rot: int, bbox_left_col: int) -> int:
        minx, _bbox_w, _bbox_left_max = self.bbox_params(kind, rot)
        return int(int(bbox_left_col) - int(minx))

    def is_geom_legal_bbox_left(self, *, kind: PieceKind, rot: int, bbox_left_col: int) -> bool:
        if not self.is_valid_rotation(kind, rot):
            return False
        _minx, _bbox_w, bbox_left_max = self.bbox_params(kind, rot)
        return bool(0 <= int(bbox_left_col) <= int(bbox_left_max))

    def spawn_pose(self, kind: PieceKind) -> ActivePiece:
        k = PieceKind(kind)
        return ActivePiece(kind=k, rot=0, x=int(self.spawn_x[k]), y=-SPAWN_ROWS_ABOVE)

    def placements(self, kind: PieceKind) -> Tuple[Tuple[int, int], ...]:
        """
        All geometry-legal (rot, bbox_left_col) pairs for this kind.
        """
        k = PieceKind(kind)
        out: list[tuple[int, int]] = []
        for rot in range(int(self.n_rots[k])):
            _minx, _bbox_w, bbox_left_max = self.bbox_params(k, rot)
            for col in range(int(bbox_left_max) + 1):
                out.append((int(rot), int(col)))
        return tuple(out)


__all__ = ["StaticPlacementCache"]
