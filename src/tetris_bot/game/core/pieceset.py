# src/tetris_bot/game/core/pieceset.py
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import yaml

from tetris_bot.game.core.constants import CELLS_PER_PIECE
from tetris_bot.game.core.types import PieceKind
from tetris_bot.utils.paths import pieces_dir


def _parse_rotation(rows: Sequence[str]) -> np.ndarray:
    if not isinstance(rows, (list, tuple)) or len(rows) == 0:
        raise ValueError("rotation must be a non-empty list of strings")

    width = None
    out: List[List[int]] = []
    for r in rows:
        if not isinstance(r, str) or len(r) == 0:
            raise ValueError(f"rotation rows must be non-empty strings, got {r!r}")
        if width is None:
            width = len(r)
        elif len(r) != width:
            raise ValueError(f"rotation rows must have equal width, got widths {width} and {len(r)}")

        out.append([1 if ch == "#" else 0 for ch in r])

    arr = np.asarray(out, dtype=np.uint8)
    if int(arr.sum()) <= 0:
        raise ValueError("rotation must have at least one filled cell ('#')")
    return arr


@dataclass(frozen=True)
class PieceDef:
    kind: PieceKind
    rotations: Tuple[np.ndarray, ...]  # each is (H,W) uint8 mask 0/1, full SRS box

    def num_rotations(self) -> int:
        return len(self.rotations)

    def mask(self, rot: int) -> np.ndarray:
        rots = self.rotations
        return rots[int(rot) % len(rots)]

    def box_width(self) -> int:
        return int(self.rotations[0].shape[1])


@dataclass(frozen=True)
class PieceSet:
    """
    Pure piece geometry, loaded from YAML.

    Asset contract:
      - rotations are listed in SRS state order (0, R, 2, L)
      - a kind with a single rotation (O) is rotation-invariant
      - masks keep the full SRS bounding box so box-left x matches the engine's pose x
    """

    pieces: Dict[PieceKind, PieceDef]

    @staticmethod
    def default_srs7_path() -> Path:
        return pieces_dir() / "srs7.yaml"

    @classmethod
    def from_yaml(cls, path: Path, *, expected_cells: Optional[int] = None) -> "PieceSet":
        p = Path(path)
        data = yaml.safe_load(p.read_text(encoding="utf-8"))

        if not isinstance(data, dict):
            raise ValueError(f"piece YAML must be a mapping at top-level, got {type(data)!r}")

        if expected_cells is None:
            v = data.get("expected_cells", None)
            if isinstance(v, int):
                expected_cells = v
            elif v is not None:
                raise TypeError(f"expected_cells must be int, got {type(v)!r}")

        pieces_node = data.get("pieces")
        if not isinstance(pieces_node, dict) or not pieces_node:
            raise ValueError("piece YAML must contain non-empty mapping 'pieces:'")

        pieces: Dict[PieceKind, PieceDef] = {}
        for key, spec in pieces_node.items():
            try:
                kind = PieceKind(str(key).upper())
            except ValueError as e:
                raise ValueError(f"unknown piece kind {key!r} in {p.name}") from e
            if not isinstance(spec, dict):
                raise ValueError(f"piece spec for {key!r} must be a mapping, got {type(spec)!r}")

            rotations_node = spec.get("rotations")
            if not isinstance(rotations_node, list) or not rotations_node:
                raise ValueError(f"{key!r}: 'rotations' must be a non-empty list")

            rotations = tuple(_parse_rotation(rows) for rows in rotations_node)

            cell_counts = [int(r.sum()) for r in rotations]
            if len(set(cell_counts)) != 1:
                raise ValueError(f"{key!r}: rotations must have same filled cell count, got {cell_counts}")
            if expected_cells is not None and cell_counts[0] != int(expected_cells):
                raise ValueError(f"{key!r}: expected {expected_cells} filled cells, got {cell_counts[0]}")
            if len({r.shape for r in rotations}) != 1:
                raise ValueError(f"{key!r}: all rotations must share the same box shape")

            pieces[kind] = PieceDef(kind=kind, rotations=rotations)

        missing = [k.value for k in PieceKind if k not in pieces]
        if missing:
            raise ValueError(f"piece YAML is missing kinds {missing}")

        return cls(pieces=pieces)

    def kinds(self) -> Tuple[PieceKind, ...]:
        return tuple(self.pieces.keys())

    def get(self, kind: PieceKind) -> PieceDef:
        try:
            return self.pieces[PieceKind(kind)]
        except (KeyError, ValueError) as e:
            raise KeyError(f"unknown piece kind {kind!r}") from e

    def mask(self, kind: PieceKind, rot: int) -> np.ndarray:
        return self.get(kind).mask(rot)

    def num_rotations(self, kind: PieceKind) -> int:
        return int(self.get(kind).num_rotations())

    def box_width(self, kind: PieceKind) -> int:
        return int(self.get(kind).box_width())

    @staticmethod
    def filled_bbox(mask: np.ndarray) -> Tuple[int, int, int, int]:
        """
        Return (minx, miny, maxx, maxy) of non-zero cells.
        If mask has no filled cells, returns (0,0,-1,-1).
        """
        m = np.asarray(mask)
        ys, xs = np.nonzero(m != 0)
        if xs.size == 0:
            return (0, 0, -1, -1)
        return int(xs.min()), int(ys.min()), int(xs.max()), int(ys.max())

    def bbox_x_range(self, kind: PieceKind, rot: int) -> Tuple[int, int, int]:
        """
        Return (minx, maxx, bbox_w) for the filled cells of mask(kind, rot),
        in the mask's local coordinates.
        """
        minx, _, maxx, _ = self.filled_bbox(self.mask(kind, rot))
        return int(minx), int(maxx), int(max(0, maxx - minx + 1))


@lru_cache(maxsize=1)
def default_pieceset() -> PieceSet:
    return PieceSet.from_yaml(PieceSet.default_srs7_path(), expected_cells=CELLS_PER_PIECE)


__all__ = ["PieceDef", "PieceSet", "default_pieceset"]
