# src/tetris_bot/game/core/types.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PieceKind(str, Enum):
    I = "I"
    J = "J"
    L = "L"
    O = "O"
    S = "S"
    T = "T"
    Z = "Z"


class CellState(str, Enum):
    EMPTY = "empty"
    PIECE = "piece"
    GARBAGE = "garbage"


class KickTable(str, Enum):
    SRS = "SRS"
    SRS_PLUS = "SRS+"
    SRS_X = "SRS-X"


class SpinBonus(str, Enum):
    NONE = "none"
    T_SPINS = "T-spins"
    T_SPINS_PLUS = "T-spins+"
    ALL_MINI = "all-mini"
    ALL_MINI_PLUS = "all-mini+"
    ALL = "all"
    ALL_PLUS = "all+"
    MINI_ONLY = "mini-only"
    HANDHELD = "handheld"
    STUPID = "stupid"


class ComboTable(str, Enum):
    NONE = "none"
    CLASSIC = "classic-guideline"
    MODERN = "modern-guideline"
    MULTIPLIER = "multiplier"


class InputAction(str, Enum):
    MOVE_LEFT = "moveLeft"
    MOVE_RIGHT = "moveRight"
    SOFT_DROP = "softDrop"
    ROTATE_CCW = "rotateCCW"
    ROTATE_CW = "rotateCW"
    ROTATE_180 = "rotate180"
    DAS_LEFT = "dasLeft"
    DAS_RIGHT = "dasRight"
    HOLD = "hold"
    HARD_DROP = "hardDrop"
    NONE = "none"


# Grid codes used by Board (0 is always empty).
CELL_CODES: dict[CellState, int] = {
    CellState.EMPTY: 0,
    CellState.PIECE: 1,
    CellState.GARBAGE: 2,
}


@dataclass(frozen=True)
class ActivePiece:
    """
    Pose of a piece on the top-down grid.

    x/y are the top-left corner of the rotation mask box (not of the filled cells).
    rot is the SRS rotation state: 0 spawn, 1 right (CW), 2 reverse, 3 left (CCW).
    """

    kind: PieceKind
    rot: int
    x: int
    y: int


__all__ = [
    "ActivePiece",
    "CELL_CODES",
    "CellState",
    "ComboTable",
    "InputAction",
    "KickTable",
    "PieceKind",
    "SpinBonus",
]
