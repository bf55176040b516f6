# src/tetris_bot/game/core/attack.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, Optional

from tetris_bot.config.rules import RuleConfiguration
from tetris_bot.game.core.types import ComboTable, PieceKind, SpinBonus

Spin = Literal["mini", "normal"]

# Base garbage per cleared-line count: (plain, mini spin, full spin).
_LINE_GARBAGE: dict[int, tuple[float, float, float]] = {
    0: (0.0, 0.0, 0.0),
    1: (0.0, 0.0, 2.0),
    2: (1.0, 1.0, 4.0),
    3: (2.0, 2.0, 6.0),
    4: (4.0, 10.0, 10.0),
    5: (5.0, 12.0, 12.0),
}

B2B_BONUS: float = 1.0
B2B_BONUS_LOG: float = 0.8
COMBO_MINIFIER: float = 1.0
COMBO_MINIFIER_LOG: float = 1.25
COMBO_BONUS: float = 0.25

COMBO_TABLES: dict[ComboTable, tuple[int, ...]] = {
    ComboTable.NONE: (0,),
    ComboTable.CLASSIC: (0, 1, 1, 2, 2, 3, 3, 4, 4, 4, 5),
    ComboTable.MODERN: (0, 1, 1, 2, 2, 2, 3, 3, 3, 3, 3, 3, 4),
}


@dataclass(frozen=True)
class LockOutcome:
    """
    Consequence of locking one piece.

    combo/b2b follow the engine's counter convention: -1 means no active streak.
    attack is the garbage sent by the clear itself (multiplier applied);
    surge is the extra garbage released when a charged B2B streak breaks.
    """
    attack: float
    surge: int
    combo: int
    b2b: int

    @property
    def total(self) -> float:
        return float(self.attack + self.surge)


def base_garbage(*, lines: int, spin: Optional[Spin], piece: PieceKind, spins: SpinBonus) -> float:
    n = int(lines)
    if n <= 5:
        plain, mini, full = _LINE_GARBAGE[max(0, n)]
        g = full if spin == "normal" else mini if spin == "mini" else plain
    else:
        extra = n - 5
        g = 12.0 + 2 * extra if spin else 5.0 + extra

    if spin and spins == SpinBonus.HANDHELD and piece != PieceKind.T:
        g /= 2
    return float(g)


def b2b_bonus(*, b2b: int, chaining: bool) -> float:
    if b2b <= 0:
        return 0.0
    if not chaining:
        return B2B_BONUS
    lg = math.log1p(b2b * B2B_BONUS_LOG)
    tail = 0.0 if b2b == 1 else (1 + (lg % 1)) / 3
    return B2B_BONUS * (math.floor(1 + lg) + tail)


def apply_combo(garbage: float, *, combo: int, table: ComboTable) -> float:
    if combo <= 0:
        return garbage
    if table == ComboTable.MULTIPLIER:
        garbage *= 1 + COMBO_BONUS * combo
        if combo > 1:
            garbage = max(math.log1p(COMBO_MINIFIER * combo * COMBO_MINIFIER_LOG), garbage)
        return garbage
    data = COMBO_TABLES.get(table, (0,))
    return garbage + data[max(0, min(combo - 1, len(data) - 1))]


def estimate_lock(
    *,
    rules: RuleConfiguration,
    piece: PieceKind,
    lines: int,
    combo: int,
    b2b: int,
    perfect_clear: bool = False,
    garbage_cleared: int = 0,
    spin: Optional[Spin] = None,
    garbage_multiplier: Optional[float] = None,
) -> LockOutcome:
    """
    Predict the garbage sent and the next combo/B2B counters for one lock.

    `combo`/`b2b` are the counters BEFORE the lock. `garbage_multiplier`
    overrides the ruleset's value (the engine sends a per-turn multiplier).
    """
    mult = float(rules.garbage_multiplier if garbage_multiplier is None else garbage_multiplier)
    difficult = bool(spin) or lines >= 4
    pc_b2b = bool(perfect_clear and rules.pc_b2b > 0)

    next_b2b = int(b2b)
    broke: Optional[int] = None
    if lines > 0:
        next_combo = int(combo) + 1
        if difficult and not pc_b2b:
            next_b2b += 1
        if pc_b2b:
            next_b2b += int(rules.pc_b2b)
        if not difficult and not pc_b2b:
            broke = int(b2b)
            next_b2b = -1
    else:
        next_combo = -1

    g = base_garbage(lines=lines, spin=spin, piece=piece, spins=rules.spins)
    if lines > 0:
        g += b2b_bonus(b2b=max(next_b2b, 0), chaining=rules.b2b_chaining)
    g = apply_combo(g, combo=max(next_combo, 0), table=rules.combo_table)

    special = 1 if (rules.garbage_special_bonus and garbage_cleared > 0 and difficult) else 0
    attack = g * mult + special if (g > 0 or special > 0) else 0.0

    surge = 0
    if broke is not None and rules.b2b_charging and broke + 1 > rules.b2b_charge_at:
        surge = int(math.floor((broke - rules.b2b_charge_at + rules.b2b_charge_base + 1) * mult))

    if perfect_clear and rules.pc_garbage > 0:
        attack += rules.pc_garbage * mult

    return LockOutcome(attack=float(attack), surge=int(surge), combo=int(next_combo), b2b=int(next_b2b))


__all__ = [
    "COMBO_TABLES",
    "LockOutcome",
    "Spin",
    "apply_combo",
    "b2b_bonus",
    "base_garbage",
    "estimate_lock",
]
