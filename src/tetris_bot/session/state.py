# src/tetris_bot/session/state.py
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

from tetris_bot.config.rules import RuleConfiguration
from tetris_bot.game.core.board import Board
from tetris_bot.game.core.types import PieceKind
from tetris_bot.protocol.errors import StateTransitionError
from tetris_bot.protocol.messages import ConfigMessage, PiecesMessage, PlayMessage, StateMessage


class SessionPhase(str, Enum):
    UNINITIALIZED = "uninitialized"
    CONFIGURED = "configured"
    READY = "ready"


@dataclass(frozen=True)
class SessionState:
    """
    Everything the agent knows about the game, as an immutable value.

    Lifecycle:
      - UNINITIALIZED: nothing received yet
      - CONFIGURED: rules set, queue seeded; no board yet
      - READY: at least one full `state` applied

    Transitions never mutate; each returns a new SessionState (or raises
    StateTransitionError, leaving the caller's value untouched).

    combo/b2b are stored exactly as the engine reports them (-1 = no streak).
    """

    phase: SessionPhase = SessionPhase.UNINITIALIZED
    rules: Optional[RuleConfiguration] = None

    board: Optional[Board] = None
    current: Optional[PieceKind] = None
    hold: Optional[PieceKind] = None
    queue: Tuple[PieceKind, ...] = ()
    garbage: Tuple[int, ...] = ()
    combo: int = 0
    b2b: int = 0

    turns: int = 0


def apply_config(state: SessionState, msg: ConfigMessage) -> SessionState:
    """
    Install a ruleset. A repeated `config` is a full reconfiguration: rules and
    queue are replaced together and all board-derived state is dropped.

    Raises ConfigurationError (fatal) for invalid rules.
    """
    rules = msg.rules()
    return SessionState(phase=SessionPhase.CONFIGURED, rules=rules, queue=tuple(msg.queue))


def apply_state(state: SessionState, msg: StateMessage) -> SessionState:
    if state.phase == SessionPhase.UNINITIALIZED or state.rules is None:
        raise StateTransitionError("`state` received before `config`")

    rules = state.rules
    rows = msg.board
    width = len(rows[0]) if rows else 0
    if len(rows) != rules.board_height or width != rules.board_width:
        raise StateTransitionError(
            f"board is {width}x{len(rows)}, configured {rules.board_width}x{rules.board_height}"
        )

    return replace(
        state,
        phase=SessionPhase.READY,
        board=Board.from_rows(rows),
        current=msg.current,
        hold=msg.hold,
        queue=tuple(msg.queue),
        garbage=tuple(msg.garbage),
        combo=int(msg.combo),
        b2b=int(msg.b2b),
    )


def apply_pieces(state: SessionState, msg: PiecesMessage) -> SessionState:
    if state.phase == SessionPhase.UNINITIALIZED:
        raise StateTransitionError("`pieces` received before `config`")
    return replace(state, queue=state.queue + tuple(msg.pieces))


def check_play(state: SessionState, msg: PlayMessage) -> SessionState:
    """
    Validate a turn request. Returns the state with the turn counter advanced;
    board, queue and counters are left as they are until the next `state`.
    """
    if state.phase != SessionPhase.READY:
        raise StateTransitionError(f"`play` received while {state.phase.value} (no board yet)")
    return replace(state, turns=state.turns + 1)


__all__ = [
    "SessionPhase",
    "SessionState",
    "apply_config",
    "apply_pieces",
    "apply_state",
    "check_play",
]
