# src/tetris_bot/agents/chooser.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

from tetris_bot.config.rules import RuleConfiguration
from tetris_bot.game.core.board import Board
from tetris_bot.game.core.types import PieceKind
from tetris_bot.protocol.errors import StateTransitionError
from tetris_bot.protocol.messages import PlayMessage
from tetris_bot.session.state import SessionPhase, SessionState


@dataclass(frozen=True)
class PlacementRequest:
    """
    Everything a move-chooser may look at for one turn.

    garbage_multiplier / garbage_cap are the turn-scoped values from `play`,
    which supersede the ruleset's session-wide values for this turn.
    """

    board: Board
    current: PieceKind
    hold: Optional[PieceKind]
    queue: Tuple[PieceKind, ...]
    garbage: Tuple[int, ...]
    combo: int
    b2b: int
    rules: RuleConfiguration
    garbage_multiplier: float
    garbage_cap: int

    @classmethod
    def from_session(cls, state: SessionState, play: PlayMessage) -> "PlacementRequest":
        if state.phase != SessionPhase.READY or state.board is None or state.current is None or state.rules is None:
            raise StateTransitionError("placement requested without a board")
        return cls(
            board=state.board,
            current=state.current,
            hold=state.hold,
            queue=state.queue,
            garbage=state.garbage,
            combo=state.combo,
            b2b=state.b2b,
            rules=state.rules,
            garbage_multiplier=float(play.garbage_multiplier),
            garbage_cap=int(play.garbage_cap),
        )

    def piece_for(self, use_hold: bool) -> Optional[PieceKind]:
        """
        The piece that ends up active: the current piece, or after a hold the
        held piece (or, with an empty hold slot, the front of the queue).
        """
        if not use_hold:
            return self.current
        if self.hold is not None:
            return self.hold
        return self.queue[0] if self.queue else None

    @property
    def incoming_garbage(self) -> int:
        """Pending garbage that can enter the board this turn."""
        return int(min(sum(self.garbage), max(0, self.garbage_cap)))


@dataclass(frozen=True)
class Placement:
    """
    Final resting pose chosen for one turn.

    rot is the SRS rotation state (0..3); col is the board column of the
    leftmost filled cell (bbox-left semantics).
    """

    kind: PieceKind
    rot: int
    col: int
    use_hold: bool = False


class MoveChooser(Protocol):
    def __call__(self, request: PlacementRequest) -> Optional[Placement]:
        """Return the placement to play, or None when no legal placement exists."""
        ...


__all__ = ["MoveChooser", "Placement", "PlacementRequest"]
