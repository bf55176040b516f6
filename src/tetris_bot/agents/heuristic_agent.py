# src/tetris_bot/agents/heuristic_agent.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from tetris_bot.agents.chooser import Placement, PlacementRequest
from tetris_bot.agents.keys import KeyPlanner
from tetris_bot.config.agent import HeuristicWeights
from tetris_bot.game.core.attack import LockOutcome, estimate_lock
from tetris_bot.game.core.pieceset import PieceSet, default_pieceset
from tetris_bot.game.core.simulate import DropSimulator, SimPlacementResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredPlacement:
    placement: Placement
    score: float
    result: SimPlacementResult
    outcome: LockOutcome


class HeuristicChooser:
    """
    CodemyRoad-style one-ply placement chooser Φ, extended for versus play.

    Candidates:
      - every geometry-legal (rot, col) of the active piece that KeyPlanner can reach
        and that does not lock above the visible field
      - the same for the piece a hold would bring in (held piece, else queue front),
        unless it is the same kind as the active piece

    Score of a candidate (after hard drop + line clear):
      Φ = a*agg_height + b*lines + c*holes + d*bumpiness
          + e*attack + f*max(0, max_height + incoming - danger_line)

      attack    garbage sent by the lock (game.core.attack), turn multiplier applied
      incoming  pending garbage capped by the turn's garbageCap, minus what the attack cancels
      danger    danger_fraction * board height

    Ties keep the first candidate in enumeration order (no hold, rot, col),
    so the choice is deterministic.
    """

    def __init__(
            self,
            *,
            weights: HeuristicWeights = HeuristicWeights(),
            pieces: Optional[PieceSet] = None,
    ) -> None:
        self.w = weights
        self.pieces = pieces or default_pieceset()
        self.sim = DropSimulator(pieces=self.pieces)
        self.planner = KeyPlanner(pieces=self.pieces)

    def _phi(self, *, request: PlacementRequest, res: SimPlacementResult, outcome: LockOutcome) -> float:
        m = res.metrics_after
        incoming = float(request.incoming_garbage)
        if res.cleared_lines > 0:
            incoming = max(0.0, incoming - outcome.total)
        danger_line = float(self.w.danger_fraction) * float(request.board.h)
        danger = max(0.0, float(m.max_height) + incoming - danger_line)
        return (
                self.w.a_agg_height * float(m.agg_height)
                + self.w.b_lines * float(res.cleared_lines)
                + self.w.c_holes * float(m.holes)
                + self.w.d_bumpiness * float(m.bumpiness)
                + self.w.e_attack * float(outcome.total)
                + self.w.f_danger * danger
        )

    def candidates(self, request: PlacementRequest) -> List[ScoredPlacement]:
        allow_180 = request.rules.allows_180
        cache = self.planner.cache_for(request.board.w)

        out: List[ScoredPlacement] = []
        for use_hold in (False, True):
            kind = request.piece_for(use_hold)
            if kind is None or (use_hold and kind == request.current):
                continue
            for rot, col in cache.placements(kind):
                route = self.planner.route(
                    board=request.board, kind=kind, rot=rot, col=col, use_hold=use_hold, allow_180=allow_180
                )
                if route is None:
                    continue
                res = self.sim.hard_drop(request.board, route.pose)
                if res.locked_out:
                    continue
                outcome = estimate_lock(
                    rules=request.rules,
                    piece=kind,
                    lines=res.cleared_lines,
                    combo=request.combo,
                    b2b=request.b2b,
                    perfect_clear=res.perfect_clear,
                    garbage_cleared=res.garbage_cleared,
                    garbage_multiplier=request.garbage_multiplier,
                )
                out.append(
                    ScoredPlacement(
                        placement=Placement(kind=kind, rot=int(rot), col=int(col), use_hold=use_hold),
                        score=self._phi(request=request, res=res, outcome=outcome),
                        result=res,
                        outcome=outcome,
                    )
                )
        return out

    def __call__(self, request: PlacementRequest) -> Optional[Placement]:
        best: Optional[ScoredPlacement] = None
        for cand in self.candidates(request):
            if best is None or cand.score > best.score:
                best = cand
        if best is None:
            logger.debug("no reachable placement for %s", request.current.value)
            return None
        logger.debug(
            "chose %s rot=%d col=%d hold=%s phi=%.3f lines=%d attack=%.2f",
            best.placement.kind.value,
            best.placement.rot,
            best.placement.col,
            best.placement.use_hold,
            best.score,
            best.result.cleared_lines,
            best.outcome.total,
        )
        return best.placement


__all__ = ["HeuristicChooser", "ScoredPlacement"]
