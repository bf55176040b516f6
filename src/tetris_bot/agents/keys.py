# src/tetris_bot/agents/keys.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from tetris_bot.agents.chooser import Placement, PlacementRequest
from tetris_bot.game.core.board import Board
from tetris_bot.game.core.constants import NUM_ROTATION_STATES
from tetris_bot.game.core.pieceset import PieceSet, default_pieceset
from tetris_bot.game.core.placement_cache import StaticPlacementCache
from tetris_bot.game.core.rotation import collides
from tetris_bot.game.core.types import ActivePiece, InputAction, PieceKind
from tetris_bot.protocol.errors import MoveChooserFailure

# Sent when nothing better can be produced: lock the piece where it spawned.
FALLBACK_KEYS: Tuple[InputAction, ...] = (InputAction.HARD_DROP,)


@dataclass(frozen=True)
class Route:
    keys: Tuple[InputAction, ...]
    pose: ActivePiece  # pose right before the terminating drop


class KeyPlanner:
    """
    Turns a Placement into the key presses that realise it from the spawn pose.

    Route shape (every intermediate pose must be collision-free, so the engine
    never needs a kick to follow it):
      [hold] -> rotation -> horizontal travel -> hardDrop

      rotation:
        R -> rotateCW, L -> rotateCCW,
        2 -> rotate180 when the kick table has 180 kicks, else rotateCW x2
      travel:
        dasLeft/dasRight when the target is the reachable wall and 2+ columns away,
        otherwise one moveLeft/moveRight per column
    """

    def __init__(self, *, pieces: Optional[PieceSet] = None) -> None:
        self.pieces = pieces or default_pieceset()
        self._caches: Dict[int, StaticPlacementCache] = {}

    def cache_for(self, board_w: int) -> StaticPlacementCache:
        bw = int(board_w)
        hit = self._caches.get(bw)
        if hit is None:
            hit = StaticPlacementCache.build(pieces=self.pieces, board_w=bw)
            self._caches[bw] = hit
        return hit

    def _fits(self, board: Board, pose: ActivePiece) -> bool:
        return not collides(board=board, pieces=self.pieces, kind=pose.kind, rot=pose.rot, px=pose.x, py=pose.y)

    def _rotation_keys(self, rot: int, *, allow_180: bool) -> List[Tuple[InputAction, int]]:
        """(key, state after key) pairs from spawn state 0."""
        r = int(rot) % NUM_ROTATION_STATES
        if r == 0:
            return []
        if r == 1:
            return [(InputAction.ROTATE_CW, 1)]
        if r == 3:
            return [(InputAction.ROTATE_CCW, 3)]
        if allow_180:
            return [(InputAction.ROTATE_180, 2)]
        return [(InputAction.ROTATE_CW, 1), (InputAction.ROTATE_CW, 2)]

    def route(
            self,
            *,
            board: Board,
            kind: PieceKind,
            rot: int,
            col: int,
            use_hold: bool = False,
            allow_180: bool = True,
    ) -> Optional[Route]:
        """
        Key route for (kind, rot, col) on `board`, or None if unreachable.

        The walk starts from the spawn pose above the visible field, so a stack
        reaching the top rows only blocks the columns it actually occupies.
        """
        cache = self.cache_for(board.w)
        if not cache.is_geom_legal_bbox_left(kind=kind, rot=rot, bbox_left_col=col):
            return None

        keys: List[InputAction] = [InputAction.HOLD] if use_hold else []

        pose = cache.spawn_pose(kind)
        if not self._fits(board, pose):
            return None

        # O has a single rotation state; anything else walks through SRS states.
        if self.pieces.num_rotations(kind) > 1:
            for key, state in self._rotation_keys(rot, allow_180=allow_180):
                pose = ActivePiece(kind=pose.kind, rot=state, x=pose.x, y=pose.y)
                if not self._fits(board, pose):
                    return None
                keys.append(key)

        target_x = cache.bbox_left_to_engine_x(kind, rot, col)
        dx = int(target_x - pose.x)
        if dx != 0:
            step = 1 if dx > 0 else -1
            x = pose.x
            while x != target_x:
                nxt = ActivePiece(kind=pose.kind, rot=pose.rot, x=x + step, y=pose.y)
                if not self._fits(board, nxt):
                    return None
                x += step

            wall = target_x
            while self._fits(board, ActivePiece(kind=pose.kind, rot=pose.rot, x=wall + step, y=pose.y)):
                wall += step

            if abs(dx) >= 2 and wall == target_x:
                keys.append(InputAction.DAS_RIGHT if step > 0 else InputAction.DAS_LEFT)
            else:
                keys.extend([InputAction.MOVE_RIGHT if step > 0 else InputAction.MOVE_LEFT] * abs(dx))
            pose = ActivePiece(kind=pose.kind, rot=pose.rot, x=target_x, y=pose.y)

        keys.append(InputAction.HARD_DROP)
        return Route(keys=tuple(keys), pose=pose)

    def plan(self, request: PlacementRequest, placement: Placement) -> Tuple[InputAction, ...]:
        """
        Key presses realising `placement` for `request`.

        Raises MoveChooserFailure when the placement does not match the piece
        that would be active or cannot be reached from spawn.
        """
        expected = request.piece_for(placement.use_hold)
        if expected is None:
            raise MoveChooserFailure("hold requested but no piece is available to swap in")
        if PieceKind(placement.kind) != expected:
            raise MoveChooserFailure(
                f"placement is for {PieceKind(placement.kind).value}, but the active piece would be {expected.value}"
            )

        r = self.route(
            board=request.board,
            kind=expected,
            rot=int(placement.rot),
            col=int(placement.col),
            use_hold=bool(placement.use_hold),
            allow_180=request.rules.allows_180,
        )
        if r is None:
            raise MoveChooserFailure(
                f"placement {expected.value} rot={placement.rot} col={placement.col} is not reachable from spawn"
            )
        return r.keys


__all__ = ["FALLBACK_KEYS", "KeyPlanner", "Route"]
