# src/tetris_bot/session/dispatcher.py
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from tetris_bot.agents.chooser import MoveChooser, PlacementRequest
from tetris_bot.agents.heuristic_agent import HeuristicChooser
from tetris_bot.agents.keys import FALLBACK_KEYS, KeyPlanner
from tetris_bot.config.agent import AgentConfig
from tetris_bot.game.core.pieceset import PieceSet, default_pieceset
from tetris_bot.game.core.types import InputAction
from tetris_bot.protocol.errors import MoveChooserFailure, ProtocolError, StateTransitionError
from tetris_bot.protocol.framing import AnyIncoming, LineReader, LineWriter
from tetris_bot.protocol.messages import (
    ConfigMessage,
    InfoMessage,
    MoveMessage,
    PiecesMessage,
    PlayMessage,
    StateMessage,
)
from tetris_bot.session.state import (
    SessionState,
    apply_config,
    apply_pieces,
    apply_state,
    check_play,
)

logger = logging.getLogger(__name__)


class TurnDispatcher:
    """
    Single-consumer control loop for one session.

    Contracts:
      - `info` is written once, before the first line is read.
      - messages are handled strictly in arrival order, one at a time.
      - every accepted `play` yields exactly one `move` with a non-empty key list;
        no other message yields output.
      - recoverable errors (StateTransitionError, MoveChooserFailure) are logged,
        appended to `errors`, and the loop continues.
      - fatal errors (FramingError, ConfigurationError, OutgoingWriteError) propagate
        out of run() and nothing further is read or written.

    The SessionState value is owned here and only replaced, never shared.
    """

    def __init__(
            self,
            *,
            chooser: Optional[MoveChooser] = None,
            config: AgentConfig = AgentConfig(),
            pieces: Optional[PieceSet] = None,
    ) -> None:
        self.config = config
        self.pieces = pieces or default_pieceset()
        self.chooser: MoveChooser = chooser or HeuristicChooser(weights=config.weights, pieces=self.pieces)
        self.planner = KeyPlanner(pieces=self.pieces)

        self.session = SessionState()
        self.errors: List[ProtocolError] = []
        self.moves_sent = 0

    def info(self) -> InfoMessage:
        return InfoMessage(name=self.config.name, version=self.config.version, author=self.config.author)

    def _report(self, err: ProtocolError) -> None:
        self.errors.append(err)
        logger.warning("%s: %s", type(err).__name__, err)

    def dispatch(self, msg: AnyIncoming) -> Optional[MoveMessage]:
        """
        Apply one decoded message. Returns the `move` to send for a `play`, else None.
        """
        try:
            if isinstance(msg, ConfigMessage):
                self.session = apply_config(self.session, msg)
                rules = self.session.rules
                logger.info(
                    "configured %dx%d kicks=%s spins=%s combo=%s",
                    rules.board_width,
                    rules.board_height,
                    rules.kicks.value,
                    rules.spins.value,
                    rules.combo_table.value,
                )
                return None
            if isinstance(msg, StateMessage):
                self.session = apply_state(self.session, msg)
                return None
            if isinstance(msg, PiecesMessage):
                self.session = apply_pieces(self.session, msg)
                return None
            if isinstance(msg, PlayMessage):
                self.session = check_play(self.session, msg)
                return self._move_for(msg)
        except StateTransitionError as e:
            self._report(e)
            return None
        raise TypeError(f"unsupported message type: {type(msg).__name__}")

    def _move_for(self, play: PlayMessage) -> MoveMessage:
        request = PlacementRequest.from_session(self.session, play)
        keys = self._choose_keys(request)
        self.moves_sent += 1
        return MoveMessage(keys=keys)

    def _choose_keys(self, request: PlacementRequest) -> Tuple[InputAction, ...]:
        try:
            placement = self.chooser(request)
            if placement is None:
                raise MoveChooserFailure(f"no legal placement for {request.current.value}")
            return self.planner.plan(request, placement)
        except MoveChooserFailure as e:
            self._report(e)
        except Exception as e:  # every play gets a move, whatever the chooser does
            logger.exception("move chooser raised; sending fallback move")
            self.errors.append(MoveChooserFailure(f"chooser raised {type(e).__name__}: {e}"))
        return FALLBACK_KEYS

    def run(self, reader: LineReader, writer: LineWriter) -> int:
        """
        Drive the session until end-of-input. Returns the number of messages handled.
        """
        writer.send(self.info())

        handled = 0
        for msg in reader.messages():
            logger.debug("recv %s", msg.type)
            reply = self.dispatch(msg)
            if reply is not None:
                writer.send(reply)
            handled += 1

        logger.info("end of input after %d messages (%d moves)", handled, self.moves_sent)
        return handled


__all__ = ["TurnDispatcher"]
