# tests/helpers.py
# Shared payload builders and an in-memory session runner for the protocol tests.
from __future__ import annotations

import io
import json
from typing import Any, List, Optional, Tuple

from tetris_bot.game.core.board import Board
from tetris_bot.game.core.types import CellState
from tetris_bot.protocol.framing import AnyOutgoing, LineReader, LineWriter, decode_outgoing
from tetris_bot.session.dispatcher import TurnDispatcher


def config_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "type": "config",
        "boardWidth": 10,
        "boardHeight": 20,
        "kicks": "SRS",
        "spins": "none",
        "comboTable": "multiplier",
        "b2bCharging": False,
        "b2bChargeAt": 0,
        "b2bChargeBase": 0,
        "b2bChaining": True,
        "garbageMultiplier": 1.0,
        "garbageCap": 8,
        "garbageSpecialBonus": False,
        "pcB2b": 0,
        "pcGarbage": 0,
        "queue": ["I", "O"],
    }
    payload.update(overrides)
    return payload


def empty_rows(*, w: int = 10, h: int = 20) -> list[list[str]]:
    return [["empty"] * w for _ in range(h)]


def board_of(rows: list[list[str]]) -> Board:
    return Board.from_rows([[CellState(c) for c in row] for row in rows])


def empty_board(*, w: int = 10, h: int = 20) -> Board:
    return board_of(empty_rows(w=w, h=h))


def state_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "type": "state",
        "board": empty_rows(),
        "current": "T",
        "hold": None,
        "queue": ["I"],
        "garbage": [],
        "combo": 0,
        "b2b": 0,
    }
    payload.update(overrides)
    return payload


def play_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {"type": "play", "garbageMultiplier": 1.0, "garbageCap": 8}
    payload.update(overrides)
    return payload


def line(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload).encode("utf-8") + b"\n"


def run_lines(
    lines: List[bytes],
    *,
    dispatcher: Optional[TurnDispatcher] = None,
    out: Optional[io.BytesIO] = None,
) -> Tuple[TurnDispatcher, List[AnyOutgoing]]:
    """Run a whole session over in-memory streams; fatal errors propagate."""
    d = dispatcher or TurnDispatcher()
    sink = out if out is not None else io.BytesIO()
    d.run(LineReader(io.BytesIO(b"".join(lines))), LineWriter(sink))
    return d, sent(sink)


def sent(out: io.BytesIO) -> List[AnyOutgoing]:
    return [decode_outgoing(x) for x in out.getvalue().splitlines()]
