# tests/test_main.py
from __future__ import annotations

import io
import sys

import pytest

from helpers import config_payload, line, play_payload, state_payload
from tetris_bot.__main__ import main
from tetris_bot.protocol.framing import decode_outgoing
from tetris_bot.protocol.messages import InfoMessage, MoveMessage


def _wire(monkeypatch: pytest.MonkeyPatch, data: bytes) -> io.BytesIO:
    out = io.BytesIO()
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))
    monkeypatch.setattr(sys, "stdout", io.TextIOWrapper(out))
    return out


def test_main_runs_a_session_and_exits_cleanly(monkeypatch: pytest.MonkeyPatch) -> None:
    out = _wire(monkeypatch, line(config_payload()) + line(state_payload()) + line(play_payload()))
    assert main() == 0
    msgs = [decode_outgoing(x) for x in out.getvalue().splitlines()]
    assert isinstance(msgs[0], InfoMessage)
    assert isinstance(msgs[1], MoveMessage)


def test_main_exits_nonzero_on_fatal_error(monkeypatch: pytest.MonkeyPatch) -> None:
    out = _wire(monkeypatch, line(config_payload()) + b"garbage\n" + line(play_payload()))
    assert main() == 1
    assert len(out.getvalue().splitlines()) == 1
