# src/tetris_bot/__main__.py
"""
Run one bot session over STDIN/STDOUT.

Run with: `python -m tetris_bot`

STDOUT carries protocol lines only; diagnostics go to STDERR.
Exit code 0 on end-of-input, 1 on a fatal protocol error.
"""

from __future__ import annotations

import sys

from tetris_bot.config.agent import AgentConfig
from tetris_bot.protocol.errors import ProtocolError
from tetris_bot.protocol.framing import LineReader, LineWriter
from tetris_bot.session.dispatcher import TurnDispatcher
from tetris_bot.utils.logging import setup_logger


def main() -> int:
    cfg = AgentConfig()
    logger = setup_logger(name="tetris_bot", use_rich=cfg.use_rich, level=cfg.log_level)

    dispatcher = TurnDispatcher(config=cfg)
    try:
        dispatcher.run(LineReader(sys.stdin.buffer), LineWriter(sys.stdout.buffer))
    except ProtocolError as e:
        logger.error("fatal %s: %s", type(e).__name__, e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
