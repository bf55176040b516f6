# src/tetris_bot/session/__init__.py
from tetris_bot.session.state import SessionPhase, SessionState

__all__ = ["SessionPhase", "SessionState"]
