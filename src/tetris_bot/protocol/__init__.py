# src/tetris_bot/protocol/__init__.py
from tetris_bot.protocol.errors import (
    ConfigurationError,
    FramingError,
    MoveChooserFailure,
    OutgoingWriteError,
    ProtocolError,
    StateTransitionError,
)

__all__ = [
    "ConfigurationError",
    "FramingError",
    "MoveChooserFailure",
    "OutgoingWriteError",
    "ProtocolError",
    "StateTransitionError",
]
