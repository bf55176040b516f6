# src/tetris_bot/protocol/errors.py
from __future__ import annotations


class ProtocolError(Exception):
    """
    Base class for agent-side protocol failures.

    `fatal` errors end the session; recoverable ones are reported and the
    offending message is discarded.
    """

    fatal: bool = True


class FramingError(ProtocolError):
    """Malformed line, undecodable JSON, unknown `type` tag or a field of the wrong type."""

    fatal = True


class ConfigurationError(ProtocolError):
    """A `config` message carried an invalid ruleset."""

    fatal = True


class OutgoingWriteError(ProtocolError):
    """The response channel could not be written or flushed."""

    fatal = True


class StateTransitionError(ProtocolError):
    """A schema-valid message arrived in a session phase that cannot accept it."""

    fatal = False


class MoveChooserFailure(ProtocolError):
    """No legal placement could be chosen or realised as key presses."""

    fatal = False


__all__ = [
    "ConfigurationError",
    "FramingError",
    "MoveChooserFailure",
    "OutgoingWriteError",
    "ProtocolError",
    "StateTransitionError",
]
