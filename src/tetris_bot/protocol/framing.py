# src/tetris_bot/protocol/framing.py
from __future__ import annotations

import logging
from typing import IO, Iterator, Union

from pydantic import TypeAdapter, ValidationError

from tetris_bot.protocol.errors import FramingError, OutgoingWriteError
from tetris_bot.protocol.messages import (
    ConfigMessage,
    IncomingMessage,
    InfoMessage,
    MoveMessage,
    OutgoingMessage,
    PiecesMessage,
    PlayMessage,
    StateMessage,
)

logger = logging.getLogger(__name__)

AnyIncoming = Union[ConfigMessage, StateMessage, PiecesMessage, PlayMessage]
AnyOutgoing = Union[InfoMessage, MoveMessage]

_INCOMING: TypeAdapter[AnyIncoming] = TypeAdapter(IncomingMessage)
_OUTGOING: TypeAdapter[AnyOutgoing] = TypeAdapter(OutgoingMessage)


def _first_error(e: ValidationError) -> str:
    errs = e.errors()
    if not errs:
        return str(e)
    err = errs[0]
    loc = ".".join(str(p) for p in err.get("loc", ())) or "<message>"
    more = f" (+{len(errs) - 1} more)" if len(errs) > 1 else ""
    return f"{loc}: {err.get('msg', 'invalid')}{more}"


def decode_incoming(line: Union[str, bytes]) -> AnyIncoming:
    """
    Decode one line into an Incoming message.

    Any failure (bad UTF-8, bad JSON, unknown `type`, wrong field type) is a FramingError.
    """
    if isinstance(line, bytes):
        try:
            line = line.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FramingError(f"line is not valid UTF-8: {e}") from e
    try:
        return _INCOMING.validate_json(line)
    except ValidationError as e:
        raise FramingError(f"undecodable message: {_first_error(e)}") from e


def decode_outgoing(line: Union[str, bytes]) -> AnyOutgoing:
    """Inverse of encode_message() for Outgoing messages (used by engine-side tooling and tests)."""
    try:
        return _OUTGOING.validate_json(line)
    except ValidationError as e:
        raise FramingError(f"undecodable message: {_first_error(e)}") from e


def encode_message(message: Union[AnyIncoming, AnyOutgoing]) -> str:
    """
    Encode one message as compact single-line JSON (no trailing newline).
    """
    return message.model_dump_json(by_alias=True)


class LineReader:
    """
    Iterates over complete lines of a binary stream.

    Blank lines are skipped. Iteration ends at end-of-input; a trailing
    line without a newline still counts as a complete message.
    """

    def __init__(self, stream: IO[bytes]) -> None:
        self.stream = stream
        self.lines_read = 0

    def __iter__(self) -> Iterator[bytes]:
        while True:
            raw = self.stream.readline()
            if not raw:
                return
            self.lines_read += 1
            if not raw.strip():
                continue
            yield raw.rstrip(b"\r\n")

    def messages(self) -> Iterator[AnyIncoming]:
        for raw in self:
            yield decode_incoming(raw)


class LineWriter:
    """
    Writes one message per line and flushes after each, so the peer never
    sees a partial or coalesced response.
    """

    def __init__(self, stream: IO[bytes]) -> None:
        self.stream = stream
        self.lines_written = 0

    def send(self, message: AnyOutgoing) -> None:
        payload = encode_message(message).encode("utf-8") + b"\n"
        try:
            self.stream.write(payload)
            self.stream.flush()
        except (OSError, ValueError) as e:
            raise OutgoingWriteError(f"failed to write {message.type!r} message: {e}") from e
        self.lines_written += 1
        logger.debug("sent %s", payload.rstrip(b"\n").decode("utf-8"))


__all__ = [
    "AnyIncoming",
    "AnyOutgoing",
    "LineReader",
    "LineWriter",
    "decode_incoming",
    "decode_outgoing",
    "encode_message",
]
