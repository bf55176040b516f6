# src/tetris_bot/protocol/messages.py
from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Tuple, Union

from pydantic import AliasChoices, BeforeValidator, Field, StrictBool, StrictInt, field_validator

from tetris_bot.config.base import WireModel
from tetris_bot.config.rules import RuleConfiguration, build_rule_configuration
from tetris_bot.game.core.types import CellState, ComboTable, InputAction, KickTable, PieceKind, SpinBonus


# -----------------------------------------------------------------------------
# Wire spellings accepted from engines that predate the canonical names
# -----------------------------------------------------------------------------
def _piece_token(v: Any) -> Any:
    return v.upper() if isinstance(v, str) else v


def _cell_token(v: Any) -> Any:
    if v is None:
        return CellState.EMPTY.value
    return v.lower() if isinstance(v, str) else v


def _combo_table_token(v: Any) -> Any:
    return v.strip().lower().replace(" ", "-") if isinstance(v, str) else v


def _spin_token(v: Any) -> Any:
    if isinstance(v, str) and v.strip().lower() == "none":
        return SpinBonus.NONE.value
    return v


Piece = Annotated[PieceKind, BeforeValidator(_piece_token)]
Cell = Annotated[CellState, BeforeValidator(_cell_token)]
Combo = Annotated[ComboTable, BeforeValidator(_combo_table_token)]
Spins = Annotated[SpinBonus, BeforeValidator(_spin_token)]
Number = Annotated[float, Field(strict=True, allow_inf_nan=False)]


# -----------------------------------------------------------------------------
# Incoming (engine -> agent)
# -----------------------------------------------------------------------------
class ConfigMessage(WireModel):
    type: Literal["config"] = "config"

    board_width: StrictInt = Field(alias="boardWidth")
    board_height: StrictInt = Field(alias="boardHeight")

    kicks: KickTable
    spins: Spins
    combo_table: Combo = Field(alias="comboTable")

    b2b_charging: StrictBool = Field(
        validation_alias=AliasChoices("b2bCharging", "b2bCharing", "b2b_charging"),
        serialization_alias="b2bCharging",
    )
    b2b_charge_at: StrictInt = Field(alias="b2bChargeAt")
    b2b_charge_base: StrictInt = Field(alias="b2bChargeBase")
    b2b_chaining: StrictBool = Field(alias="b2bChaining")

    garbage_multiplier: Number = Field(alias="garbageMultiplier")
    garbage_cap: StrictInt = Field(alias="garbageCap")
    garbage_special_bonus: StrictBool = Field(alias="garbageSpecialBonus")

    pc_b2b: StrictInt = Field(alias="pcB2b")
    pc_garbage: StrictInt = Field(alias="pcGarbage")

    queue: Tuple[Piece, ...] = ()

    def rules(self) -> RuleConfiguration:
        """Validated ruleset carried by this message; raises ConfigurationError."""
        fields = self.model_dump(exclude={"type", "queue"})
        return build_rule_configuration(**fields)


class StateMessage(WireModel):
    type: Literal["state"] = "state"

    board: Tuple[Tuple[Cell, ...], ...]

    current: Piece
    hold: Optional[Piece] = None
    queue: Tuple[Piece, ...] = ()

    garbage: Tuple[StrictInt, ...] = ()

    combo: StrictInt
    b2b: StrictInt

    @field_validator("board")
    @classmethod
    def _rectangular(cls, v: Tuple[Tuple[CellState, ...], ...]) -> Tuple[Tuple[CellState, ...], ...]:
        widths = {len(row) for row in v}
        if len(widths) > 1:
            raise ValueError(f"board rows must all have the same width, got widths {sorted(widths)}")
        return v

    @field_validator("garbage")
    @classmethod
    def _non_negative_garbage(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        if any(g < 0 for g in v):
            raise ValueError(f"garbage amounts must be non-negative, got {list(v)}")
        return v


class PiecesMessage(WireModel):
    type: Literal["pieces"] = "pieces"

    pieces: Tuple[Piece, ...]


class PlayMessage(WireModel):
    type: Literal["play"] = "play"

    garbage_multiplier: Number = Field(alias="garbageMultiplier")
    garbage_cap: StrictInt = Field(alias="garbageCap")


IncomingMessage = Annotated[
    Union[ConfigMessage, StateMessage, PiecesMessage, PlayMessage],
    Field(discriminator="type"),
]


# -----------------------------------------------------------------------------
# Outgoing (agent -> engine)
# -----------------------------------------------------------------------------
class InfoMessage(WireModel):
    type: Literal["info"] = "info"

    name: str
    version: str
    author: str


class MoveMessage(WireModel):
    type: Literal["move"] = "move"

    keys: Tuple[InputAction, ...] = Field(min_length=1)


OutgoingMessage = Annotated[
    Union[InfoMessage, MoveMessage],
    Field(discriminator="type"),
]


__all__ = [
    "ConfigMessage",
    "IncomingMessage",
    "InfoMessage",
    "MoveMessage",
    "OutgoingMessage",
    "PiecesMessage",
    "PlayMessage",
    "StateMessage",
]
