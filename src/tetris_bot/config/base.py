# src/tetris_bot/config/base.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ConfigBase(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )


class WireModel(BaseModel):
    """
    Base for line-protocol messages.

    Peers may attach payloads we do not model (e.g. `data`); those are dropped.
    Fields are addressed by their camelCase wire alias or by attribute name.
    """

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )
