# src/tetris_bot/config/rules.py
from __future__ import annotations

import math

from pydantic import Field, ValidationError, field_validator, model_validator

from tetris_bot.config.base import ConfigBase
from tetris_bot.game.core.types import ComboTable, KickTable, SpinBonus
from tetris_bot.protocol.errors import ConfigurationError


class RuleConfiguration(ConfigBase):
    """
    Session-wide rule snapshot, received once per `config` message.

    Validation (any failure is fatal for the session):
      - board_width / board_height are positive
      - garbage_multiplier is finite and non-negative
      - with b2b_charging: charge thresholds are non-negative and charge_base <= charge_at
      - garbage_cap, pc_b2b, pc_garbage are non-negative
    """

    board_width: int = Field(gt=0)
    board_height: int = Field(gt=0)

    kicks: KickTable = KickTable.SRS_PLUS
    spins: SpinBonus = SpinBonus.T_SPINS
    combo_table: ComboTable = ComboTable.MULTIPLIER

    b2b_charging: bool = False
    b2b_charge_at: int = 0
    b2b_charge_base: int = 0
    b2b_chaining: bool = True

    garbage_multiplier: float = Field(default=1.0, ge=0.0)
    garbage_cap: int = Field(default=8, ge=0)
    garbage_special_bonus: bool = False

    pc_b2b: int = Field(default=0, ge=0)
    pc_garbage: int = Field(default=0, ge=0)

    @field_validator("garbage_multiplier")
    @classmethod
    def _finite_multiplier(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError(f"garbage_multiplier must be finite, got {v!r}")
        return v

    @model_validator(mode="after")
    def _validate_b2b_charging(self) -> "RuleConfiguration":
        if not self.b2b_charging:
            return self
        if self.b2b_charge_at < 0 or self.b2b_charge_base < 0:
            raise ValueError(
                f"b2b charge thresholds must be non-negative, got at={self.b2b_charge_at} base={self.b2b_charge_base}"
            )
        if self.b2b_charge_base > self.b2b_charge_at:
            raise ValueError(
                f"b2b_charge_base ({self.b2b_charge_base}) must not exceed b2b_charge_at ({self.b2b_charge_at})"
            )
        return self

    @property
    def allows_180(self) -> bool:
        return self.kicks in (KickTable.SRS_PLUS, KickTable.SRS_X)


def build_rule_configuration(**fields: object) -> RuleConfiguration:
    """
    Validate rule fields into a RuleConfiguration, surfacing failures as ConfigurationError.
    """
    try:
        return RuleConfiguration.model_validate(fields)
    except ValidationError as e:
        raise ConfigurationError(f"invalid rule configuration: {e}") from e


__all__ = ["RuleConfiguration", "build_rule_configuration"]
