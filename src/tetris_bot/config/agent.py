# src/tetris_bot/config/agent.py
from __future__ import annotations

from pydantic import Field, field_validator

from tetris_bot import __version__
from tetris_bot.config.base import ConfigBase


class HeuristicWeights(ConfigBase):
    # CodemyRoad: a*agg_height + b*complete_lines + c*holes + d*bumpiness
    a_agg_height: float = -0.510066
    b_lines: float = 0.760666
    c_holes: float = -0.35663
    d_bumpiness: float = -0.184483
    # versus-play terms: garbage sent, and stack height pushed past the danger line
    e_attack: float = 0.5
    f_danger: float = -1.0
    danger_fraction: float = Field(default=0.6, gt=0.0, le=1.0)


class AgentConfig(ConfigBase):
    """
    Agent identity and tuning. Built in code; nothing is read from the environment.
    """

    name: str = "tetris-bot"
    version: str = __version__
    author: str = "tetris-bot developers"

    log_level: str = "info"
    use_rich: bool = True

    weights: HeuristicWeights = HeuristicWeights()

    @field_validator("name", "version", "author")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not str(v).strip():
            raise ValueError("info fields must be non-empty")
        return v

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        lvl = str(v).strip().lower()
        if lvl not in {"debug", "info", "warning", "error", "critical"}:
            raise ValueError(f"log_level must be one of debug|info|warning|error|critical, got {v!r}")
        return lvl


__all__ = ["AgentConfig", "HeuristicWeights"]
