# src/tetris_bot/agents/__init__.py
from tetris_bot.agents.chooser import MoveChooser, Placement, PlacementRequest
from tetris_bot.agents.heuristic_agent import HeuristicChooser
from tetris_bot.agents.keys import FALLBACK_KEYS, KeyPlanner

__all__ = [
    "FALLBACK_KEYS",
    "HeuristicChooser",
    "KeyPlanner",
    "MoveChooser",
    "Placement",
    "PlacementRequest",
]
