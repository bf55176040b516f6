# src/tetris_bot/__init__.py
"""Agent side of the line-delimited JSON bot protocol for a falling-block puzzle engine."""

__version__ = "0.1.0"
