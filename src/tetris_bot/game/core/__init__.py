# src/tetris_bot/game/core/__init__.py
