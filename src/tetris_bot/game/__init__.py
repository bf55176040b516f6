# src/tetris_bot/game/__init__.py
