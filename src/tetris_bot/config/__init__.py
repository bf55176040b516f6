# src/tetris_bot/config/__init__.py
