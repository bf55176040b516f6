# src/tetris_bot/utils/__init__.py
