"""Factory helpers for fresh game state."""

from .game_factory import create_new_game_state

__all__ = ["create_new_game_state"]
