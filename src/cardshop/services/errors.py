"""Service-layer exceptions."""


class SaveLoadError(Exception):
    """Raised when a persisted payload cannot be turned back into a game."""
