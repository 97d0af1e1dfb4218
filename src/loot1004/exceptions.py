class Loot1004Error(Exception):
    """Base exception for the Loot 1004 project."""


class ConfigError(Loot1004Error):
    """Raised when a configuration document cannot be loaded or validated."""


class LevelGenerationError(Loot1004Error):
    """Raised when the generator cannot place a tile within its retry budget."""
