from .loader import Difficulty, GameConfig, load_config

__all__ = ["Difficulty", "GameConfig", "load_config"]
