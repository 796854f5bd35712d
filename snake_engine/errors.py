"""Engine error types."""


class SnakeEngineError(Exception):
    pass


class ConfigError(SnakeEngineError, ValueError):
    """Invalid board size or engine option at construction."""


class BoardFullError(SnakeEngineError):
    """No free cell is left to place food on."""
