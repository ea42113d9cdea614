"""Store catalog admin client."""

__version__ = "1.0.0"
