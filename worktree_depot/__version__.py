"""Version information for wk."""

__version__ = "0.1.0"
