"""runrun - runners and race results API."""

__version__ = "0.1.0"
