"""TikTok upload relay service."""

__version__ = "1.0.1"
