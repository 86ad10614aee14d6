"""Session Description Protocol parsing and formatting."""

__all__ = ["codec", "media", "origin", "session", "util"]