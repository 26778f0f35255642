"""A keyboard-driven terminal music player with liked songs, playlists and a queue."""

__version__ = "0.1.0"
__all__ = ["library", "marquee", "metadata", "player", "ui"]