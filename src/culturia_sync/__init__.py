"""Culturia playlist sync: approved submissions -> per-country YouTube playlists."""

__version__ = "1.0.0"
