"""Setlist Share - collaborative, ordered setlists with graduated sharing."""

__version__ = "0.1.0"
