"""Localized content resolution and search for The Paguro Journey."""

__version__ = "0.3.0"
