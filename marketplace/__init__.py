"""Freelance marketplace backend: local record store, derived views and accounts."""

__version__ = "0.1.0"
