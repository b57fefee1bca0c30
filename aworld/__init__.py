"""A small multiplayer simulation world served over UDP."""

__version__ = "0.1.0"