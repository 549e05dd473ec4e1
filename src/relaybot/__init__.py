"""IRC chat relay bot backed by an external text generator."""

__version__ = "0.1.0"
