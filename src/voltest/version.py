"""Version information for voltest."""

__version__ = "0.1.0"
