"""Version information for commons-batch."""

__version__ = "0.1.0"
