"""Static risk scanner for package lifecycle scripts."""

__version__ = "0.1.0"
