"""Terminal client for shared task boards."""

__version__ = "0.1.0"
