"""Taskboard sync: client-side reconciliation and ordering for shared task boards."""

__version__ = "0.1.0"
