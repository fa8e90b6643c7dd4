"""Worklist: an HTTP API for an ordered list of todo items."""

__version__ = "1.0.0"
