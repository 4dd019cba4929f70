# analysis/__init__.py

"""
Export utilities for finished taxonomy trees.

This package exposes only the reusable export functions.
"""

from .export import to_csv, to_frame, to_json

__all__ = [
    "to_csv",
    "to_frame",
    "to_json",
]
