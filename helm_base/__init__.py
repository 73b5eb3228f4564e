"""
.. include:: ../README.md
"""

__all__ = [
    "construct",
    "release",
    "values",
    "host",
    "exceptions",
]
