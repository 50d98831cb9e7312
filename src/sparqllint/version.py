"""Version information for :mod:`sparqllint`."""

__all__ = [
    "VERSION",
]

VERSION = "0.3.0"
