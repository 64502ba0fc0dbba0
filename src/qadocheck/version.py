"""Version information for :mod:`qadocheck`."""

__all__ = [
    "VERSION",
]

VERSION = "0.1.0"
