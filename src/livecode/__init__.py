"""Live code execution drivers for presentation slides."""

__version__ = "0.1.0"
