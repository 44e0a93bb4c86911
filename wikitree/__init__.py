"""Section tree storage and assembly for a documentation wiki."""

__version__ = "0.1.0"
