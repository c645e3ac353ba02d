"""Read API for point-of-sale transactions."""

__version__ = "0.1.0"
