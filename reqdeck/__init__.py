"""Terminal client for composing, storing and firing HTTP requests."""

__version__ = "0.1.0"
