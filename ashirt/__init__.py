"""Evidence models, server DTOs, signed requests, release checks and hotkey parsing for ASHIRT."""

__version__ = "1.2.0"