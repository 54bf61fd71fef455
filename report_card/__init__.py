"""Student records and report card generation."""

__version__ = "1.0.0"
