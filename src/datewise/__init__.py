"""Date/time resolution and recurrence engine."""

__version__ = "0.1.0"
