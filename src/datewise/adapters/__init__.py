"""Adapters - I/O implementations of ports."""

from .clock import SystemClock, FixedClock

__all__ = [
    "SystemClock",
    "FixedClock",
]
