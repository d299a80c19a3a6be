"""Reference clock interface."""

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Source of the reference instant handed to the engine."""

    def now(self) -> datetime:
        """Current local time, naive."""
        ...
