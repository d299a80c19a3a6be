"""Clock adapters."""

from datetime import datetime


class SystemClock:
    """
    Wall-clock time.

    Implements Clock protocol. The only place the package reads the system
    clock; the core receives the instant as a parameter.
    """

    def now(self) -> datetime:
        return datetime.now().replace(second=0, microsecond=0)


class FixedClock:
    """Clock pinned to one instant, for tests and replaying a given "now"."""

    def __init__(self, instant: datetime):
        self.instant = instant

    def now(self) -> datetime:
        return self.instant
