"""Real clock backed by datetime.now()."""

from datetime import UTC, datetime

from branchstack.core.time.abc import Time


class RealTime(Time):
    """Production implementation reading the system clock."""

    def now(self) -> datetime:
        return datetime.now(UTC)
