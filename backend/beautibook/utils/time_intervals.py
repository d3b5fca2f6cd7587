"""Half-open time intervals on a staff member's calendar."""

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class TimeInterval:
    """``[start, end)``; touching intervals do not overlap."""

    start: datetime
    end: datetime

    @classmethod
    def from_duration(cls, start: datetime, duration_minutes: int) -> "TimeInterval":
        return cls(start=start, end=start + timedelta(minutes=duration_minutes))

    def overlaps(self, other: "TimeInterval") -> bool:
        return self.start < other.end and other.start < self.end

    def contains(self, other: "TimeInterval") -> bool:
        return self.start <= other.start and other.end <= self.end
