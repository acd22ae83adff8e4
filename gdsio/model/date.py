# gdsio/model/date.py
from __future__ import annotations

from dataclasses import astuple, dataclass
from datetime import datetime
from typing import List, Sequence


@dataclass
class Date:
    """
    Timestamp as stored in BGNLIB/BGNSTR: six int16 fields, no timezone.

    ``year`` is the absolute year (1970, not 70).
    """
    year: int = 1970
    month: int = 1
    day: int = 1
    hour: int = 0
    minute: int = 0
    second: int = 0

    FIELD_COUNT = 6

    @classmethod
    def epoch(cls) -> "Date":
        return cls()

    @classmethod
    def now(cls) -> "Date":
        return cls.from_datetime(datetime.now())

    @classmethod
    def from_datetime(cls, dt: datetime) -> "Date":
        return cls(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second)

    def to_datetime(self) -> datetime:
        return datetime(self.year, self.month, self.day, self.hour, self.minute, self.second)

    @classmethod
    def from_record_data(cls, values: Sequence[int]) -> "Date":
        """Build from up to six values; missing fields become 0."""
        fields = [int(v) for v in values[: cls.FIELD_COUNT]]
        fields += [0] * (cls.FIELD_COUNT - len(fields))
        return cls(*fields)

    def to_record_data(self) -> List[int]:
        return list(astuple(self))

    def __str__(self) -> str:
        return (
            f"{self.year}/{self.month:02}/{self.day:02} "
            f"{self.hour:02}:{self.minute:02}:{self.second:02}"
        )
