from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class SeatOccupancy:
    day: date
    total: int
    occupied: int
    available: int

    @property
    def is_over_capacity(self) -> bool:
        return self.available < 0
