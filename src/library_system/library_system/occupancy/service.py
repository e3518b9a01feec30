from __future__ import annotations

from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import day_bounds, now_local
from ..settings.service import SettingsService
from .model import SeatOccupancy


def available_seats(total: int, occupied: int) -> int:
    """Free seats; negative when more visits are open than seats exist."""
    return int(total) - int(occupied)


class OccupancyService:
    """Use case: how many seats are taken right now.

    Recomputed from a count query on every call; nothing is cached.
    """

    def __init__(self, attendance: AttendanceRepository, settings: SettingsService):
        self._attendance = attendance
        self._settings = settings

    def count_occupied(self, day: date) -> int:
        start, end = day_bounds(day)
        return self._attendance.count_open_between(start, end)

    def snapshot(self, day: Optional[date] = None) -> SeatOccupancy:
        day = day or now_local().date()
        total = self._settings.get().total_seats
        occupied = self.count_occupied(day)
        return SeatOccupancy(day=day, total=total, occupied=occupied, available=available_seats(total, occupied))
