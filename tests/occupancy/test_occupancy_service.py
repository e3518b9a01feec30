from __future__ import annotations

from datetime import date, datetime, timedelta

from src.library_system.library_system.attendance.service import AttendanceService
from src.library_system.library_system.occupancy.service import OccupancyService, available_seats
from src.library_system.library_system.settings.model import LibrarySettings
from src.library_system.library_system.settings.service import SettingsService


def _occupancy(attendance_repo, settings_repo) -> OccupancyService:
    return OccupancyService(attendance_repo, SettingsService(settings_repo))


def test_available_seats():
    assert available_seats(100, 30) == 70
    assert available_seats(10, 12) == -2


def test_counts_only_open_visits_from_the_query_day(attendance_repo, settings_repo, fixed_now):
    day = fixed_now.date()
    attendance_repo.create_checkin(user_id=1, check_in=datetime.combine(day, datetime.min.time()))
    attendance_repo.create_checkin(user_id=2, check_in=fixed_now)
    closed = attendance_repo.create_checkin(user_id=3, check_in=fixed_now)
    attendance_repo.update_checkout(attendance_id=closed, check_out=fixed_now + timedelta(hours=1))
    attendance_repo.create_checkin(user_id=4, check_in=fixed_now - timedelta(days=1))
    attendance_repo.create_checkin(user_id=5, check_in=datetime.combine(day + timedelta(days=1), datetime.min.time()))

    assert _occupancy(attendance_repo, settings_repo).count_occupied(day) == 2


def test_check_in_then_out_leaves_count_unchanged(attendance_repo, settings_repo, fixed_now):
    occupancy = _occupancy(attendance_repo, settings_repo)
    recorder = AttendanceService(attendance_repo)
    attendance_repo.create_checkin(user_id=9, check_in=fixed_now - timedelta(hours=1))
    before = occupancy.count_occupied(fixed_now.date())

    rid = recorder.check_in(1, now=fixed_now)
    assert occupancy.count_occupied(fixed_now.date()) == before + 1
    recorder.check_out(1, rid, now=fixed_now + timedelta(minutes=1))

    assert occupancy.count_occupied(fixed_now.date()) == before


def test_snapshot_uses_configured_total(attendance_repo, settings_repo, fixed_now):
    settings_repo.save(LibrarySettings(total_seats=2))
    for user_id in (1, 2, 3):
        attendance_repo.create_checkin(user_id=user_id, check_in=fixed_now)

    snap = _occupancy(attendance_repo, settings_repo).snapshot(fixed_now.date())

    assert (snap.total, snap.occupied, snap.available) == (2, 3, -1)
    assert snap.is_over_capacity is True


def test_snapshot_defaults_to_hundred_seats(attendance_repo, settings_repo):
    snap = _occupancy(attendance_repo, settings_repo).snapshot(date(2026, 2, 2))
    assert snap.total == 100
    assert snap.available == 100
