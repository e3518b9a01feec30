from __future__ import annotations

from datetime import time

import pytest

from src.library_system.library_system.core.exceptions import ValidationError
from src.library_system.library_system.settings.service import SettingsService


def _update(svc: SettingsService, **overrides):
    values = dict(
        library_name="Chanakya Library",
        total_seats="80",
        opening_time="08:30",
        closing_time="20:00",
        qr_attendance_enabled=True,
        auto_checkout_enabled=True,
        email_notifications=False,
        notice_text="  Closed on Sunday  ",
    )
    values.update(overrides)
    return svc.update(**values)


def test_defaults_when_nothing_saved(settings_repo):
    settings = SettingsService(settings_repo).get()
    assert settings.library_name == "Chanakya Library"
    assert settings.total_seats == 100
    assert settings.opening_time == time(9, 0)
    assert settings.closing_time == time(18, 0)
    assert settings.qr_attendance_enabled is True
    assert settings.auto_checkout_enabled is False


def test_update_persists_single_settings_row(settings_repo):
    svc = SettingsService(settings_repo)
    _update(svc)

    saved = svc.get()
    assert saved.total_seats == 80
    assert saved.opening_time == time(8, 30)
    assert saved.auto_checkout_enabled is True
    assert saved.notice_text == "Closed on Sunday"


@pytest.mark.parametrize(
    "overrides",
    [
        {"library_name": "  "},
        {"total_seats": "0"},
        {"total_seats": "lots"},
        {"opening_time": "9am"},
        {"opening_time": "19:00", "closing_time": "18:00"},
    ],
)
def test_update_rejects_invalid_values(settings_repo, overrides):
    svc = SettingsService(settings_repo)
    with pytest.raises(ValidationError):
        _update(svc, **overrides)
    assert settings_repo.settings is None
