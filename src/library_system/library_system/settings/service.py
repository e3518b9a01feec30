from __future__ import annotations

from ..common.datetime_utils import parse_hhmm
from ..common.validators import require_non_empty, require_positive_int
from ..core.exceptions import ValidationError
from .model import LibrarySettings
from .repository import SettingsRepository


class SettingsService:
    """Use case: read and update the library configuration."""

    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def get(self) -> LibrarySettings:
        return self._settings.get() or LibrarySettings()

    def update(
        self,
        *,
        library_name: str,
        total_seats,
        opening_time: str,
        closing_time: str,
        qr_attendance_enabled: bool,
        auto_checkout_enabled: bool,
        email_notifications: bool,
        notice_text: str = "",
    ) -> LibrarySettings:
        name = require_non_empty(library_name, "Library name")
        seats = require_positive_int(total_seats, "Total seats")

        try:
            opens = parse_hhmm(opening_time or "")
            closes = parse_hhmm(closing_time or "")
        except ValueError:
            raise ValidationError("Opening and closing times must use HH:MM")
        if opens >= closes:
            raise ValidationError("Opening time must be before closing time")

        settings = LibrarySettings(
            library_name=name,
            total_seats=seats,
            opening_time=opens,
            closing_time=closes,
            qr_attendance_enabled=bool(qr_attendance_enabled),
            auto_checkout_enabled=bool(auto_checkout_enabled),
            email_notifications=bool(email_notifications),
            notice_text=(notice_text or "").strip(),
        )
        self._settings.save(settings)
        return settings
