from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..common.datetime_utils import parse_hhmm
from ..core.constants import DEFAULT_CLOSING_TIME, DEFAULT_LIBRARY_NAME, DEFAULT_OPENING_TIME, DEFAULT_TOTAL_SEATS


@dataclass(frozen=True)
class LibrarySettings:
    """The single library configuration row."""

    library_name: str = DEFAULT_LIBRARY_NAME
    total_seats: int = DEFAULT_TOTAL_SEATS
    opening_time: time = parse_hhmm(DEFAULT_OPENING_TIME)
    closing_time: time = parse_hhmm(DEFAULT_CLOSING_TIME)
    qr_attendance_enabled: bool = True
    auto_checkout_enabled: bool = False
    email_notifications: bool = False
    notice_text: str = ""
