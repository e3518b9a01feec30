"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_HISTORY_LIMIT = 10
DEFAULT_TOTAL_SEATS = 100
DEFAULT_PURPOSE = "Study"
DEFAULT_LIBRARY_NAME = "Chanakya Library"
DEFAULT_OPENING_TIME = "09:00"
DEFAULT_CLOSING_TIME = "18:00"
DEFAULT_REPORT_DAYS = 7
MIN_PASSWORD_LENGTH = 6
