"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "Asia/Manila"

DEFAULT_CHECKIN_WINDOW_MINUTES = 10
DEFAULT_LATE_WINDOW_MINUTES = 5
DEFAULT_ABSENT_WINDOW_MINUTES = 10
DEFAULT_CHECKOUT_WINDOW_MINUTES = 10

SWEEP_INTERVAL_MINUTES = 30
SWEEP_GRACE_MINUTES = 30

MIN_EXCUSE_REASON_LENGTH = 5

# Month (1-12) at which the academic-year label rolls over.
ACADEMIC_YEAR_START_MONTH = 8

WEEKDAY_CODES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
