"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

CLOCK_SKEW_SECONDS = 60
UNKNOWN_NAME = "Unknown"
MAX_REASON_LENGTH = 1000
MIN_CYCLE_YEAR = 2000
MAX_CYCLE_YEAR = 2100

MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
