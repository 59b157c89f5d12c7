"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_WORK_START = time(9, 0)
DEFAULT_WORK_END = time(18, 0)

# Clock-ins up to this many minutes after the scheduled start count as on time.
LATE_GRACE_MINUTES = 1

MINUTES_PER_DAY = 24 * 60
HOURS_PRECISION = 2

# Day numbers count from Sunday = 0; Monday to Friday by default.
DEFAULT_WORKING_DAYS = (1, 2, 3, 4, 5)

# Clock-in reminder fires this long before the start; both reminders match within the window.
REMINDER_LEAD_MINUTES = 15
REMINDER_WINDOW_MINUTES = 10
