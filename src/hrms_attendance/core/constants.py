"""Constants and defaults.

Note: Keep business-rule times here to avoid magic numbers spread across code.
"""

from datetime import time

TARGET_WORKING_HOURS = 9.0
HOURS_PRECISION = 2

LATE_ENTRY_WINDOW_START = time(10, 15)
LATE_ENTRY_WINDOW_END = time(10, 35)

EARLY_EXIT_WINDOW_START = time(18, 50)
EARLY_EXIT_WINDOW_END = time(19, 0)

NOT_MARKED_LABEL = "Not Marked"

# Column widths of attendance_punches.device / .ip
MAX_DEVICE_LENGTH = 255
MAX_IP_LENGTH = 64

# Attempts at load -> validate -> save before giving up on a contended record
MAX_SAVE_ATTEMPTS = 3
