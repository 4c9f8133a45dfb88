"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_DUPLICATE_THRESHOLD_SECONDS = 120
MIN_CONFIDENCE_SCORE = 85
MAX_CONFIDENCE_SCORE = 100
DEFAULT_REVIEW_CONFLICT_THRESHOLD = 3

MAX_LUNCH_MINUTES = 240
MAX_TOTAL_HOURS = 24
MAX_SCHEDULED_HOURS = 12

REGULAR_HOURS_CAP = 8
SURCHARGE_TIER_HOURS = 2
SUPPLEMENTARY_TIER_HOURS = 2
DEFAULT_MINIMUM_HOURS = 4
DEFAULT_SCHEDULED_HOURS = 8

DEFAULT_SURCHARGE_RATE = 0.25
DEFAULT_SUPPLEMENTARY_RATE = 0.50
DEFAULT_EXTRAORDINARY_RATE = 1.00
DEFAULT_NIGHT_RATE = 0.25
MAX_TIER_RATE = 2.0
MAX_EXTRAORDINARY_RATE = 3.0

NIGHT_START = time(22, 0)
NIGHT_END = time(6, 0)
