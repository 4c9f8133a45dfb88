SECRET_KEY = "test-secret"

DUPLICATE_THRESHOLD_SECONDS = 120
MIN_CONFIDENCE_SCORE = 85
REVIEW_CONFLICT_THRESHOLD = 3
OVERTIME_RATES = {"surcharge": 0.25, "supplementary": 0.50, "extraordinary": 1.00, "night": 0.25}
HOLIDAYS = ("2024-12-25",)

LOG_LEVEL = "WARNING"
DEBUG = False
TESTING = True
