import os

from config.config import Config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DUPLICATE_THRESHOLD_SECONDS = Config.DUPLICATE_THRESHOLD_SECONDS
MIN_CONFIDENCE_SCORE = Config.MIN_CONFIDENCE_SCORE
REVIEW_CONFLICT_THRESHOLD = Config.REVIEW_CONFLICT_THRESHOLD
OVERTIME_RATES = Config.OVERTIME_RATES
HOLIDAYS = Config.HOLIDAYS

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEBUG = False
