import os


def _csv(name: str) -> tuple:
    raw = os.environ.get(name, "")
    return tuple(item.strip() for item in raw.split(",") if item.strip())


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "attendance-engine-secret"

    # Punch ingestion
    DUPLICATE_THRESHOLD_SECONDS = int(os.environ.get("DUPLICATE_THRESHOLD_SECONDS", "120"))
    MIN_CONFIDENCE_SCORE = float(os.environ.get("MIN_CONFIDENCE_SCORE", "85"))
    REVIEW_CONFLICT_THRESHOLD = int(os.environ.get("REVIEW_CONFLICT_THRESHOLD", "3"))

    # Surcharge on top of the base wage per tier
    OVERTIME_RATES = {
        "surcharge": float(os.environ.get("OVERTIME_RATE_SURCHARGE", "0.25")),
        "supplementary": float(os.environ.get("OVERTIME_RATE_SUPPLEMENTARY", "0.50")),
        "extraordinary": float(os.environ.get("OVERTIME_RATE_EXTRAORDINARY", "1.00")),
        "night": float(os.environ.get("OVERTIME_RATE_NIGHT", "0.25")),
    }

    # Comma separated YYYY-MM-DD dates
    HOLIDAYS = _csv("HOLIDAYS")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


SECRET_KEY = Config.SECRET_KEY
DUPLICATE_THRESHOLD_SECONDS = Config.DUPLICATE_THRESHOLD_SECONDS
MIN_CONFIDENCE_SCORE = Config.MIN_CONFIDENCE_SCORE
REVIEW_CONFLICT_THRESHOLD = Config.REVIEW_CONFLICT_THRESHOLD
OVERTIME_RATES = Config.OVERTIME_RATES
HOLIDAYS = Config.HOLIDAYS
LOG_LEVEL = Config.LOG_LEVEL

DEBUG = bool(int(os.environ.get("DEBUG", "1")))
