DB_FILE = "data.db"
DEV_DB_FILE = "data-dev.db"


def db_file_for_env(env: str | None) -> str:
    return DEV_DB_FILE if env == "development" else DB_FILE


DATE_FORMAT = "%Y-%m-%d"
LABEL_DAY_FORMAT = "%m-%d"
LABEL_MONTH_FORMAT = "%b"
BACKUP_FILE_PREFIX = "account_backup_"
EXPORT_VERSION = 1

TRANSACTION_TYPES = ["expense", "income"]

# Seeded once, in this order, when the categories table is empty.
DEFAULT_CATEGORIES = [
    {"name": "Food",      "type": "expense"},
    {"name": "Transport", "type": "expense"},
    {"name": "Shopping",  "type": "expense"},
    {"name": "Salary",    "type": "income"},
    {"name": "Bonus",     "type": "income"},
]

# HSL model used by the colour generator
COLOR_SATURATION = 70
COLOR_LIGHTNESS = 50
MIN_HUE_DIFF = 60
MIN_HUE_DIFF_FLOOR = 10
HUE_DIFF_STEP = 10
START_HUES = {
    "expense": 0,    # red-leaning palette
    "income": 210,   # blue-leaning palette
}

# Chart
BUCKET_COUNT = 12
DAILY_BUCKET_MAX_DAYS = 12      # custom ranges shorter than this get one bucket per day
TWO_DAY_BUCKET_MAX_DAYS = 24    # ... shorter than this get two-day buckets
UNKNOWN_CATEGORY_COLOR = "#cccccc"
BREAKDOWN_FALLBACK_COLOR = "#999999"
SUBCATEGORY_HINT_LIMIT = 5
