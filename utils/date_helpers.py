from datetime import date, datetime, time, timedelta
import calendar
from utils.constants import DATE_FORMAT

END_OF_DAY = time(23, 59, 59, 999000)   # last millisecond of a day
HALF_DAY = timedelta(hours=12)


def today() -> date:
    return date.today()


def today_str() -> str:
    return date.today().strftime(DATE_FORMAT)


def now_ms() -> int:
    """Milliseconds since the epoch, used for transaction timestamps."""
    return int(datetime.now().timestamp() * 1000)


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def local_midnight(d: date) -> datetime:
    return datetime.combine(d, time.min)


def end_of_day(d: date) -> datetime:
    return datetime.combine(d, END_OF_DAY)


def center_instant(d: date) -> datetime:
    """Midday of the given date; used to place a dated transaction in a bucket."""
    return local_midnight(d) + HALF_DAY


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    max_day = calendar.monthrange(year, month)[1]
    return min(day, max_day)


def add_months(d: date, n: int) -> date:
    """Add n months to date d (n may be negative), clamping day to month end."""
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    day = clamp_day_to_month(year, month, d.day)
    return d.replace(year=year, month=month, day=day)


def friendly_month(year: int, month: int, language: str = "en") -> str:
    """Month heading for grouped views, e.g. 'Feb' or '2月'."""
    if language == "zh":
        return f"{month}月"
    return date(year, month, 1).strftime("%b")


def reminder_month_key(d: date) -> str:
    """Unpadded 'YYYY-M' key marking the month a backup reminder was shown."""
    return f"{d.year}-{d.month}"
