"""Bar chart data: split a date range into buckets and total transactions per bucket.

All instants are naive local datetimes. A range runs from local midnight of
its first day to the last millisecond of its last day.
"""
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable

from database.transaction_dao import TransactionDAO
from models.chart import Bucket, ChartRange, RangeKind
from models.transaction import Transaction
from services.category_service import CategoryService
from utils.constants import (
    BUCKET_COUNT,
    DAILY_BUCKET_MAX_DAYS,
    LABEL_DAY_FORMAT,
    LABEL_MONTH_FORMAT,
    TWO_DAY_BUCKET_MAX_DAYS,
)
from utils.date_helpers import (
    add_months,
    center_instant,
    end_of_day,
    local_midnight,
    parse_date,
    today as current_day,
)
from utils.logging_setup import get_logger

log = get_logger("tally.services.chart")

ONE_MS = timedelta(milliseconds=1)


class BucketPolicy(Enum):
    DAILY = "daily"              # one bucket per calendar day
    TWO_DAY = "two_day"          # two calendar days per bucket, walked from start
    EVEN_TWELVE = "even_twelve"  # twelve equal (possibly fractional-day) buckets


def select_policy(kind: RangeKind, duration_days: int) -> BucketPolicy:
    if kind is RangeKind.CUSTOM:
        if duration_days < DAILY_BUCKET_MAX_DAYS:
            return BucketPolicy.DAILY
        if duration_days < TWO_DAY_BUCKET_MAX_DAYS:
            return BucketPolicy.TWO_DAY
    return BucketPolicy.EVEN_TWELVE


def resolve_interval(
    chart_range: ChartRange, today: date | None = None
) -> tuple[datetime, datetime] | None:
    """Return the inclusive (start, end) instants, or None when a custom bound is missing."""
    kind = RangeKind(chart_range.kind)
    if kind is RangeKind.CUSTOM:
        first = parse_date(chart_range.custom_start)
        last = parse_date(chart_range.custom_end)
        if first is None or last is None:
            return None
        if last < first:
            first, last = last, first
        return local_midnight(first), end_of_day(last)

    ref = today or current_day()
    if kind is RangeKind.TWELVE_DAYS:
        first = ref - timedelta(days=BUCKET_COUNT - 1)
    elif kind is RangeKind.THREE_MONTHS:
        first = add_months(ref, -3)
    else:
        first = add_months(ref, -12)
    return local_midnight(first), end_of_day(ref)


def duration_in_days(start: datetime, end: datetime) -> int:
    return (end.date() - start.date()).days + 1


def _span_label(start: datetime, end: datetime) -> str:
    if start.date() == end.date():
        return start.strftime(LABEL_DAY_FORMAT)
    return f"{start.strftime(LABEL_DAY_FORMAT)} ~ {end.strftime(LABEL_DAY_FORMAT)}"


def _daily_buckets(start: datetime, duration_days: int) -> list[Bucket]:
    buckets = []
    for i in range(duration_days):
        day = (start + timedelta(days=i)).date()
        buckets.append(Bucket(
            label=local_midnight(day).strftime(LABEL_DAY_FORMAT),
            start=local_midnight(day),
            end=end_of_day(day),
        ))
    return buckets


def _two_day_buckets(start: datetime, end: datetime) -> list[Bucket]:
    buckets = []
    current = start
    while current <= end:
        following = current + timedelta(days=1)
        last_day = following if following <= end else current
        bucket_end = end_of_day(last_day.date())
        buckets.append(Bucket(
            label=_span_label(current, bucket_end),
            start=current,
            end=bucket_end,
        ))
        current += timedelta(days=2)
    return buckets


def _even_buckets(
    start: datetime, duration_days: int, month_labels: bool
) -> list[Bucket]:
    width = duration_days / BUCKET_COUNT
    buckets = []
    for i in range(BUCKET_COUNT):
        bucket_start = start + timedelta(days=i * width)
        bucket_end = start + timedelta(days=(i + 1) * width) - ONE_MS
        if month_labels:
            label = bucket_start.strftime(LABEL_MONTH_FORMAT)
        else:
            label = _span_label(bucket_start, bucket_end)
        buckets.append(Bucket(label=label, start=bucket_start, end=bucket_end))
    return buckets


def build_buckets(
    kind: RangeKind, start: datetime, end: datetime
) -> list[Bucket]:
    """Empty buckets covering [start, end], chronologically ordered."""
    duration_days = duration_in_days(start, end)
    policy = select_policy(kind, duration_days)
    if policy is BucketPolicy.DAILY:
        return _daily_buckets(start, duration_days)
    if policy is BucketPolicy.TWO_DAY:
        return _two_day_buckets(start, end)
    return _even_buckets(start, duration_days, month_labels=kind is RangeKind.ONE_YEAR)


def _find_bucket(buckets: list[Bucket], instant: datetime) -> Bucket | None:
    for bucket in buckets:
        if bucket.start <= instant <= bucket.end:
            return bucket
    return None


def accumulate(
    buckets: list[Bucket],
    transactions: Iterable[Transaction],
    start: datetime,
    end: datetime,
) -> list[Bucket]:
    """Add each transaction to the bucket holding the midday of its date."""
    for tx in transactions:
        tx_date = parse_date(tx.date)
        if tx_date is None:
            continue
        center = center_instant(tx_date)
        if not start <= center <= end:
            continue
        bucket = _find_bucket(buckets, center)
        if bucket is None:
            continue
        if tx.type == "income":
            bucket.total_income += tx.amount
        else:
            bucket.total_expense += tx.amount
            bucket.per_category_expense[tx.category] = (
                bucket.per_category_expense.get(tx.category, 0.0) + tx.amount
            )
    return buckets


def compute_buckets(
    transactions: Iterable[Transaction],
    chart_range: ChartRange,
    today: date | None = None,
) -> list[Bucket]:
    """Chart buckets for ``chart_range`` with income/expense totals filled in.

    A custom range without both bounds yields an empty list.
    """
    interval = resolve_interval(chart_range, today)
    if interval is None:
        return []
    start, end = interval
    buckets = build_buckets(RangeKind(chart_range.kind), start, end)
    return accumulate(buckets, transactions, start, end)


def bucket_keys(buckets: list[Bucket], hidden: Iterable[str] = ()) -> list[str]:
    """Expense categories present in ``buckets`` (first-seen order) minus ``hidden``."""
    hidden_set = set(hidden)
    keys: list[str] = []
    for bucket in buckets:
        for name in bucket.per_category_expense:
            if name not in keys and name not in hidden_set:
                keys.append(name)
    return keys


class ChartService:
    def __init__(self, tx_dao: TransactionDAO, category_service: CategoryService):
        self._tx_dao = tx_dao
        self._categories = category_service

    def get_buckets(
        self, chart_range: ChartRange, today: date | None = None
    ) -> list[Bucket]:
        transactions = self._tx_dao.get_all()
        buckets = compute_buckets(transactions, chart_range, today)
        log.debug(
            "built %d buckets for %s from %d transactions",
            len(buckets), RangeKind(chart_range.kind).value, len(transactions),
        )
        return buckets

    def get_color_map(self) -> dict[str, str]:
        return self._categories.color_map()
