"""Chart bucketing."""

from datetime import date, datetime, timedelta

import pytest

from models.chart import ChartRange, RangeKind
from services.chart_service import (
    BucketPolicy,
    bucket_keys,
    compute_buckets,
    resolve_interval,
    select_policy,
)

TODAY = date(2026, 10, 17)


def custom(start, end):
    return ChartRange(RangeKind.CUSTOM, start, end)


@pytest.mark.parametrize("kind", [RangeKind.TWELVE_DAYS, RangeKind.THREE_MONTHS, RangeKind.ONE_YEAR])
def test_fixed_ranges_have_twelve_empty_buckets(kind):
    buckets = compute_buckets([], ChartRange(kind), today=TODAY)
    assert len(buckets) == 12
    for b in buckets:
        assert b.total_income == 0
        assert b.total_expense == 0
        assert b.per_category_expense == {}


def test_twelve_day_range_is_one_day_per_bucket():
    buckets = compute_buckets([], ChartRange(RangeKind.TWELVE_DAYS), today=TODAY)
    assert buckets[0].start == datetime(2026, 10, 6)
    assert buckets[-1].end == datetime(2026, 10, 17, 23, 59, 59, 999000)
    assert [b.label for b in buckets[:2]] == ["10-06", "10-07"]
    for b in buckets:
        assert b.start.date() == b.end.date()


def test_three_month_buckets_are_contiguous_and_fractional():
    buckets = compute_buckets([], ChartRange(RangeKind.THREE_MONTHS), today=TODAY)
    assert buckets[0].start == datetime(2026, 7, 17)
    # 93 days / 12 = 7.75 days per bucket
    assert buckets[1].start == datetime(2026, 7, 24, 18)
    for prev, nxt in zip(buckets, buckets[1:]):
        assert nxt.start - prev.end == timedelta(milliseconds=1)
    assert buckets[0].label == "07-17 ~ 07-24"


def test_one_year_range_uses_month_labels():
    buckets = compute_buckets([], ChartRange(RangeKind.ONE_YEAR), today=TODAY)
    assert buckets[0].start == datetime(2025, 10, 17)
    assert buckets[0].label == "Oct"
    assert all(len(b.label) == 3 and b.label.isalpha() for b in buckets)


def test_custom_five_days_gives_daily_buckets():
    buckets = compute_buckets([], custom("2024-03-01", "2024-03-05"))
    assert [b.label for b in buckets] == ["03-01", "03-02", "03-03", "03-04", "03-05"]


def test_custom_twenty_days_gives_two_day_buckets():
    buckets = compute_buckets([], custom("2024-03-01", "2024-03-20"))
    assert len(buckets) == 10
    assert buckets[0].label == "03-01 ~ 03-02"
    assert buckets[-1].label == "03-19 ~ 03-20"


def test_two_day_walk_collapses_last_bucket_to_single_day():
    buckets = compute_buckets([], custom("2024-03-01", "2024-03-13"))
    assert len(buckets) == 7
    assert buckets[-1].label == "03-13"
    assert buckets[-1].end == datetime(2024, 3, 13, 23, 59, 59, 999000)


def test_custom_thirty_days_gives_twelve_buckets():
    buckets = compute_buckets([], custom("2024-03-01", "2024-03-30"))
    assert len(buckets) == 12
    assert buckets[0].label == "03-01 ~ 03-03"


def test_custom_reversed_bounds_are_swapped():
    forward = compute_buckets([], custom("2024-03-01", "2024-03-05"))
    backward = compute_buckets([], custom("2024-03-05", "2024-03-01"))
    assert [b.label for b in forward] == [b.label for b in backward]


@pytest.mark.parametrize("start,end", [("", ""), ("2024-03-01", ""), ("", "2024-03-01")])
def test_custom_without_both_bounds_is_empty(start, end):
    assert compute_buckets([], custom(start, end)) == []
    assert resolve_interval(custom(start, end)) is None


def test_single_day_custom_range(make_tx):
    buckets = compute_buckets(
        [make_tx("2024-03-01", 5.0)], custom("2024-03-01", "2024-03-01")
    )
    assert len(buckets) == 1
    assert buckets[0].total_expense == 5.0


def test_two_day_example(make_tx):
    txs = [
        make_tx("2024-01-01", 10, "expense", "Food"),
        make_tx("2024-01-02", 20, "income", "Salary"),
    ]
    first, second = compute_buckets(txs, custom("2024-01-01", "2024-01-02"))
    assert (first.total_expense, first.total_income) == (10, 0)
    assert first.per_category_expense == {"Food": 10}
    assert (second.total_expense, second.total_income) == (0, 20)
    assert second.per_category_expense == {}


def test_totals_are_preserved_across_fractional_buckets(make_tx):
    start = date(2026, 7, 17)
    txs = []
    for offset in range(0, 93, 4):
        day = (start + timedelta(days=offset)).isoformat()
        txs.append(make_tx(day, 1.5, "expense", "Food" if offset % 8 else "Rent"))
        txs.append(make_tx(day, 2.0, "income", "Salary"))
    buckets = compute_buckets(txs, ChartRange(RangeKind.THREE_MONTHS), today=TODAY)
    expected_expense = sum(t.amount for t in txs if t.type == "expense")
    expected_income = sum(t.amount for t in txs if t.type == "income")
    assert sum(b.total_expense for b in buckets) == pytest.approx(expected_expense)
    assert sum(b.total_income for b in buckets) == pytest.approx(expected_income)
    per_category = sum(sum(b.per_category_expense.values()) for b in buckets)
    assert per_category == pytest.approx(expected_expense)


def test_transactions_outside_range_are_dropped(make_tx):
    txs = [
        make_tx("2024-02-29", 100),
        make_tx("2024-03-02", 7),
        make_tx("2024-03-06", 100),
        make_tx("garbage", 100),
    ]
    buckets = compute_buckets(txs, custom("2024-03-01", "2024-03-05"))
    assert sum(b.total_expense for b in buckets) == 7
    assert buckets[1].total_expense == 7


@pytest.mark.parametrize("kind,days,policy", [
    (RangeKind.CUSTOM, 1, BucketPolicy.DAILY),
    (RangeKind.CUSTOM, 11, BucketPolicy.DAILY),
    (RangeKind.CUSTOM, 12, BucketPolicy.TWO_DAY),
    (RangeKind.CUSTOM, 23, BucketPolicy.TWO_DAY),
    (RangeKind.CUSTOM, 24, BucketPolicy.EVEN_TWELVE),
    (RangeKind.TWELVE_DAYS, 12, BucketPolicy.EVEN_TWELVE),
    (RangeKind.THREE_MONTHS, 92, BucketPolicy.EVEN_TWELVE),
    (RangeKind.ONE_YEAR, 366, BucketPolicy.EVEN_TWELVE),
])
def test_policy_table(kind, days, policy):
    assert select_policy(kind, days) is policy


def test_bucket_keys_keep_first_seen_order_and_skip_hidden(make_tx):
    txs = [
        make_tx("2024-03-01", 1, category="Transport"),
        make_tx("2024-03-02", 1, category="Food"),
        make_tx("2024-03-03", 1, category="Shopping"),
        make_tx("2024-03-03", 1, "income", "Salary"),
    ]
    buckets = compute_buckets(txs, custom("2024-03-01", "2024-03-03"))
    assert bucket_keys(buckets) == ["Transport", "Food", "Shopping"]
    assert bucket_keys(buckets, hidden=["Food"]) == ["Transport", "Shopping"]


def test_chart_service_reads_stored_transactions(db, tx_dao, category_service):
    from services.chart_service import ChartService

    tx_dao.create("expense", "Food", 12.5, "2024-03-02")
    service = ChartService(tx_dao, category_service)
    buckets = service.get_buckets(custom("2024-03-01", "2024-03-03"))
    assert [b.total_expense for b in buckets] == [0, 12.5, 0]
    assert service.get_color_map()["Food"].startswith("#")
