from collections import defaultdict
from typing import Iterable

from models.summary import CategorySummary, DailySummary
from models.transaction import Transaction
from services.category_service import CategoryService
from utils.constants import BREAKDOWN_FALLBACK_COLOR
from utils.date_helpers import parse_date


def totals(transactions: Iterable[Transaction]) -> dict:
    income = expense = 0.0
    for tx in transactions:
        if tx.type == "income":
            income += tx.amount
        else:
            expense += tx.amount
    return {"income": income, "expense": expense, "net": income - expense}


class ReportService:
    def __init__(self, category_service: CategoryService):
        self._categories = category_service

    def get_summary(self, transactions: Iterable[Transaction]) -> dict:
        """Return {income, expense, net} for the given transactions."""
        return totals(transactions)

    def group_by_month(
        self, transactions: Iterable[Transaction]
    ) -> dict[int, dict[int, list[Transaction]]]:
        """{year: {month: [tx, ...]}}, years and months newest first."""
        grouped: dict[int, dict[int, list[Transaction]]] = defaultdict(lambda: defaultdict(list))
        for tx in transactions:
            d = parse_date(tx.date)
            if d is None:
                continue
            grouped[d.year][d.month].append(tx)
        return {
            year: {month: grouped[year][month] for month in sorted(grouped[year], reverse=True)}
            for year in sorted(grouped, reverse=True)
        }

    def get_category_breakdown(
        self, transactions: Iterable[Transaction], type_: str = "expense"
    ) -> list[CategorySummary]:
        """Per-category totals for one transaction type, largest first."""
        sums: dict[str, float] = defaultdict(float)
        for tx in transactions:
            if tx.type == type_:
                sums[tx.category] += tx.amount
        total = sum(sums.values())
        colors = self._categories.color_map()
        result = [
            CategorySummary(
                category=name,
                amount=amount,
                percentage=(amount / total * 100) if total else 0.0,
                color=colors.get(name, BREAKDOWN_FALLBACK_COLOR),
            )
            for name, amount in sums.items()
        ]
        result.sort(key=lambda s: s.amount, reverse=True)
        return result

    def get_daily_summaries(self, transactions: Iterable[Transaction]) -> list[DailySummary]:
        """Income/expense per date, newest first."""
        days: dict[str, list[float]] = {}
        for tx in transactions:
            day = days.setdefault(tx.date, [0.0, 0.0])
            if tx.type == "income":
                day[0] += tx.amount
            else:
                day[1] += tx.amount
        return [
            DailySummary(date=d, income=v[0], expense=v[1])
            for d, v in sorted(days.items(), reverse=True)
        ]
