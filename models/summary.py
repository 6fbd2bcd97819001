from dataclasses import dataclass


@dataclass
class CategorySummary:
    category: str
    amount: float
    percentage: float
    color: str


@dataclass
class DailySummary:
    date: str               # 'YYYY-MM-DD'
    income: float
    expense: float
