from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class RangeKind(str, Enum):
    TWELVE_DAYS = "12days"
    THREE_MONTHS = "3months"
    ONE_YEAR = "1year"
    CUSTOM = "custom"


@dataclass
class ChartRange:
    kind: RangeKind
    custom_start: str = ""  # 'YYYY-MM-DD', only read for CUSTOM
    custom_end: str = ""


@dataclass
class Bucket:
    label: str
    start: datetime
    end: datetime           # inclusive
    total_income: float = 0.0
    total_expense: float = 0.0
    per_category_expense: dict[str, float] = field(default_factory=dict)
