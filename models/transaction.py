from dataclasses import dataclass
from typing import Optional


@dataclass
class Transaction:
    id: int
    type: str               # 'income' | 'expense'
    category: str           # category name, survives renames/deletes
    date: str               # 'YYYY-MM-DD'
    amount: float
    note: str = ""
    subcategory: Optional[str] = None
    timestamp: int = 0      # ms since epoch, creation or last edit
