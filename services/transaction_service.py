from database.subcategory_blacklist_dao import SubcategoryBlacklistDAO
from database.transaction_dao import TransactionDAO
from models.transaction import Transaction
from utils.constants import TRANSACTION_TYPES
from utils.date_helpers import format_date, parse_date


class TransactionService:
    def __init__(self, tx_dao: TransactionDAO, blacklist_dao: SubcategoryBlacklistDAO):
        self._dao = tx_dao
        self._blacklist = blacklist_dao

    def get_all(self) -> list[Transaction]:
        return self._dao.get_all()

    def get_for_period(self, year: int | None = None, month: int | None = None) -> list[Transaction]:
        if not year:
            return self._dao.get_all()
        if month is not None and not 1 <= month <= 12:
            raise ValueError(f"Invalid month: {month}")
        return self._dao.get_by_period(year, month)

    def get_by_id(self, tx_id: int) -> Transaction | None:
        return self._dao.get_by_id(tx_id)

    def create(
        self,
        type_: str,
        category: str,
        amount: float,
        date: str,
        note: str = "",
        subcategory: str | None = None,
    ) -> Transaction:
        category, amount, date, subcategory = self._validate(
            type_, category, amount, date, subcategory
        )
        return self._dao.create(
            type_=type_,
            category=category,
            amount=amount,
            date=date,
            note=note,
            subcategory=subcategory,
        )

    def update(
        self,
        tx_id: int,
        type_: str,
        category: str,
        amount: float,
        date: str,
        note: str = "",
        subcategory: str | None = None,
    ) -> Transaction:
        if self._dao.get_by_id(tx_id) is None:
            raise ValueError(f"No transaction with id {tx_id}.")
        category, amount, date, subcategory = self._validate(
            type_, category, amount, date, subcategory
        )
        return self._dao.update(tx_id, type_, category, amount, date, note, subcategory)

    def delete(self, tx_id: int):
        if not self._dao.delete(tx_id):
            raise ValueError(f"No transaction with id {tx_id}.")

    def get_subcategory_hints(self, category: str) -> list[str]:
        return self._dao.get_subcategory_hints(category)

    def hide_subcategory_hint(self, category: str, subcategory: str):
        self._blacklist.hide(category, subcategory)

    def show_subcategory_hint(self, category: str, subcategory: str):
        self._blacklist.unhide(category, subcategory)

    def get_hidden_subcategory_hints(self, category: str) -> list[str]:
        return sorted(self._blacklist.get_hidden(category))

    def _validate(self, type_, category, amount, date, subcategory):
        if type_ not in TRANSACTION_TYPES:
            raise ValueError(f"Invalid type: {type_}")
        category = (category or "").strip()
        if not category:
            raise ValueError("Category cannot be empty.")
        try:
            amount = abs(float(amount))
        except (TypeError, ValueError):
            raise ValueError(f"Invalid amount: {amount}") from None
        parsed = parse_date(date)
        if parsed is None:
            raise ValueError("Invalid date format. Use YYYY-MM-DD.")
        subcategory = (subcategory or "").strip() or None
        return category, amount, format_date(parsed), subcategory
