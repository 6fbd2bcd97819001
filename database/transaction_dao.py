from typing import Optional
from database.db_manager import DatabaseManager
from models.transaction import Transaction
from utils.constants import SUBCATEGORY_HINT_LIMIT
from utils.date_helpers import now_ms


class TransactionDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Transaction:
        return Transaction(
            id=row["id"],
            type=row["type"],
            category=row["category"],
            subcategory=row["subcategory"],
            date=row["date"],
            amount=row["amount"],
            note=row["note"] or "",
            timestamp=row["timestamp"],
        )

    def get_all(self) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM transactions ORDER BY date DESC, timestamp DESC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_period(self, year: int, month: int | None = None) -> list[Transaction]:
        """Transactions in a year, or in one month of that year."""
        conn = self._db.get_connection()
        sql = "SELECT * FROM transactions WHERE strftime('%Y', date) = ?"
        params: list = [f"{year:04d}"]
        if month:
            sql += " AND strftime('%m', date) = ?"
            params.append(f"{month:02d}")
        sql += " ORDER BY date DESC, timestamp DESC"
        rows = conn.execute(sql, params).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, tx_id: int) -> Optional[Transaction]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM transactions WHERE id = ?", (tx_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(
        self,
        type_: str,
        category: str,
        amount: float,
        date: str,
        note: str = "",
        subcategory: str | None = None,
        timestamp: int | None = None,
        commit: bool = True,
    ) -> Transaction:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO transactions
               (type, category, subcategory, date, amount, note, timestamp)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                type_, category, subcategory, date, amount, note,
                timestamp if timestamp is not None else now_ms(),
            ),
        )
        if commit:
            conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def update(
        self,
        tx_id: int,
        type_: str,
        category: str,
        amount: float,
        date: str,
        note: str = "",
        subcategory: str | None = None,
    ) -> Optional[Transaction]:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE transactions
               SET type=?, category=?, subcategory=?, date=?, amount=?,
                   note=?, timestamp=?
               WHERE id=?""",
            (type_, category, subcategory, date, amount, note, now_ms(), tx_id),
        )
        conn.commit()
        return self.get_by_id(tx_id)

    def delete(self, tx_id: int) -> bool:
        conn = self._db.get_connection()
        cursor = conn.execute("DELETE FROM transactions WHERE id = ?", (tx_id,))
        conn.commit()
        return cursor.rowcount > 0

    def get_subcategory_hints(
        self, category: str, limit: int = SUBCATEGORY_HINT_LIMIT
    ) -> list[str]:
        """Distinct subcategories used with ``category``, minus hidden ones."""
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT DISTINCT subcategory
               FROM transactions
               WHERE category = ?
                 AND subcategory IS NOT NULL AND subcategory != ''
                 AND subcategory NOT IN (
                     SELECT subcategory FROM subcategory_blacklist WHERE category = ?
                 )
               LIMIT ?""",
            (category, category, limit),
        ).fetchall()
        return [r["subcategory"] for r in rows]
