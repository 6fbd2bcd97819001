"""Export and import all user data (categories and transactions) as JSON.

The payload is ``{"transactions": [...], "categories": [...]}`` with each row
shaped like the stored record. Import merges: categories are inserted unless
the (name, type) pair already exists; transactions are always inserted with
fresh ids.
"""
import json
import math
from datetime import date, datetime
from pathlib import Path

from database.category_dao import CategoryDAO
from database.db_manager import DatabaseManager
from database.transaction_dao import TransactionDAO
from services.color_service import assign_color
from utils.constants import BACKUP_FILE_PREFIX, EXPORT_VERSION, TRANSACTION_TYPES
from utils.date_helpers import format_date, now_ms, parse_date, today
from utils.logging_setup import get_logger

log = get_logger("tally.services.data")

_MAX_SQLITE_INT = 2 ** 63


def _text(value) -> str:
    """Non-string JSON values read as empty."""
    return value if isinstance(value, str) else ""


def backup_filename(day: date) -> str:
    return f"{BACKUP_FILE_PREFIX}{day.strftime('%Y_%m_%d')}.json"


class DataService:
    def __init__(
        self,
        db: DatabaseManager,
        category_dao: CategoryDAO,
        tx_dao: TransactionDAO,
    ):
        self._db = db
        self._category_dao = category_dao
        self._tx_dao = tx_dao

    # ── Export ────────────────────────────────────────────────────────────────

    def export_data(self) -> dict:
        """Return a full export dict (caller writes to disk)."""
        return {
            "export_version": EXPORT_VERSION,
            "exported_at": datetime.now().isoformat(),
            "categories": self._build_categories(),
            "transactions": self._build_transactions(),
        }

    def write_backup(self, folder: str | Path, day: date | None = None) -> Path:
        """Write the export to ``folder/account_backup_YYYY_MM_DD.json``."""
        folder = Path(folder)
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / backup_filename(day or today())
        data = self.export_data()
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        log.info(
            "wrote backup %s (%d categories, %d transactions)",
            path, len(data["categories"]), len(data["transactions"]),
        )
        return path

    # ── Import ────────────────────────────────────────────────────────────────

    @staticmethod
    def read_backup(path: str | Path) -> dict:
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"{path} does not contain an export object.")
        return data

    def import_data(self, data: dict) -> dict:
        """Import from a previously exported dict.

        Returns stats dict with counts of created and skipped rows.
        """
        if not isinstance(data, dict):
            raise ValueError("Import payload must be an object.")
        stats = {
            "categories": 0,
            "categories_skipped": 0,
            "transactions": 0,
            "transactions_skipped": 0,
        }
        conn = self._db.get_connection()
        with conn:
            for c in data.get("categories") or []:
                if self._import_category(c):
                    stats["categories"] += 1
                else:
                    stats["categories_skipped"] += 1
            for t in data.get("transactions") or []:
                if self._import_transaction(t):
                    stats["transactions"] += 1
                else:
                    stats["transactions_skipped"] += 1
        log.info("import finished: %s", stats)
        return stats

    # ── Private builders ──────────────────────────────────────────────────────

    def _build_categories(self) -> list[dict]:
        return [
            {"id": c.id, "name": c.name, "type": c.type, "color": c.color}
            for c in self._category_dao.get_all()
        ]

    def _build_transactions(self) -> list[dict]:
        return [
            {
                "id": t.id,
                "type": t.type,
                "category": t.category,
                "subcategory": t.subcategory,
                "date": t.date,
                "amount": t.amount,
                "note": t.note,
                "timestamp": t.timestamp,
            }
            for t in self._tx_dao.get_all()
        ]

    # ── Private import ────────────────────────────────────────────────────────

    def _import_category(self, c) -> bool:
        if not isinstance(c, dict):
            log.warning("skipping category row %r: not an object", c)
            return False
        name = _text(c.get("name")).strip()
        type_ = c.get("type")
        if not name or type_ not in TRANSACTION_TYPES:
            log.warning("skipping category row %r: missing name or bad type", c)
            return False
        color = _text(c.get("color")).strip() or assign_color(
            type_, self._category_dao.list_colors_for_type(type_)
        )
        return self._category_dao.insert_or_ignore(name, type_, color, commit=False)

    def _import_transaction(self, t) -> bool:
        if not isinstance(t, dict):
            log.warning("skipping transaction row %r: not an object", t)
            return False
        type_ = t.get("type")
        category = _text(t.get("category")).strip()
        parsed = parse_date(_text(t.get("date")))
        try:
            amount = abs(float(t.get("amount")))
        except (TypeError, ValueError):
            amount = None
        if amount is not None and not math.isfinite(amount):
            amount = None
        if type_ not in TRANSACTION_TYPES or not category or parsed is None or amount is None:
            log.warning("skipping transaction row %r: invalid fields", t)
            return False
        try:
            timestamp = int(t.get("timestamp"))
        except (TypeError, ValueError, OverflowError):
            timestamp = now_ms()
        if not 0 <= timestamp < _MAX_SQLITE_INT:
            timestamp = now_ms()
        self._tx_dao.create(
            type_=type_,
            category=category,
            amount=amount,
            date=format_date(parsed),
            note=_text(t.get("note")),
            subcategory=_text(t.get("subcategory")).strip() or None,
            timestamp=timestamp,
            commit=False,
        )
        return True
