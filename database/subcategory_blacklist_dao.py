from database.db_manager import DatabaseManager


class SubcategoryBlacklistDAO:
    """Subcategory hints the user asked not to be offered again, per category."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def hide(self, category: str, subcategory: str) -> None:
        conn = self._db.get_connection()
        conn.execute(
            """INSERT OR IGNORE INTO subcategory_blacklist(category, subcategory)
               VALUES (?, ?)""",
            (category, subcategory),
        )
        conn.commit()

    def get_hidden(self, category: str) -> set[str]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT subcategory FROM subcategory_blacklist WHERE category = ?",
            (category,),
        ).fetchall()
        return {row["subcategory"] for row in rows}

    def unhide(self, category: str, subcategory: str) -> None:
        conn = self._db.get_connection()
        conn.execute(
            "DELETE FROM subcategory_blacklist WHERE category = ? AND subcategory = ?",
            (category, subcategory),
        )
        conn.commit()
