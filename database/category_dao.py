import sqlite3
from typing import Optional
from database.db_manager import DatabaseManager
from models.category import Category


class DuplicateCategoryError(ValueError):
    """A category with the same (name, type) already exists."""

    def __init__(self, name: str, type_: str):
        super().__init__(f"A {type_} category named '{name}' already exists.")
        self.name = name
        self.type_ = type_


class CategoryDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db
        self._all_cache: list | None = None

    def _invalidate_cache(self):
        self._all_cache = None

    def _row_to_model(self, row) -> Category:
        return Category(
            id=row["id"],
            name=row["name"],
            type=row["type"],
            color=row["color"],
        )

    def get_all(self) -> list[Category]:
        if self._all_cache is None:
            conn = self._db.get_connection()
            rows = conn.execute(
                "SELECT * FROM categories ORDER BY id"
            ).fetchall()
            self._all_cache = [self._row_to_model(r) for r in rows]
        return list(self._all_cache)

    def get_by_id(self, category_id: int) -> Optional[Category]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM categories WHERE id = ?", (category_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_type(self, type_: str) -> list[Category]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM categories WHERE type = ? ORDER BY id", (type_,)
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def list_colors_for_type(self, type_: str) -> set[str]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT color FROM categories WHERE type = ?", (type_,)
        ).fetchall()
        return {r["color"] for r in rows}

    def create(self, name: str, type_: str, color: str) -> Category:
        conn = self._db.get_connection()
        try:
            cursor = conn.execute(
                "INSERT INTO categories(name, type, color) VALUES (?, ?, ?)",
                (name, type_, color),
            )
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            raise DuplicateCategoryError(name, type_) from exc
        conn.commit()
        self._invalidate_cache()
        return self.get_by_id(cursor.lastrowid)

    def insert_or_ignore(self, name: str, type_: str, color: str, commit: bool = True) -> bool:
        """Insert unless (name, type) exists. Returns True when a row was added."""
        conn = self._db.get_connection()
        cursor = conn.execute(
            "INSERT OR IGNORE INTO categories(name, type, color) VALUES (?, ?, ?)",
            (name, type_, color),
        )
        if commit:
            conn.commit()
        self._invalidate_cache()
        return cursor.rowcount > 0

    def rename(self, category_id: int, name: str) -> Optional[Category]:
        existing = self.get_by_id(category_id)
        if existing is None:
            return None
        conn = self._db.get_connection()
        try:
            conn.execute(
                "UPDATE categories SET name=? WHERE id=?", (name, category_id)
            )
        except sqlite3.IntegrityError as exc:
            conn.rollback()
            raise DuplicateCategoryError(name, existing.type) from exc
        conn.commit()
        self._invalidate_cache()
        return self.get_by_id(category_id)

    def delete(self, category_id: int) -> bool:
        conn = self._db.get_connection()
        cursor = conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
        conn.commit()
        self._invalidate_cache()
        return cursor.rowcount > 0
