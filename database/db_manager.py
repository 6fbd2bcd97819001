import sqlite3
import os
from utils.constants import DB_FILE, DEFAULT_CATEGORIES, db_file_for_env
from services.color_service import assign_color
from utils.logging_setup import get_logger

log = get_logger("tally.database")


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._seed_defaults(conn)
        conn.commit()

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS categories (
                id    INTEGER PRIMARY KEY AUTOINCREMENT,
                name  TEXT NOT NULL,
                type  TEXT NOT NULL CHECK(type IN ('expense','income')),
                color TEXT NOT NULL,
                UNIQUE(name, type)
            );

            CREATE TABLE IF NOT EXISTS transactions (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                type        TEXT    NOT NULL CHECK(type IN ('expense','income')),
                category    TEXT    NOT NULL,
                subcategory TEXT,
                date        TEXT    NOT NULL,
                amount      REAL    NOT NULL,
                note        TEXT,
                timestamp   INTEGER NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_transactions_date     ON transactions(date);
            CREATE INDEX IF NOT EXISTS idx_transactions_category ON transactions(category);

            CREATE TABLE IF NOT EXISTS subcategory_blacklist (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                category    TEXT NOT NULL,
                subcategory TEXT NOT NULL,
                UNIQUE(category, subcategory)
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        count = conn.execute("SELECT COUNT(*) FROM categories").fetchone()[0]
        if count:
            return
        used: dict[str, list[str]] = {"expense": [], "income": []}
        for cat in DEFAULT_CATEGORIES:
            color = assign_color(cat["type"], used[cat["type"]])
            used[cat["type"]].append(color)
            conn.execute(
                "INSERT INTO categories(name, type, color) VALUES (?, ?, ?)",
                (cat["name"], cat["type"], color),
            )
        log.info("seeded %d default categories", len(DEFAULT_CATEGORIES))

    @staticmethod
    def open_default(db_folder: str | None = None, env: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (creating if needed) the data file for this environment.

        db_folder: if provided, the DB file is stored in that directory instead of CWD.
        env: 'development' selects the separate development database.
        """
        filename = db_file_for_env(env)
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
            path = os.path.join(db_folder, filename)
        else:
            path = filename
        db = DatabaseManager(path)
        db.initialize()
        log.debug("opened database %s", path)
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
