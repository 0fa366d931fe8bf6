"""Local transaction store keyed by session using SQLite."""
import sqlite3
from pathlib import Path
from typing import List, Optional, Sequence

from uangku.llm.models import TransactionRecord
from uangku.utils.logger import default_home, get_logger
from uangku.utils.exceptions import StorageError

logger = get_logger()


class TransactionStore:
    """Persists each session's transaction collection."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path) if db_path else default_home() / "uangku.db"
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS transactions (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    session_id TEXT NOT NULL,
                    id INTEGER NOT NULL,
                    merchant TEXT,
                    amount TEXT NOT NULL,
                    date TEXT NOT NULL,
                    category TEXT,
                    type TEXT NOT NULL,
                    summary TEXT,
                    UNIQUE(session_id, id)
                )
            """)
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_session ON transactions(session_id)")
            conn.commit()

    def load(self, session_id: str) -> List[TransactionRecord]:
        """Return the session's records newest first."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT id, merchant, amount, date, category, type, summary "
                    "FROM transactions WHERE session_id = ? ORDER BY seq DESC",
                    (session_id,)
                )
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to load transactions: {e}") from e

        records = []
        for r in rows:
            # r: (id, merchant, amount, date, category, type, summary)
            try:
                records.append(TransactionRecord.from_dict({
                    "id": r[0],
                    "merchant": r[1] or "",
                    "amount": r[2],
                    "date": r[3],
                    "category": r[4] or "",
                    "type": r[5],
                    "summary": r[6] or "",
                }))
            except (ValueError, ArithmeticError) as e:
                logger.warning(f"Skipping corrupt stored transaction {r[0]}: {e}")

        logger.debug(f"Loaded {len(records)} transactions for session {session_id}")
        return records

    def save(self, session_id: str, records: Sequence[TransactionRecord]) -> None:
        """Replace the session's stored collection. ``records`` is newest first."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM transactions WHERE session_id = ?", (session_id,))
                # oldest first so seq preserves insertion order
                cursor.executemany("""
                    INSERT INTO transactions
                    (session_id, id, merchant, amount, date, category, type, summary)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """, [
                    (
                        session_id,
                        record.id,
                        record.merchant,
                        str(record.amount),
                        record.date,
                        record.category,
                        record.type.value,
                        record.summary
                    )
                    for record in reversed(list(records))
                ])
                conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to save transactions: {e}") from e

    def clear(self, session_id: Optional[str] = None) -> int:
        """Delete stored transactions for one session, or all sessions."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.cursor()
                if session_id:
                    cursor.execute("DELETE FROM transactions WHERE session_id = ?", (session_id,))
                else:
                    cursor.execute("DELETE FROM transactions")
                conn.commit()
                return cursor.rowcount
        except sqlite3.Error as e:
            raise StorageError(f"Failed to clear transactions: {e}") from e
