import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Union

from ...domain.exceptions import EmailAlreadyInUse, NotFound
from ...domain.models import User
from ...domain.ports.persistence import PersistenceGateway

# Largest value an SQLite INTEGER column can hold.
MAX_ROW_ID = 2**63 - 1


class SQLitePersistence(PersistenceGateway):
    """SQLite-backed implementation of the persistence gateway."""

    def __init__(self, path: Union[Path, str]) -> None:
        if str(path) != ":memory:":
            path = Path(path)
            path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._initialize()

    def _initialize(self) -> None:
        # AUTOINCREMENT keeps ids of deleted users from being handed out again.
        with self._conn:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL UNIQUE COLLATE NOCASE,
                    password_hash TEXT NOT NULL,
                    avatar TEXT,
                    is_admin INTEGER NOT NULL DEFAULT 0,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
                """
            )

    def close(self) -> None:
        self._conn.close()

    # UserRepository API ----------------------------------------------------
    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM users WHERE email = ?", (email.strip().lower(),))
            row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        if not 0 < user_id <= MAX_ROW_ID:
            return None
        with self._lock:
            cur = self._conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def list_users(self) -> List[User]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM users ORDER BY id ASC")
            rows = cur.fetchall()
        return [self._row_to_user(row) for row in rows]

    def create_user(
        self,
        name: str,
        email: str,
        password_hash: str,
        avatar: Optional[str] = None,
        is_admin: bool = False,
        is_active: bool = True,
    ) -> User:
        normalized = email.strip().lower()
        now = self._now()
        try:
            with self._lock, self._conn:
                cur = self._conn.execute(
                    """
                    INSERT INTO users (
                        name, email, password_hash, avatar, is_admin, is_active,
                        created_at, updated_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        name,
                        normalized,
                        password_hash,
                        avatar,
                        int(is_admin),
                        int(is_active),
                        now,
                        now,
                    ),
                )
                user_id = cur.lastrowid
                cur = self._conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
                row = cur.fetchone()
        except sqlite3.IntegrityError as exc:
            raise EmailAlreadyInUse() from exc
        if not row:
            raise RuntimeError("Failed to persist user.")
        return self._row_to_user(row)

    def update_user(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password_hash: Optional[str] = None,
        is_active: Optional[bool] = None,
        update_avatar: bool = False,
        avatar: Optional[str] = None,
    ) -> User:
        if not 0 < user_id <= MAX_ROW_ID:
            raise NotFound()
        updates = []
        params: List[Any] = []
        if name is not None:
            updates.append("name = ?")
            params.append(name)
        if email is not None:
            updates.append("email = ?")
            params.append(email.strip().lower())
        if password_hash is not None:
            updates.append("password_hash = ?")
            params.append(password_hash)
        if is_active is not None:
            updates.append("is_active = ?")
            params.append(int(is_active))
        if update_avatar:
            updates.append("avatar = ?")
            params.append(avatar)

        if updates:
            updates.append("updated_at = ?")
            params.append(self._now())
            params.append(user_id)
            statement = f"UPDATE users SET {', '.join(updates)} WHERE id = ?"
            try:
                with self._lock, self._conn:
                    self._conn.execute(statement, params)
            except sqlite3.IntegrityError as exc:
                raise EmailAlreadyInUse() from exc
        with self._lock:
            cur = self._conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = cur.fetchone()
        if not row:
            raise NotFound()
        return self._row_to_user(row)

    def delete_user(self, user_id: int) -> bool:
        if not 0 < user_id <= MAX_ROW_ID:
            return False
        with self._lock, self._conn:
            cur = self._conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            return cur.rowcount > 0

    # Helpers ----------------------------------------------------------------
    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).replace(microsecond=0).isoformat()

    @staticmethod
    def _parse_datetime(value: str) -> datetime:
        result = datetime.fromisoformat(value)
        if result.tzinfo is None:
            return result.replace(tzinfo=timezone.utc)
        return result.astimezone(timezone.utc)

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            avatar=row["avatar"],
            is_admin=bool(row["is_admin"]),
            is_active=bool(row["is_active"]),
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )
