"""
Сессия администратора: токен в памяти и его хранение между запусками.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Dict, Optional

from ..config import settings


logger = logging.getLogger(__name__)

# Единственный ключ в постоянном хранилище
TOKEN_KEY = "admin_token"


class TokenStore:
    """Постоянное хранилище токена в небольшой SQLite-таблице ключ/значение."""

    def __init__(self, db_path: Path = settings.TOKEN_DB_PATH):
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)
        return conn

    def load(self) -> Optional[str]:
        """Возвращает сохранённый токен или None."""
        if not self.db_path.exists():
            return None

        conn = self._connect()
        try:
            cursor = conn.execute("SELECT value FROM kv WHERE key = ?", (TOKEN_KEY,))
            row = cursor.fetchone()
            return row[0] if row else None
        finally:
            conn.close()

    def save(self, token: str) -> None:
        """Сохраняет токен, заменяя предыдущий."""
        conn = self._connect()
        try:
            conn.execute(
                "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)",
                (TOKEN_KEY, token)
            )
            conn.commit()
        finally:
            conn.close()

    def delete(self) -> None:
        """Удаляет токен из хранилища."""
        if not self.db_path.exists():
            return

        conn = self._connect()
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (TOKEN_KEY,))
            conn.commit()
        finally:
            conn.close()


class AdminSession:
    """
    Единственный активный токен администратора.

    Сессия создаётся вызывающим кодом и передаётся в клиент API. Если
    передано хранилище, токен загружается из него при создании и
    сохраняется/удаляется при изменении. Без хранилища сессия живёт
    только в памяти.
    """

    def __init__(self, store: Optional[TokenStore] = None):
        self.store = store
        self._token: Optional[str] = None

        if self.store is not None:
            self._token = self.store.load()
            if self._token:
                logger.info("[SESSION] Restored saved admin token")

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def set_token(self, token: str) -> None:
        """Запоминает токен и сохраняет его для следующих запусков."""
        self._token = token
        if self.store is not None:
            self.store.save(token)
        logger.info(f"[SESSION] Token set ({token[:6]}...)")

    def clear_token(self) -> None:
        """Забывает токен и удаляет его из хранилища."""
        self._token = None
        if self.store is not None:
            self.store.delete()
        logger.info("[SESSION] Token cleared")

    def authorization_header(self) -> Dict[str, str]:
        """Заголовок Authorization, если токен есть, иначе пустой словарь."""
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}
