"""SQLite article store for HN Reader.

All access goes through a small bounded pool of aiosqlite connections so the
periodic sync, on-demand syncs and request handlers can overlap without
opening an unbounded number of connections.
"""

import asyncio
import time
from collections import deque
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite

from hnreader.models import Article
from hnreader.utils.logging import get_logger

logger = get_logger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS articles (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date TEXT NOT NULL,
    article_link TEXT NOT NULL,
    comment_link TEXT NOT NULL,
    title TEXT NOT NULL,
    read INTEGER DEFAULT 0,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    UNIQUE(article_link, comment_link)
)
"""

BUSY_TIMEOUT_MS = 5000


class StorageError(Exception):
    """Raised when the underlying database operation fails."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


@dataclass
class _PooledConnection:
    conn: aiosqlite.Connection
    created: float = field(default_factory=time.monotonic)


class ConnectionPool:
    """Bounded pool of aiosqlite connections to one database file."""

    def __init__(
        self,
        db_path: str,
        max_open: int = 25,
        max_idle: int = 5,
        max_lifetime: float = 300.0,
    ) -> None:
        self._db_path = db_path
        self._max_idle = max_idle
        self._max_lifetime = max_lifetime
        self._slots = asyncio.Semaphore(max_open)
        self._idle: deque[_PooledConnection] = deque()
        self._open = 0
        self._closed = False

    @property
    def open_connections(self) -> int:
        return self._open

    @property
    def idle_connections(self) -> int:
        return len(self._idle)

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection, waiting while all connections are in use."""
        if self._closed:
            raise StorageError("connection pool is closed")

        async with self._slots:
            pooled = await self._checkout()
            try:
                yield pooled.conn
            except BaseException:
                await self._discard(pooled)
                raise
            await self._release(pooled)

    async def close(self) -> None:
        """Close every idle connection and refuse further checkouts."""
        self._closed = True
        while self._idle:
            await self._discard(self._idle.popleft())

    def _expired(self, pooled: _PooledConnection) -> bool:
        return time.monotonic() - pooled.created >= self._max_lifetime

    async def _checkout(self) -> _PooledConnection:
        while self._idle:
            pooled = self._idle.pop()
            if not self._expired(pooled):
                return pooled
            await self._discard(pooled)

        conn = await aiosqlite.connect(self._db_path)
        conn.row_factory = aiosqlite.Row
        try:
            await conn.execute(f"PRAGMA busy_timeout = {BUSY_TIMEOUT_MS}")
        except BaseException:
            await conn.close()
            raise
        self._open += 1
        return _PooledConnection(conn)

    async def _release(self, pooled: _PooledConnection) -> None:
        if self._closed or len(self._idle) >= self._max_idle or self._expired(pooled):
            await self._discard(pooled)
        else:
            self._idle.append(pooled)

    async def _discard(self, pooled: _PooledConnection) -> None:
        self._open -= 1
        try:
            await pooled.conn.close()
        except aiosqlite.Error as e:
            logger.warning("Failed to close database connection", error=str(e))


class ArticleStore:
    """Persistence for articles, deduplicated on their link pair."""

    def __init__(
        self,
        db_path: str,
        max_open: int = 25,
        max_idle: int = 5,
        max_lifetime: float = 300.0,
    ) -> None:
        self._db_path = db_path
        self._pool = ConnectionPool(db_path, max_open, max_idle, max_lifetime)

    @property
    def pool(self) -> ConnectionPool:
        return self._pool

    async def open(self) -> None:
        """Create the database file and schema if needed.

        Raises:
            StorageError: If the database cannot be created.
        """
        try:
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
            async with self._pool.acquire() as conn:
                await conn.execute("PRAGMA journal_mode = WAL")
                await conn.execute(SCHEMA)
                await conn.commit()
        except (OSError, aiosqlite.Error) as e:
            raise StorageError(f"failed to initialize database: {e}") from e

        logger.info("Database initialized", path=self._db_path)

    async def close(self) -> None:
        """Close all pooled connections."""
        await self._pool.close()

    async def __aenter__(self) -> "ArticleStore":
        await self.open()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def insert(self, article: Article) -> bool:
        """Insert an article unless its link pair is already stored.

        Returns:
            True if a new row was created, False for a duplicate.

        Raises:
            StorageError: If the insert fails.
        """
        try:
            async with self._pool.acquire() as conn:
                cursor = await conn.execute(
                    """
                    INSERT OR IGNORE INTO articles (date, article_link, comment_link, title)
                    VALUES (?, ?, ?, ?)
                    """,
                    (article.date, article.article_link, article.comment_link, article.title),
                )
                await conn.commit()
                return cursor.rowcount > 0
        except aiosqlite.Error as e:
            raise StorageError(f"failed to save article: {e}") from e

    async def list_unread(self) -> list[Article]:
        """Return unread articles in insertion order.

        Raises:
            StorageError: If the query fails.
        """
        try:
            async with self._pool.acquire() as conn:
                async with conn.execute(
                    """
                    SELECT id, date, article_link, comment_link, title, read, created_at
                    FROM articles
                    WHERE read = 0
                    ORDER BY created_at ASC, id ASC
                    """
                ) as cursor:
                    rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise StorageError(f"failed to list articles: {e}") from e

        return [_row_to_article(row) for row in rows]

    async def set_read(self, article_id: int, read: bool) -> None:
        """Set the read flag of one article. Unknown ids are ignored.

        Raises:
            StorageError: If the update fails.
        """
        try:
            async with self._pool.acquire() as conn:
                await conn.execute(
                    "UPDATE articles SET read = ? WHERE id = ?",
                    (1 if read else 0, article_id),
                )
                await conn.commit()
        except aiosqlite.Error as e:
            raise StorageError(f"failed to update article {article_id}: {e}") from e

    async def count_unread(self) -> int:
        """Return the number of unread articles.

        Raises:
            StorageError: If the query fails.
        """
        try:
            async with self._pool.acquire() as conn:
                async with conn.execute("SELECT COUNT(*) FROM articles WHERE read = 0") as cursor:
                    row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StorageError(f"failed to count articles: {e}") from e

        return int(row[0]) if row else 0


def _row_to_article(row: aiosqlite.Row) -> Article:
    created_at = row["created_at"]
    return Article(
        id=row["id"],
        date=row["date"],
        article_link=row["article_link"],
        comment_link=row["comment_link"],
        title=row["title"],
        read=row["read"] == 1,
        created_at=(
            datetime.fromisoformat(created_at).replace(tzinfo=UTC) if created_at else None
        ),
    )
