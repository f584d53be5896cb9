"""Async engine, session factory and schema setup for the task store."""

from __future__ import annotations

import asyncio
import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from alembic import command
from alembic.config import Config
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import ConnectionPoolEntry

from .logging import get_logger

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent.parent / "migrations"

# Applied to every new SQLite connection
SQLITE_PRAGMAS: tuple[tuple[str, str], ...] = (
    ("foreign_keys", "ON"),
    ("synchronous", "NORMAL"),
    ("busy_timeout", "30000"),  # ms
    ("temp_store", "MEMORY"),
)


def _install_sqlite_connect_pragmas(engine: AsyncEngine) -> None:
    def on_connect(dbapi_conn: sqlite3.Connection, _conn_record: ConnectionPoolEntry) -> None:
        cur = dbapi_conn.cursor()
        for name, value in SQLITE_PRAGMAS:
            cur.execute(f"PRAGMA {name}={value};")
        cur.close()

    event.listen(engine.sync_engine, "connect", on_connect)


class Database:
    """Owns the async engine and hands out sessions.

    In-memory SQLite databases get their tables from the ORM metadata. File and
    server databases are brought to the latest Alembic revision unless
    auto_migrate is disabled.
    """

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        migrations_dir: Path | None = None,
        auto_migrate: bool = True,
    ) -> None:
        self.url = url
        self.migrations_dir = migrations_dir or MIGRATIONS_DIR
        self.auto_migrate = auto_migrate
        self.engine: AsyncEngine = create_async_engine(url, echo=echo)
        if self.is_sqlite:
            _install_sqlite_connect_pragmas(self.engine)
        self._sessions = async_sessionmaker(bind=self.engine, class_=AsyncSession, expire_on_commit=False)

    @property
    def is_sqlite(self) -> bool:
        return self.engine.dialect.name == "sqlite"

    @property
    def is_in_memory(self) -> bool:
        if not self.is_sqlite:
            return False
        url = self.engine.url
        # "sqlite+aiosqlite://" (no database), ":memory:" and "file:...?mode=memory" URIs
        return url.database in (None, "", ":memory:") or url.query.get("mode") == "memory"

    @property
    def display_url(self) -> str:
        """URL with the password masked, for logs."""
        return self.engine.url.render_as_string(hide_password=True)

    async def init(self) -> None:
        """Prepare the schema; safe to call more than once."""
        if self.is_sqlite and not self.is_in_memory:
            async with self.engine.begin() as conn:
                await conn.exec_driver_sql("PRAGMA journal_mode=WAL;")

        if self.is_in_memory or not self.auto_migrate:
            await self._create_tables()
        else:
            await self._upgrade_to_head()

    async def _create_tables(self) -> None:
        from .models import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.debug("database.tables_created", url=self.display_url)

    async def _upgrade_to_head(self) -> None:
        cfg = Config()
        cfg.set_main_option("script_location", str(self.migrations_dir))
        # configparser interpolation treats % specially (URL-encoded passwords)
        cfg.set_main_option("sqlalchemy.url", self.url.replace("%", "%%"))

        # env.py starts its own event loop, so it runs in a worker thread
        await asyncio.get_running_loop().run_in_executor(None, command.upgrade, cfg, "head")
        logger.info("database.migrated", url=self.display_url)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session that is closed when the block exits."""
        async with self._sessions() as s:
            yield s

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()
