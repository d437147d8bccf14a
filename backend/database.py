"""
Database engine and session management for the Agrofix storefront.

One async SQLAlchemy engine (aiosqlite by default) shared by every request.
Each request gets its own AsyncSession through get_db(); route handlers
commit, services only flush. Tables are created on startup by init_db().
"""
import logging

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""
    pass


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """
    Turn on FK enforcement for every new SQLite connection.

    SQLite ships with it off, which would let an order point at a product
    that no longer exists.
    """
    if async_engine.dialect.name != "sqlite":
        return

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# ── Engine ──────────────────────────────────────────────────────────

engine = create_async_engine(settings.async_database_url, echo=False)
enable_sqlite_foreign_keys(engine)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


# ── Helpers ─────────────────────────────────────────────────────────

async def init_db() -> None:
    """Create the products and orders tables if missing. Called on startup."""
    import db_models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info(f"Database ready ({engine.url.render_as_string(hide_password=True)})")


async def ping_db(db: AsyncSession) -> None:
    """Round-trip a trivial query; raises if the database does not answer."""
    await db.execute(text("SELECT 1"))


async def get_db() -> AsyncSession:
    """FastAPI dependency — yields an async session, closed after the request."""
    async with async_session() as session:
        yield session
