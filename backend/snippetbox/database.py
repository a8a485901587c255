"""
Snippetbox Backend - Database Engine & SQL Time Expressions
============================================================

What:  Async SQLAlchemy engine factory, the declarative Base, and two SQL
       expressions (`utcnow`, `days_from_now`) that let the database compute
       snippet timestamps.
Why:   The storage engine, not the caller, decides what "now" is. Every
       insert and every expiry check then shares one clock and one time zone.
How:   The expressions are custom SQL constructs compiled per dialect. An
       unsupported dialect fails at compile time, which the repository turns
       into a startup error.

Connection Pooling Strategy:
    pool_size / max_overflow come from settings for server databases.
    SQLite URLs keep SQLAlchemy's default pool (used by the test-suite).
    pool_recycle=3600 recycles connections hourly.
"""

from typing import Optional

from sqlalchemy import DateTime
from sqlalchemy.engine import make_url
from sqlalchemy.exc import CompileError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql.expression import FunctionElement

from snippetbox.config import Settings, settings as default_settings


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


# ── Engine Factory ────────────────────────────────────────────────────────
def create_engine(
    database_url: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> AsyncEngine:
    """
    Build the async engine (and with it the connection pool).

    The caller owns the returned engine; in the application that is the
    snippet repository, which disposes it on shutdown.
    """
    settings = settings or default_settings
    url = database_url or settings.database_url

    options = {
        "pool_pre_ping": settings.db_pool_pre_ping,
        # Echo SQL in DEBUG mode only
        "echo": settings.log_level == "DEBUG",
    }
    if make_url(url).get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=3600,
        )
    return create_async_engine(url, **options)


# ══════════════════════════════════════════════════════════════════════════
# Storage-computed timestamps
# ══════════════════════════════════════════════════════════════════════════

class utcnow(FunctionElement):
    """Current time according to the database, in UTC."""

    type = DateTime(timezone=True)
    inherit_cache = True


class days_from_now(FunctionElement):
    """`utcnow()` plus a whole number of days; the argument is usually a bind."""

    type = DateTime(timezone=True)
    inherit_cache = True

    def __init__(self, days):
        super().__init__(days)


def _days(element, compiler, **kw) -> str:
    return compiler.process(element.clauses, **kw)


@compiles(utcnow)
def _utcnow_unsupported(element, compiler, **kw):
    raise CompileError(
        f"utcnow() is not supported on the '{compiler.dialect.name}' dialect"
    )


@compiles(utcnow, "postgresql")
def _utcnow_postgresql(element, compiler, **kw):
    return "now()"


@compiles(utcnow, "sqlite")
def _utcnow_sqlite(element, compiler, **kw):
    return "datetime('now')"


@compiles(utcnow, "mysql")
def _utcnow_mysql(element, compiler, **kw):
    return "UTC_TIMESTAMP()"


@compiles(days_from_now)
def _days_from_now_unsupported(element, compiler, **kw):
    raise CompileError(
        f"days_from_now() is not supported on the '{compiler.dialect.name}' dialect"
    )


@compiles(days_from_now, "postgresql")
def _days_from_now_postgresql(element, compiler, **kw):
    return f"now() + make_interval(days => {_days(element, compiler, **kw)})"


@compiles(days_from_now, "sqlite")
def _days_from_now_sqlite(element, compiler, **kw):
    # "7 days" and "-1 days" are both valid SQLite date modifiers
    return f"datetime('now', {_days(element, compiler, **kw)} || ' days')"


@compiles(days_from_now, "mysql")
def _days_from_now_mysql(element, compiler, **kw):
    return f"DATE_ADD(UTC_TIMESTAMP(), INTERVAL {_days(element, compiler, **kw)} DAY)"
