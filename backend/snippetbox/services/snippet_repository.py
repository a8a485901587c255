"""
Snippetbox Backend - Snippet Repository (Data-Access Layer)
============================================================

What:  All interaction with persistent storage for snippets.
Why:   One owner for the connection pool and the three statements (insert,
       get-by-id, list-latest), and one place that decides which failures
       are "not found" and which are storage faults.
How:   Statements are built once when the repository is created, checked
       against the dialect and the live schema, and reused for every
       request until shutdown. Rows are mapped positionally into
       immutable `Snippet` values.
Who:   Created in the app lifespan; handlers reach it through a dependency.

Failure taxonomy:
    NotFoundError     no live row matched (absent or expired id)
    StorageError      anything else at request time (driver, cursor, mapping)
    StorageInitError  statements could not be compiled or checked at startup
"""

import asyncio
import logging
from typing import List

from sqlalchemy import Integer, bindparam, false, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from snippetbox.database import days_from_now, utcnow
from snippetbox.exceptions import NotFoundError, StorageError, StorageInitError
from snippetbox.models.snippet import snippets_table
from snippetbox.schemas.snippet import FIELD_ORDER, Snippet

logger = logging.getLogger(__name__)

# Upper bound on the "latest snippets" listing
LATEST_LIMIT = 10

# Driver errors plus the socket-level failures some drivers raise unwrapped
# while connecting
STORAGE_FAILURES = (SQLAlchemyError, OSError, asyncio.TimeoutError)


class SnippetRepository:
    """
    Owns the engine (connection pool) and three statements built once.

    Construction compiles each statement against the engine's dialect as a
    validation step and raises StorageInitError if any of them cannot be
    compiled; SQLAlchemy compiles and caches the executable form on first
    use. Use `await SnippetRepository.open(engine)` to also check the table
    and every column the statements read or write against the live schema
    before serving traffic.

    Statement parameters:
        insert   new_title, new_content, expires_in_days
        get      snippet_id
        latest   (none)
    """

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._closed = False

        table = snippets_table
        columns = [table.c[name] for name in FIELD_ORDER]

        # created/expires are computed by the database, never by the caller
        self._insert_stmt = insert(table).values(
            title=bindparam("new_title"),
            content=bindparam("new_content"),
            created=utcnow(),
            expires=days_from_now(bindparam("expires_in_days", type_=Integer)),
        )
        self._get_stmt = select(*columns).where(
            table.c.expires > utcnow(),
            table.c.id == bindparam("snippet_id", type_=Integer),
        )
        self._latest_stmt = (
            select(*columns)
            .where(table.c.expires > utcnow())
            .order_by(table.c.id.desc())
            .limit(LATEST_LIMIT)
        )
        # Every column insert writes and get/latest read; returns no rows
        self._schema_check_stmt = select(*columns).where(false())

        for name, stmt in self._statements():
            try:
                stmt.compile(dialect=engine.dialect)
            except SQLAlchemyError as exc:
                raise StorageInitError(
                    f"could not prepare {name} statement: {exc}",
                    context={"statement": name, "dialect": engine.dialect.name},
                ) from exc

    @classmethod
    async def open(cls, engine: AsyncEngine) -> "SnippetRepository":
        """Create the repository and check the schema once over a real connection."""
        repository = cls(engine)
        try:
            async with engine.connect() as conn:
                await conn.execute(repository._schema_check_stmt)
        except STORAGE_FAILURES as exc:
            raise StorageInitError(
                f"snippet statements rejected by the database: {exc}",
                context={"dialect": engine.dialect.name},
            ) from exc

        logger.info("Snippet statements checked (dialect=%s)", engine.dialect.name)
        return repository

    def _statements(self):
        return (
            ("insert", self._insert_stmt),
            ("get", self._get_stmt),
            ("latest", self._latest_stmt),
        )

    def _check_open(self) -> None:
        if self._closed:
            raise StorageError("snippet repository is closed")

    @staticmethod
    def _to_snippet(row) -> Snippet:
        try:
            return Snippet.from_row(row)
        except ValueError as exc:
            # Also covers pydantic.ValidationError
            raise StorageError(f"could not map snippet row: {exc}") from exc

    # ── Operations ────────────────────────────────────────────────────────

    async def insert(self, title: str, content: str, expires: int) -> int:
        """
        Store a new snippet that expires `expires` days from now.

        Returns:
            The identifier assigned by the database.

        Raises:
            StorageError: execution failed or no identifier came back.
        """
        self._check_open()
        params = {
            "new_title": title,
            "new_content": content,
            "expires_in_days": expires,
        }
        try:
            async with self._engine.begin() as conn:
                result = await conn.execute(self._insert_stmt, params)
                primary_key = result.inserted_primary_key
        except STORAGE_FAILURES as exc:
            raise StorageError(f"insert snippet: {exc}") from exc

        if not primary_key or primary_key[0] is None:
            raise StorageError("insert snippet: database did not report the new id")

        snippet_id = int(primary_key[0])
        logger.debug("Inserted snippet %d (expires in %d days)", snippet_id, expires)
        return snippet_id

    async def get(self, snippet_id: int) -> Snippet:
        """
        Return the live snippet with this id.

        Raises:
            NotFoundError: no row, or the row has expired.
            StorageError: anything else.
        """
        self._check_open()
        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(self._get_stmt, {"snippet_id": snippet_id})
                row = result.one_or_none()
        except STORAGE_FAILURES as exc:
            raise StorageError(f"get snippet {snippet_id}: {exc}") from exc

        if row is None:
            raise NotFoundError(resource="snippet", resource_id=snippet_id)
        return self._to_snippet(row)

    async def latest(self) -> List[Snippet]:
        """
        Return up to ten live snippets, newest id first.

        The cursor is drained to the end; an error raised while iterating
        fails the whole call even if some rows were already mapped.
        """
        self._check_open()
        snippets: List[Snippet] = []
        try:
            async with self._engine.connect() as conn:
                result = await conn.stream(self._latest_stmt)
                try:
                    async for row in result:
                        snippets.append(self._to_snippet(row))
                finally:
                    await result.close()
        except STORAGE_FAILURES as exc:
            raise StorageError(
                f"latest snippets: {exc}",
                context={"rows_read": len(snippets)},
            ) from exc

        return snippets

    async def close(self) -> None:
        """Stop serving requests and dispose the connection pool. Idempotent."""
        if self._closed:
            return
        self._closed = True
        await self._engine.dispose()
        logger.info("Snippet repository closed")
