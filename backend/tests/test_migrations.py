"""
Snippetbox Backend - Migration Tests
=====================================

What:  Runs revision 001 against a real SQLite file and checks the schema
       it leaves behind is the one the repository expects.
How:   Alembic's MigrationContext + Operations drive upgrade()/downgrade()
       directly, without alembic.ini or env.py.
"""

import importlib.util
from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations

from snippetbox.database import create_engine
from snippetbox.services.snippet_repository import SnippetRepository

VERSIONS_DIR = Path(__file__).resolve().parents[1] / "alembic" / "versions"


def load_revision(filename):
    spec = importlib.util.spec_from_file_location("snippetbox_rev_001", VERSIONS_DIR / filename)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def run_migration(sync_engine, step):
    with sync_engine.begin() as conn:
        ctx = MigrationContext.configure(conn)
        with Operations.context(ctx):
            step()


@pytest.fixture
def revision():
    return load_revision("001_create_snippets_table.py")


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "migrated.db"


@pytest.fixture
def sync_engine(db_path):
    engine = sa.create_engine(f"sqlite:///{db_path}")
    yield engine
    engine.dispose()


class TestCreateSnippetsTable:

    def test_revision_metadata(self, revision):
        assert revision.revision == "001"
        assert revision.down_revision is None

    def test_upgrade_creates_table_and_index(self, revision, sync_engine):
        run_migration(sync_engine, revision.upgrade)

        inspector = sa.inspect(sync_engine)
        columns = {c["name"]: c for c in inspector.get_columns("snippets")}
        assert list(columns) == ["id", "title", "content", "created", "expires"]
        assert not any(c["nullable"] for c in columns.values())
        assert inspector.get_pk_constraint("snippets")["constrained_columns"] == ["id"]

        indexes = {i["name"]: i["column_names"] for i in inspector.get_indexes("snippets")}
        assert indexes["idx_snippets_created"] == ["created"]

    def test_downgrade_drops_table(self, revision, sync_engine):
        run_migration(sync_engine, revision.upgrade)
        run_migration(sync_engine, revision.downgrade)

        assert not sa.inspect(sync_engine).has_table("snippets")

    @pytest.mark.asyncio
    async def test_repository_runs_on_migrated_schema(self, revision, sync_engine, db_path):
        run_migration(sync_engine, revision.upgrade)

        repository = await SnippetRepository.open(create_engine(f"sqlite+aiosqlite:///{db_path}"))
        try:
            snippet_id = await repository.insert("migrated", "works", 2)
            snippet = await repository.get(snippet_id)
        finally:
            await repository.close()

        assert snippet.title == "migrated"
        assert [s.id for s in await _latest_after_reopen(db_path)] == [snippet_id]


async def _latest_after_reopen(db_path):
    repository = await SnippetRepository.open(create_engine(f"sqlite+aiosqlite:///{db_path}"))
    try:
        return await repository.latest()
    finally:
        await repository.close()
