"""
Snippetbox Backend - Application Package Initializer
=====================================================

What: Marks the `snippetbox` directory as a Python package.
Who:  Imported by uvicorn (`snippetbox.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │      Routes (Request Handlers)      │  ← parse input, pick a response
    ├─────────────────────────────────────┤
    │     Error Responses (Translator)    │  ← failure → HTTP status + body
    ├─────────────────────────────────────┤
    │     Services (Snippet Repository)   │  ← statements built once, row mapping
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← async SQLAlchemy engine / pool
    └─────────────────────────────────────┘

    Handlers never touch the engine directly; the repository owns the pool and
    its three statements for the whole process lifetime.
"""

__version__ = "1.0.0"
