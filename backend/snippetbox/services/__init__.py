# Services package init
"""
Snippetbox Backend - Services Layer
====================================

What:  Data-access layer sitting between routes (HTTP) and the database.
How:   Handlers receive the repository through FastAPI's dependency
       injection and never touch the engine directly.

Service Inventory:
    - SnippetRepository: insert / get / latest statements built once over one
      connection pool
"""
