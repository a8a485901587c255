"""
Snippetbox Backend - Snippet SQLAlchemy Model
==============================================

What:  ORM mapping of the `snippets` table.
Why:   Gives the repository typed Column objects to build its statements from,
       and gives Alembic / the test-suite one metadata source for the schema.
How:   Inherits from the shared DeclarativeBase.

Table Design:
    - id: auto-assigned integer primary key (the public snippet identifier)
    - created / expires: timestamps with time zone, both computed by the
      database at insert time
    - idx_snippets_created: supports "recent snippets" style queries
"""

from datetime import datetime

from sqlalchemy import TIMESTAMP, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from snippetbox.database import Base


class SnippetRecord(Base):
    """
    Row in the `snippets` table.

    Only the repository builds statements from this class; everything above
    it works with the immutable `schemas.snippet.Snippet` value instead.
    """

    __tablename__ = "snippets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(100), nullable=False)

    # TEXT: snippets have no artificial length limit
    content: Mapped[str] = mapped_column(Text, nullable=False)

    created: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    expires: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_snippets_created", "created"),
    )

    def __repr__(self) -> str:
        return f"<SnippetRecord(id={self.id}, title='{self.title}', expires='{self.expires}')>"


snippets_table = SnippetRecord.__table__
