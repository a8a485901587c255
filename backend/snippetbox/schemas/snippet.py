"""
Snippetbox Backend - Snippet Value Type
========================================

What:  The `Snippet` entity handed from the repository to the handlers.
Why:   Handlers receive a read-only value, never an ORM object bound to a
       session or connection, so they cannot mutate storage by accident.
How:   A frozen Pydantic model; assigning to any field raises ValidationError.
       Timestamps are always timezone-aware UTC, whichever driver produced
       them (SQLite returns naive values, PostgreSQL aware ones).
"""

from datetime import datetime, timezone
from typing import Sequence

from pydantic import BaseModel, Field, field_validator

# Positional column order shared by every SELECT the repository runs
FIELD_ORDER = ("id", "title", "content", "created", "expires")


class Snippet(BaseModel):
    """A titled piece of text with creation and expiry times."""

    id: int = Field(ge=1, description="Identifier assigned by storage")
    title: str
    content: str
    created: datetime
    expires: datetime

    model_config = {"frozen": True}

    @field_validator("created", "expires")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        # Naive values from the database are already UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @classmethod
    def from_row(cls, row: Sequence) -> "Snippet":
        """Map a row positionally in FIELD_ORDER."""
        return cls(**dict(zip(FIELD_ORDER, row, strict=True)))
