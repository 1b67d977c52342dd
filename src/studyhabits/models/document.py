"""Generic document table backing the shared store."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, ClassVar, Optional

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel


class DocumentRecord(SQLModel, table=True):
    """One JSON document addressed by (collection, key)."""

    __tablename__: ClassVar[str] = "document"
    __table_args__ = (UniqueConstraint("collection", "key", name="uq_document_collection_key"),)  # noqa: RUF012

    id: Optional[int] = Field(default=None, primary_key=True)
    collection: str = Field(nullable=False, max_length=64, index=True)
    key: str = Field(nullable=False, max_length=128, index=True)
    data: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    # Bumped on every write; pollers compare it to spot external changes.
    version: int = Field(default=1, nullable=False)
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
