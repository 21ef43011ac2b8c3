"""Book ORM model (soft-deletable, audited)."""

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from bookshelf.infrastructure.persistence.database import Base
from bookshelf.infrastructure.persistence.models.mixins import (
    ActorTrackingMixin,
    CuidMixin,
    SoftDeleteMixin,
    TimestampMixin,
)


class Book(CuidMixin, TimestampMixin, SoftDeleteMixin, ActorTrackingMixin, Base):
    """Book. Table: book. Listed newest first by (created_at, id)."""

    __tablename__ = "book"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    authors: Mapped[str] = mapped_column(String(1000), nullable=False)
    published_by: Mapped[str] = mapped_column(String(500), nullable=False)

    __table_args__ = (Index("ix_book_created_at_id", "created_at", "id"),)
