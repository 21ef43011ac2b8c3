"""SQLAlchemy mixins for common model patterns.

Provides: CuidMixin, TimestampMixin, SoftDeleteMixin, ActorTrackingMixin.
Timestamps are set in Python (UTC) with a server default as a fallback for
rows inserted outside the ORM.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, false
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from bookshelf.shared.utils.datetime import utc_now
from bookshelf.shared.utils.generators import generate_cuid


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default generate_cuid."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class TimestampMixin:
    """Mixin for created_at and updated_at (timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            default=utc_now,
            server_default=func.now(),
            nullable=False,
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            default=utc_now,
            server_default=func.now(),
            onupdate=utc_now,
            nullable=False,
        )


class SoftDeleteMixin:
    """Mixin for soft delete. The row stays; is_deleted hides it from default reads."""

    @declared_attr
    def is_deleted(cls) -> Mapped[bool]:
        return mapped_column(
            Boolean, default=False, server_default=false(), nullable=False, index=True
        )


class ActorTrackingMixin:
    """Mixin for created_by_id / updated_by_id (weak FKs to app_user.id)."""

    @declared_attr
    def created_by_id(cls) -> Mapped[str]:
        return mapped_column(
            String,
            ForeignKey("app_user.id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
        )

    @declared_attr
    def updated_by_id(cls) -> Mapped[str | None]:
        return mapped_column(
            String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
        )
