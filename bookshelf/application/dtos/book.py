"""DTOs for books."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class BookCreate:
    """Input for creating a book."""

    title: str
    authors: str
    published_by: str


@dataclass(frozen=True)
class BookUpdate:
    """Partial update. None means "leave unchanged"."""

    title: str | None = None
    authors: str | None = None
    published_by: str | None = None

    def supplied(self) -> dict[str, str]:
        """Return only the fields the caller supplied."""
        return {
            key: value
            for key, value in (
                ("title", self.title),
                ("authors", self.authors),
                ("published_by", self.published_by),
            )
            if value is not None
        }


@dataclass(frozen=True)
class BookResult:
    """Book read-model."""

    id: str
    title: str
    authors: str
    published_by: str
    created_by_id: str
    updated_by_id: str | None
    is_deleted: bool
    created_at: datetime
    updated_at: datetime
