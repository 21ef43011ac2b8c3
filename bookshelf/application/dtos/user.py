"""DTOs for users (authentication principals)."""

from dataclasses import dataclass
from datetime import datetime

from bookshelf.shared.enums import UserRole


@dataclass(frozen=True)
class UserResult:
    """User read-model. Never carries password or API key material."""

    id: str
    name: str
    email: str
    role: UserRole
    created_at: datetime
