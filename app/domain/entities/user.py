"""Domain entity representing a user."""

from dataclasses import dataclass
from datetime import datetime

from .role import Role


@dataclass
class User:
    """Core attributes describing an application user."""

    id: int | None
    role: Role
    name: str
    email: str
    password: str
    is_active: bool = True
    deleted: bool = False
    created_at: datetime | None = None

    @property
    def display_name(self) -> str:
        """Name shown in notification texts, falling back to the email."""

        return self.name or self.email

    def is_privileged(self) -> bool:
        """Return ``True`` for administrators and coordinators."""

        return self.role.is_privileged
