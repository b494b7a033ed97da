"""Domain entity representing a user role."""

from dataclasses import dataclass

ROLE_ADMIN = "admin"
ROLE_COORDINATOR = "coordinator"
ROLE_USER = "user"

PRIVILEGED_ROLE_ALIASES = frozenset({ROLE_ADMIN, ROLE_COORDINATOR})


@dataclass
class Role:
    """Global role assigned to a user (administrator, coordinator or plain user)."""

    id: int
    name: str
    alias: str

    @property
    def is_privileged(self) -> bool:
        """Return ``True`` for roles with blanket task and project visibility."""

        return self.alias.lower() in PRIVILEGED_ROLE_ALIASES


__all__ = [
    "Role",
    "ROLE_ADMIN",
    "ROLE_COORDINATOR",
    "ROLE_USER",
    "PRIVILEGED_ROLE_ALIASES",
]
