"""Use cases for password login and token issuance."""

from __future__ import annotations

from enum import Enum, auto

from sqlalchemy.orm import Session

from app.domain.entities import User
from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import (
    create_access_token,
    password_signature,
    verify_password,
)


class AuthenticationStatus(Enum):
    """Possible outcomes when attempting to authenticate a user."""

    SUCCESS = auto()
    INVALID_CREDENTIALS = auto()
    INACTIVE = auto()


def authenticate_user(
    session: Session, email: str, password: str
) -> tuple[User | None, AuthenticationStatus]:
    """Return the authentication result along with the user when the password matches."""

    user = UserRepository(session).get_by_email(email)
    if user is None or not verify_password(password, user.password):
        return None, AuthenticationStatus.INVALID_CREDENTIALS
    if not user.is_active:
        return user, AuthenticationStatus.INACTIVE
    return user, AuthenticationStatus.SUCCESS


def issue_access_token(user: User) -> str:
    """Return a bearer token for ``user`` that is revoked by password changes."""

    return create_access_token(
        data={
            "sub": user.email,
            "uid": user.id,
            "role": user.role.alias,
            "pwd_sig": password_signature(user.password, user.is_active),
        }
    )


__all__ = ["AuthenticationStatus", "authenticate_user", "issue_access_token"]
