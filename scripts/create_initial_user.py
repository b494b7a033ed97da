"""Utility script to seed the global roles and create an initial administrator."""

from __future__ import annotations

import argparse
from getpass import getpass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import ROLE_ADMIN, ROLE_COORDINATOR, ROLE_USER
from app.infrastructure.database import SessionLocal, initialize_database
from app.infrastructure.models import RoleModel, UserModel
from app.infrastructure.security import get_password_hash

DEFAULT_ROLES = (
    ("Administrator", ROLE_ADMIN),
    ("Coordinator", ROLE_COORDINATOR),
    ("User", ROLE_USER),
)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for user creation."""

    parser = argparse.ArgumentParser(
        description="Create the roles and an initial user for the planning office API.",
    )
    parser.add_argument("--name", default="Administrator", help="Full name of the user")
    parser.add_argument(
        "--email", default="admin@example.com", help="Login email of the user"
    )
    parser.add_argument(
        "--role",
        default=ROLE_ADMIN,
        choices=[alias for _, alias in DEFAULT_ROLES],
        help="Global role of the user (default: admin)",
    )
    parser.add_argument(
        "--password",
        default=None,
        help="Password of the user. Prompted interactively when omitted.",
    )
    return parser.parse_args()


def ensure_roles(session: Session) -> dict[str, RoleModel]:
    """Insert the default roles that are missing and return them by alias."""

    roles = {role.alias: role for role in session.query(RoleModel).all()}
    for name, alias in DEFAULT_ROLES:
        if alias not in roles:
            role = RoleModel(name=name, alias=alias)
            session.add(role)
            roles[alias] = role
    session.commit()
    return roles


def main() -> None:
    """Create a user using the provided command line arguments."""

    args = parse_args()

    password = args.password or getpass("User password: ")
    if not password:
        raise SystemExit("A password is required.")

    initialize_database()

    session = SessionLocal()
    try:
        roles = ensure_roles(session)
        if session.query(UserModel).filter_by(email=args.email).first() is not None:
            raise SystemExit(f"A user with email {args.email} already exists.")
        user = UserModel(
            role_id=roles[args.role].id,
            name=args.name,
            email=args.email,
            password=get_password_hash(password),
            is_active=True,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not store the user: {exc}") from exc
    else:
        print(
            "User created:\n"
            f"  ID: {user.id}\n"
            f"  Name: {user.name}\n"
            f"  Email: {user.email}\n"
            f"  Role: {args.role}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
