"""Create a verified Teamspace user with a default workspace.

Usage:
    python -m teamspace.scripts.create_user --email admin@example.com --password <password> [--name NAME]
"""

from __future__ import annotations

import argparse
import sys

from teamspace.db.session import SessionLocal
from teamspace.errors import ValidationError
from teamspace.models.user import User
from teamspace.services.auth import create_user, normalize_email
from teamspace.services.profiles import ensure_default_workspace


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create a Teamspace user")
    parser.add_argument("--email", required=True, help="Email address for the new user")
    parser.add_argument("--password", required=True, help="Password for the new user")
    parser.add_argument("--name", default=None, help="Display name")
    args = parser.parse_args(argv)

    email = normalize_email(args.email)
    db = SessionLocal()
    try:
        existing = db.query(User).filter(User.email == email).first()
        if existing:
            print(f"User '{email}' already exists.")
            sys.exit(1)

        try:
            user = create_user(db, email, args.password, name=args.name, email_verified=True)
        except ValidationError as exc:
            print(f"Error: {exc.message}")
            sys.exit(1)
        profile = ensure_default_workspace(db, user)
        print(
            f"User '{user.email}' created successfully "
            f"(id={user.id}, workspace_id={profile.workspace_id})."
        )
    finally:
        db.close()


if __name__ == "__main__":
    main()
