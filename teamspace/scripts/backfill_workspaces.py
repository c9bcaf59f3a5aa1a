"""Provision default workspaces for accounts that have none.

Runs the same repair as login (``ensure_default_workspace``) for every user,
so it is safe to run repeatedly.

Usage:
    python -m teamspace.scripts.backfill_workspaces [--dry-run]
"""

from __future__ import annotations

import argparse
import logging

from sqlalchemy import exists, select

from teamspace.db.session import SessionLocal
from teamspace.models.profile import Profile
from teamspace.models.user import User
from teamspace.services.profiles import ensure_default_workspace

logger = logging.getLogger(__name__)


def find_users_without_default(db) -> list[User]:
    """Users with no profile at all or no default profile."""
    has_default = exists().where(Profile.user_id == User.id, Profile.is_default.is_(True))
    return list(db.scalars(select(User).where(~has_default).order_by(User.created_at)))


def backfill(db, dry_run: bool = False) -> int:
    """Repair every user without a default profile. Returns the number of users touched."""
    users = find_users_without_default(db)
    for user in users:
        if dry_run:
            print(f"Would repair user {user.email} (id={user.id})")
            continue
        profile = ensure_default_workspace(db, user)
        print(f"Repaired user {user.email}: default workspace_id={profile.workspace_id}")
    return len(users)


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    parser = argparse.ArgumentParser(description="Backfill default workspaces")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List affected users without changing anything",
    )
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        count = backfill(db, dry_run=args.dry_run)
        print(f"{count} user(s) {'need' if args.dry_run else 'received'} a default workspace.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
