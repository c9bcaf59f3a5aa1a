"""Tests for the operational scripts."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from sqlalchemy.orm import Session

from teamspace.models import Profile, User, Workspace
from teamspace.scripts import backfill_workspaces, create_user
from tests.test_constants import TEST_PASSWORD, TEST_PASSWORD_WEAK


def _legacy_user(db: Session, email: str) -> User:
    user = User(email=email, name=None)
    user.set_password(TEST_PASSWORD)
    db.add(user)
    db.commit()
    return user


class _NoCloseSession:
    """Wrap the test session so the script's ``finally: db.close()`` keeps it usable."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def __getattr__(self, name):
        return getattr(self._session, name)

    def close(self) -> None:
        pass


def test_backfill_repairs_only_users_without_default(db: Session, registered) -> None:
    legacy = _legacy_user(db, "legacy@x.com")

    assert [u.id for u in backfill_workspaces.find_users_without_default(db)] == [legacy.id]
    assert backfill_workspaces.backfill(db) == 1

    profile = db.query(Profile).filter(Profile.user_id == legacy.id).one()
    assert profile.is_default is True
    assert profile.workspace.name == "My Workspace"

    # second run is a no-op
    assert backfill_workspaces.backfill(db) == 0
    assert db.query(Workspace).count() == 2


def test_backfill_dry_run_changes_nothing(db: Session) -> None:
    _legacy_user(db, "legacy@x.com")
    assert backfill_workspaces.backfill(db, dry_run=True) == 1
    assert db.query(Profile).count() == 0


def test_create_user_script(db: Session, capsys) -> None:
    with patch.object(create_user, "SessionLocal", return_value=_NoCloseSession(db)):
        create_user.main(["--email", "Ops@X.com", "--password", TEST_PASSWORD, "--name", "Ops"])

    user = db.query(User).filter(User.email == "ops@x.com").one()
    assert user.email_verified is True
    assert db.query(Profile).filter(Profile.user_id == user.id, Profile.is_default.is_(True)).count() == 1
    assert "created successfully" in capsys.readouterr().out


def test_create_user_script_rejects_duplicate(db: Session, registered) -> None:
    with patch.object(create_user, "SessionLocal", return_value=_NoCloseSession(db)):
        with pytest.raises(SystemExit):
            create_user.main(["--email", registered.user.email, "--password", TEST_PASSWORD])


def test_create_user_script_rejects_weak_password(db: Session) -> None:
    with patch.object(create_user, "SessionLocal", return_value=_NoCloseSession(db)):
        with pytest.raises(SystemExit):
            create_user.main(["--email", "ops@x.com", "--password", TEST_PASSWORD_WEAK])
    assert db.query(User).count() == 0
