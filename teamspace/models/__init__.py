"""SQLAlchemy models."""

from teamspace.models.invitation import Invitation
from teamspace.models.profile import Profile, Role
from teamspace.models.user import User
from teamspace.models.user_verification import UserVerification
from teamspace.models.workspace import Workspace

__all__ = [
    "Invitation",
    "Profile",
    "Role",
    "User",
    "UserVerification",
    "Workspace",
]
