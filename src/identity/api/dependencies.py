"""FastAPI dependencies resolving the calling user and enforcing roles.

Authentication happens upstream; the gateway forwards the caller's user id
in the ``X-User-Id`` header and the role is looked up here.
"""

from fastapi import Depends, Header

from identity.account.account import User
from identity.domain import identity
from shared.errors import AuthenticationError, PermissionDeniedError


def current_user(x_user_id: str | None = Header(default=None)) -> User:
    if not x_user_id:
        raise AuthenticationError("Authentication required")
    user = identity.repository_for(User).find(x_user_id)
    if user is None:
        raise AuthenticationError("Unknown user")
    return user


def require_admin(user: User = Depends(current_user)) -> User:
    if not user.is_admin:
        raise PermissionDeniedError("Admin access required")
    return user


def require_seller(user: User = Depends(current_user)) -> User:
    """Partners and admins may publish and edit catalogue entries."""
    if not (user.is_partner or user.is_admin):
        raise PermissionDeniedError("Partner or admin access required")
    return user
