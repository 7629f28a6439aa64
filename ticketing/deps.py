"""Request dependencies — resolve the calling principal.

Authentication happens upstream; by the time a request reaches the service
the ``X-User-Id`` header names an existing user. Nothing here checks roles.
"""
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from ticketing.database import get_db
from ticketing.exceptions import Unauthenticated
from ticketing.models.user import User


def get_optional_principal(
    x_user_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """The caller, or None for anonymous requests."""
    if not x_user_id:
        return None
    user = db.get(User, x_user_id)
    if not user:
        raise Unauthenticated("Unknown principal")
    return user


def get_current_principal(principal: Optional[User] = Depends(get_optional_principal)) -> User:
    if principal is None:
        raise Unauthenticated("Authentication required")
    return principal
