from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework_simplejwt.tokens import AccessToken

if TYPE_CHECKING:
    from eventhub.users.models import User


def issue_access_token(user: User) -> str:
    """Signed access token carrying the user id; lifetime comes from SIMPLE_JWT."""
    return str(AccessToken.for_user(user))
