"""Authentication utilities for the newsgate API."""

from newsgate.auth.dependencies import (
    get_current_user,
    get_optional_user,
    require_admin,
    require_moderator,
    require_role,
)
from newsgate.auth.jwt import create_access_token, decode_token

__all__ = [
    "create_access_token",
    "decode_token",
    "get_current_user",
    "get_optional_user",
    "require_role",
    "require_moderator",
    "require_admin",
]
