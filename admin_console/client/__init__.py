"""Python client for the admin console API: session holder, HTTP wrapper and terminal screens."""

from admin_console.client.session import SessionHolder
from admin_console.client.api import (
    ConsoleClient,
    ApiError,
    AuthenticationRequired,
    AccessDenied,
    ValidationFailed,
    NotFound,
    ApiUnreachable,
    Department,
    UserRecord,
    Identity,
    LoginResult,
    total_limit,
)

__all__ = [
    "SessionHolder",
    "ConsoleClient",
    "ApiError",
    "AuthenticationRequired",
    "AccessDenied",
    "ValidationFailed",
    "NotFound",
    "ApiUnreachable",
    "Department",
    "UserRecord",
    "Identity",
    "LoginResult",
    "total_limit",
]
