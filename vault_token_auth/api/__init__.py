"""Token auth backend API: facade and data shapes."""

from .auth import Auth, TokenAuth, role_path
from .models import (
    CreatedToken,
    LookedUpToken,
    LookedUpTokenRole,
    RenewedToken,
    TokenOptions,
    TokenRoleOptions,
)

__all__ = [
    "Auth",
    "CreatedToken",
    "LookedUpToken",
    "LookedUpTokenRole",
    "RenewedToken",
    "TokenAuth",
    "TokenOptions",
    "TokenRoleOptions",
    "role_path",
]
