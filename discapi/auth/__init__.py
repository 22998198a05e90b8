"""Bearer-token authentication and role checks."""

from .dependencies import get_principal, get_token_from_header, require_admin
from .models import ROLE_ADMIN, ROLE_USER, Principal

__all__ = [
    "get_token_from_header",
    "get_principal",
    "require_admin",
    "Principal",
    "ROLE_ADMIN",
    "ROLE_USER",
]
