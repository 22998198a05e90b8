from typing import Callable, Optional

from fastapi import Depends, Header, HTTPException, Request

from discapi.logging_config import get_logger

from .models import Principal

logger = get_logger(name=__name__)


async def get_token_from_header(authorization: Optional[str] = Header(None)) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid header format")
    return authorization.split(" ", 1)[1]


async def get_principal(
    request: Request,
    token: str = Depends(get_token_from_header),
) -> Principal:
    """Resolve the bearer token to the role configured for it."""
    role = request.app.state.token_roles.get(token)
    if role is None:
        logger.warning("Rejected unknown API token {}...", token[:4])
        raise HTTPException(status_code=401, detail="Invalid API token")
    return Principal(token_hint=token[:4], role=role)


def require_admin(action: str) -> Callable:
    """Dependency factory guarding a write route.

    Args:
        action: What the route does, used in the 403 message
            (e.g. "create a singer").
    """
    async def _require_admin(principal: Principal = Depends(get_principal)) -> Principal:
        if not principal.is_admin:
            raise HTTPException(
                status_code=403,
                detail=f"You do not have sufficient rights to {action}",
            )
        return principal

    return _require_admin
