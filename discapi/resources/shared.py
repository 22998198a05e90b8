"""Helpers shared by the catalog routers: cache access, links, versioning."""

from typing import Optional, Tuple

from fastapi import Header, Request

from discapi.cache import PaginatedCollectionCache

from .models import Link


def get_collection_cache(request: Request) -> PaginatedCollectionCache:
    """FastAPI dependency returning the process-wide collection cache."""
    return request.app.state.collection_cache


def resource_links(request: Request, resource: str, item_id: int, *, admin: bool) -> dict[str, Link]:
    """Build the ``_links`` of one item.

    ``self`` is always present; ``update`` and ``delete`` only for admins.
    Route names follow ``detail{Resource}``, ``update{Resource}``,
    ``delete{Resource}``.
    """
    links = {"self": _link(request, f"detail{resource}", item_id)}
    if admin:
        links["update"] = _link(request, f"update{resource}", item_id)
        links["delete"] = _link(request, f"delete{resource}", item_id)
    return links


def _link(request: Request, route_name: str, item_id: int) -> Link:
    return Link(href=str(request.app.url_path_for(route_name, item_id=str(item_id))))


def parse_version(version: str) -> Tuple[int, ...]:
    return tuple(int(part) for part in version.split("."))


def version_from_accept(accept: Optional[str], default: str) -> str:
    """Extract ``version=X.Y`` from an Accept header, e.g.
    ``application/json; version=2.0``. Malformed versions fall back to ``default``.
    """
    if not accept:
        return default
    for media_range in accept.split(","):
        for param in media_range.split(";")[1:]:
            name, _, value = param.partition("=")
            if name.strip().lower() != "version":
                continue
            value = value.strip().strip('"')
            try:
                parse_version(value)
            except ValueError:
                return default
            return value
    return default


async def get_api_version(
    request: Request,
    accept: Optional[str] = Header(None),
) -> str:
    """FastAPI dependency resolving the requested serialization version."""
    return version_from_accept(accept, request.app.state.settings.default_api_version)


def at_least(version: str, minimum: str) -> bool:
    return parse_version(version) >= parse_version(minimum)
