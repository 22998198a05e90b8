"""Commit-then-invalidate helper for mutation handlers.

Cached pages of a resource kind are dropped only once the change that
made them stale is durably committed. A failed commit raises before any
invalidation happens, leaving still-valid pages in place.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from .collection import PaginatedCollectionCache
from .keys import ResourceKind


async def commit_and_invalidate(
    session: AsyncSession,
    cache: PaginatedCollectionCache,
    *resource_kinds: ResourceKind,
) -> int:
    """Commit ``session`` then invalidate every given resource kind.

    Returns:
        Number of cached pages deleted across all kinds.
    """
    await session.commit()

    deleted = 0
    for kind in resource_kinds:
        deleted += await cache.invalidate(kind)
    return deleted
