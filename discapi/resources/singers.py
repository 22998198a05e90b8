"""API endpoints for singers."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from discapi.auth import Principal, get_principal, require_admin
from discapi.cache import PaginatedCollectionCache, ResourceKind, commit_and_invalidate, serialize_page
from discapi.database import Singer, fetch_page, get_db_session, get_or_404
from discapi.logging_config import get_logger

from .models import SingerCreate, SingerResponse, SingerUpdate
from .shared import at_least, get_api_version, get_collection_cache, resource_links

logger = get_logger(name=__name__)

router = APIRouter(prefix="/api/singers", tags=["Singers"])

LAST_NAME_SINCE = "2.0"


def to_response(
    request: Request,
    singer: Singer,
    *,
    admin: bool = False,
    version: Optional[str] = None,
) -> SingerResponse:
    """Render a singer; ``version=None`` exposes every field."""
    show_last_name = version is None or at_least(version, LAST_NAME_SINCE)
    return SingerResponse(
        id=singer.id,
        name=singer.name,
        last_name=singer.last_name if show_last_name else None,
        links=resource_links(request, "Singer", singer.id, admin=admin),
    )


@router.get("", name="singers")
async def list_singers(
    request: Request,
    page: Optional[str] = Query(None, description="Page to fetch, defaults to 1"),
    limit: Optional[str] = Query(None, description="Items per page, defaults to 3"),
    db: AsyncSession = Depends(get_db_session),
    cache: PaginatedCollectionCache = Depends(get_collection_cache),
    _: Principal = Depends(get_principal),
):
    """Get one page of singers (cached, tag ``SingerCache``)."""
    key = cache.key_for(ResourceKind.SINGER, page, limit)
    default_version = request.app.state.settings.default_api_version

    async def compute() -> str:
        singers = await fetch_page(db, Singer, key.page, key.page_size)
        return serialize_page(
            to_response(request, singer, version=default_version) for singer in singers
        )

    payload = await cache.get_page(ResourceKind.SINGER, key.page, key.page_size, compute)
    return Response(content=payload, media_type="application/json")


@router.get(
    "/{item_id}",
    name="detailSinger",
    response_model=SingerResponse,
    response_model_exclude_none=True,
)
async def get_singer(
    request: Request,
    item_id: int,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(get_principal),
    version: str = Depends(get_api_version),
):
    """Get one singer; ``lastName`` is returned from API version 2.0."""
    singer = await get_or_404(db, Singer, item_id)
    return to_response(request, singer, admin=principal.is_admin, version=version)


@router.post(
    "",
    name="createSinger",
    status_code=201,
    response_model=SingerResponse,
    response_model_exclude_none=True,
)
async def create_singer(
    request: Request,
    response: Response,
    body: SingerCreate,
    db: AsyncSession = Depends(get_db_session),
    cache: PaginatedCollectionCache = Depends(get_collection_cache),
    _: Principal = Depends(require_admin("create a singer")),
):
    """Create a singer; the Location header points to its detail route."""
    singer = Singer(name=body.name, last_name=body.last_name)
    db.add(singer)
    await commit_and_invalidate(db, cache, ResourceKind.SINGER)

    logger.info("Created singer {}", singer.id)
    response.headers["Location"] = str(request.url_for("detailSinger", item_id=str(singer.id)))
    return to_response(request, singer, admin=True)


@router.put("/{item_id}", name="updateSinger", status_code=204)
async def update_singer(
    item_id: int,
    body: SingerUpdate,
    db: AsyncSession = Depends(get_db_session),
    cache: PaginatedCollectionCache = Depends(get_collection_cache),
    _: Principal = Depends(require_admin("edit a singer")),
):
    """Update a singer's name and/or last name."""
    singer = await get_or_404(db, Singer, item_id)
    if body.name is not None:
        singer.name = body.name
    if body.last_name is not None:
        singer.last_name = body.last_name
    await commit_and_invalidate(db, cache, ResourceKind.SINGER)
    return Response(status_code=204)


@router.delete("/{item_id}", name="deleteSinger", status_code=204)
async def delete_singer(
    item_id: int,
    db: AsyncSession = Depends(get_db_session),
    cache: PaginatedCollectionCache = Depends(get_collection_cache),
    _: Principal = Depends(require_admin("delete a singer")),
):
    """Delete a singer together with its records."""
    singer = await get_or_404(db, Singer, item_id)
    await db.delete(singer)
    # Records go with their singer (ON DELETE CASCADE)
    await commit_and_invalidate(db, cache, ResourceKind.SINGER, ResourceKind.RECORD)

    logger.info("Deleted singer {}", item_id)
    return Response(status_code=204)
