"""API endpoints for records."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from discapi.auth import Principal, get_principal, require_admin
from discapi.cache import PaginatedCollectionCache, ResourceKind, commit_and_invalidate, serialize_page
from discapi.database import Record, Singer, fetch_page, get_db_session, get_or_404
from discapi.logging_config import get_logger

from .models import RecordCreate, RecordResponse, RecordUpdate
from .shared import get_collection_cache, resource_links

logger = get_logger(name=__name__)

router = APIRouter(prefix="/api/records", tags=["Records"])


def to_response(request: Request, record: Record, *, admin: bool = False) -> RecordResponse:
    return RecordResponse(
        id=record.id,
        name=record.name,
        links=resource_links(request, "Record", record.id, admin=admin),
    )


async def _existing_singer_id(db: AsyncSession, singer_id: int) -> int:
    if await db.get(Singer, singer_id) is None:
        raise HTTPException(status_code=400, detail=f"Singer {singer_id} does not exist")
    return singer_id


@router.get("", name="records")
async def list_records(
    request: Request,
    page: Optional[str] = Query(None, description="Page to fetch, defaults to 1"),
    limit: Optional[str] = Query(None, description="Items per page, defaults to 3"),
    db: AsyncSession = Depends(get_db_session),
    cache: PaginatedCollectionCache = Depends(get_collection_cache),
    _: Principal = Depends(get_principal),
):
    """Get one page of records (cached, tag ``RecordCache``)."""
    key = cache.key_for(ResourceKind.RECORD, page, limit)

    async def compute() -> str:
        records = await fetch_page(db, Record, key.page, key.page_size)
        return serialize_page(to_response(request, record) for record in records)

    payload = await cache.get_page(ResourceKind.RECORD, key.page, key.page_size, compute)
    return Response(content=payload, media_type="application/json")


@router.get("/{item_id}", name="detailRecord", response_model=RecordResponse)
async def get_record(
    request: Request,
    item_id: int,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(get_principal),
):
    """Get one record."""
    record = await get_or_404(db, Record, item_id)
    return to_response(request, record, admin=principal.is_admin)


@router.post("", name="createRecord", status_code=201, response_model=RecordResponse)
async def create_record(
    request: Request,
    response: Response,
    body: RecordCreate,
    db: AsyncSession = Depends(get_db_session),
    cache: PaginatedCollectionCache = Depends(get_collection_cache),
    _: Principal = Depends(require_admin("create a record")),
):
    """Create a record for an existing singer (``idSinger``)."""
    record = Record(name=body.name, singer_id=await _existing_singer_id(db, body.singer_id))
    db.add(record)
    await commit_and_invalidate(db, cache, ResourceKind.RECORD)

    logger.info("Created record {} for singer {}", record.id, record.singer_id)
    response.headers["Location"] = str(request.url_for("detailRecord", item_id=str(record.id)))
    return to_response(request, record, admin=True)


@router.put("/{item_id}", name="updateRecord", status_code=204)
async def update_record(
    item_id: int,
    body: RecordUpdate,
    db: AsyncSession = Depends(get_db_session),
    cache: PaginatedCollectionCache = Depends(get_collection_cache),
    _: Principal = Depends(require_admin("edit a record")),
):
    """Update a record's title and/or singer."""
    record = await get_or_404(db, Record, item_id)
    if body.name is not None:
        record.name = body.name
    if body.singer_id is not None:
        record.singer_id = await _existing_singer_id(db, body.singer_id)
    await commit_and_invalidate(db, cache, ResourceKind.RECORD)
    return Response(status_code=204)


@router.delete("/{item_id}", name="deleteRecord", status_code=204)
async def delete_record(
    item_id: int,
    db: AsyncSession = Depends(get_db_session),
    cache: PaginatedCollectionCache = Depends(get_collection_cache),
    _: Principal = Depends(require_admin("delete a record")),
):
    """Delete a record; its songs are kept without a record."""
    record = await get_or_404(db, Record, item_id)
    await db.delete(record)
    await commit_and_invalidate(db, cache, ResourceKind.RECORD)

    logger.info("Deleted record {}", item_id)
    return Response(status_code=204)
