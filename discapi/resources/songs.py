"""API endpoints for songs."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from discapi.auth import Principal, get_principal, require_admin
from discapi.cache import PaginatedCollectionCache, ResourceKind, commit_and_invalidate, serialize_page
from discapi.database import Record, Song, fetch_page, get_db_session, get_or_404
from discapi.logging_config import get_logger

from .models import SongCreate, SongResponse, SongUpdate
from .shared import get_collection_cache, resource_links

logger = get_logger(name=__name__)

router = APIRouter(prefix="/api/songs", tags=["Songs"])


def to_response(request: Request, song: Song, *, admin: bool = False) -> SongResponse:
    return SongResponse(
        id=song.id,
        name=song.name,
        duration=song.duration,
        links=resource_links(request, "Song", song.id, admin=admin),
    )


async def _existing_record_id(db: AsyncSession, record_id: Optional[int]) -> Optional[int]:
    if record_id is not None and await db.get(Record, record_id) is None:
        raise HTTPException(status_code=400, detail=f"Record {record_id} does not exist")
    return record_id


@router.get("", name="songs")
async def list_songs(
    request: Request,
    page: Optional[str] = Query(None, description="Page to fetch, defaults to 1"),
    limit: Optional[str] = Query(None, description="Items per page, defaults to 3"),
    db: AsyncSession = Depends(get_db_session),
    cache: PaginatedCollectionCache = Depends(get_collection_cache),
    _: Principal = Depends(get_principal),
):
    """Get one page of songs (cached, tag ``SongCache``)."""
    key = cache.key_for(ResourceKind.SONG, page, limit)

    async def compute() -> str:
        songs = await fetch_page(db, Song, key.page, key.page_size)
        return serialize_page(to_response(request, song) for song in songs)

    payload = await cache.get_page(ResourceKind.SONG, key.page, key.page_size, compute)
    return Response(content=payload, media_type="application/json")


@router.get("/{item_id}", name="detailSong", response_model=SongResponse)
async def get_song(
    request: Request,
    item_id: int,
    db: AsyncSession = Depends(get_db_session),
    principal: Principal = Depends(get_principal),
):
    """Get one song."""
    song = await get_or_404(db, Song, item_id)
    return to_response(request, song, admin=principal.is_admin)


@router.post("", name="createSong", status_code=201, response_model=SongResponse)
async def create_song(
    request: Request,
    response: Response,
    body: SongCreate,
    db: AsyncSession = Depends(get_db_session),
    cache: PaginatedCollectionCache = Depends(get_collection_cache),
    _: Principal = Depends(require_admin("create a song")),
):
    """Create a song, optionally on an existing record (``idRecord``)."""
    song = Song(
        name=body.name,
        duration=body.duration,
        record_id=await _existing_record_id(db, body.record_id),
    )
    db.add(song)
    await commit_and_invalidate(db, cache, ResourceKind.SONG)

    logger.info("Created song {}", song.id)
    response.headers["Location"] = str(request.url_for("detailSong", item_id=str(song.id)))
    return to_response(request, song, admin=True)


@router.put("/{item_id}", name="updateSong", status_code=204)
async def update_song(
    item_id: int,
    body: SongUpdate,
    db: AsyncSession = Depends(get_db_session),
    cache: PaginatedCollectionCache = Depends(get_collection_cache),
    _: Principal = Depends(require_admin("edit a song")),
):
    """Update a song; an explicit ``idRecord: null`` detaches it from its record."""
    song = await get_or_404(db, Song, item_id)
    if body.name is not None:
        song.name = body.name
    if body.duration is not None:
        song.duration = body.duration
    if "record_id" in body.model_fields_set:
        song.record_id = await _existing_record_id(db, body.record_id)
    await commit_and_invalidate(db, cache, ResourceKind.SONG)
    return Response(status_code=204)


@router.delete("/{item_id}", name="deleteSong", status_code=204)
async def delete_song(
    item_id: int,
    db: AsyncSession = Depends(get_db_session),
    cache: PaginatedCollectionCache = Depends(get_collection_cache),
    _: Principal = Depends(require_admin("delete a song")),
):
    """Delete a song."""
    song = await get_or_404(db, Song, item_id)
    await db.delete(song)
    await commit_and_invalidate(db, cache, ResourceKind.SONG)

    logger.info("Deleted song {}", item_id)
    return Response(status_code=204)
