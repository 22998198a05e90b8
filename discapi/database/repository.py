"""Query helpers shared by the resource routers."""

from typing import Sequence, Type, TypeVar

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Base

ModelT = TypeVar("ModelT", bound=Base)

# Largest OFFSET both SQLite and PostgreSQL accept (signed 64-bit)
MAX_SQL_OFFSET = 2**63 - 1


async def fetch_page(
    session: AsyncSession,
    model: Type[ModelT],
    page: int,
    page_size: int,
) -> Sequence[ModelT]:
    """Return one page of ``model`` rows in primary-key order.

    A page starting beyond the largest representable offset is empty.
    """
    offset = (page - 1) * page_size
    if offset > MAX_SQL_OFFSET:
        return []
    stmt = (
        select(model)
        .order_by(model.id)
        .offset(offset)
        .limit(page_size)
    )
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_or_404(session: AsyncSession, model: Type[ModelT], item_id: int) -> ModelT:
    """Load a row by primary key or answer 404."""
    item = await session.get(model, item_id)
    if item is None:
        raise HTTPException(
            status_code=404, detail=f"{model.__name__} {item_id} not found"
        )
    return item
