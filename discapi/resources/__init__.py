"""Catalog resource routers: singers, records and songs."""

from .records import router as records_router
from .singers import router as singers_router
from .songs import router as songs_router

__all__ = ["singers_router", "records_router", "songs_router"]
