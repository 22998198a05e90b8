from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from discapi.cache import MemoryCacheStore, PaginatedCollectionCache, RedisCacheStore
from discapi.config import Settings, close_redis, get_settings, init_redis, redis_is_reachable
from discapi.database import create_tables, dispose_engine, init_engine
from discapi.logging_config import configure_logging, get_logger
from discapi.resources import records_router, singers_router, songs_router

logger = get_logger(name=__name__)


async def _build_collection_cache(settings: Settings) -> PaginatedCollectionCache:
    if settings.cache_backend == "redis":
        store = RedisCacheStore(
            await init_redis(settings.redis_url, socket_timeout=settings.redis_socket_timeout)
        )
    else:
        store = MemoryCacheStore()
    cache = PaginatedCollectionCache(
        store,
        ttl=settings.cache_ttl_seconds,
        default_page=settings.default_page,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )
    if settings.cache_backend == "redis":
        # Pages left by a previous deployment may predate schema or data changes
        await cache.clear()
    logger.info(
        "Collection cache ready (backend={}, ttl={}s)",
        settings.cache_backend,
        settings.cache_ttl_seconds,
    )
    return cache


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_engine(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        await create_tables()
        app.state.collection_cache = await _build_collection_cache(settings)
        try:
            yield
        finally:
            if settings.cache_backend == "redis":
                await close_redis()
            await dispose_engine()

    app = FastAPI(title="Discography API", lifespan=lifespan)
    app.state.settings = settings
    app.state.token_roles = settings.token_roles

    # CORS Setup
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.get("/health")
    async def health():
        if settings.cache_backend == "redis" and not await redis_is_reachable():
            return JSONResponse(status_code=503, content={"status": "degraded", "cache": "redis"})
        return {"status": "ok", "cache": settings.cache_backend}

    app.include_router(singers_router)
    app.include_router(records_router)
    app.include_router(songs_router)
    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.uvicorn_host, port=settings.uvicorn_port)
