"""FastAPI application factory"""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from minuta_drafter.api.routes import drafting
from minuta_drafter.api.session_store import SessionStore
from minuta_drafter.utils.config import get_settings

EVICT_INTERVAL_SECONDS = 300


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Startup: start session eviction background task
    task = asyncio.create_task(_evict_loop())
    yield
    # Shutdown: cancel eviction task
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


async def _evict_loop():
    """Periodically evict expired sessions"""
    while True:
        await asyncio.sleep(EVICT_INTERVAL_SECONDS)
        await drafting.store.evict_expired()


def create_app(store: SessionStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    if store is None:
        settings = get_settings()
        store = SessionStore(
            ttl_minutes=settings.session_ttl_minutes,
            max_sessions=settings.max_sessions,
        )
    drafting.init_store(store)

    app = FastAPI(
        title="Minuta Drafter API",
        description="Gera minutas de documentos jurídicos e analisa riscos e variações de cláusulas",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS: the browser front-end is served from another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(drafting.router)

    return app
