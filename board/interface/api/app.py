"""FastAPI application."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from dishka import AsyncContainer
from fastapi import FastAPI

from board.domain.service import HasChildUpdater
from board.interface.api.routes import comments, health
from board.util.di.container import create_container, setup_di
from board.util.observability import instrument_fastapi


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container; the production container when omitted
    """
    container = container or create_container()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        # Let scheduled has-child runs finish before their stores go away
        updater = await container.get(HasChildUpdater)
        await updater.drain()
        await container.close()

    app_instance = FastAPI(
        title="Board API",
        description="Threaded comments on posts, site reviews and scam reports",
        version="0.1.0",
        lifespan=lifespan,
    )

    instrument_fastapi(app_instance)
    setup_di(app_instance, container)

    app_instance.include_router(health.router)
    for router in comments.routers:
        app_instance.include_router(router)

    return app_instance
