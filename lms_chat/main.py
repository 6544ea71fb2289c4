from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import logging
import time

from .core.config import Settings, settings as default_settings
from .core.database import Database, create_database
from .core.exceptions import general_exception_handler
from .core.logging import setup_logging
from .core.migrations import run_migrations
from .services.push_service import PushProvider, create_push_dispatcher
from .services.realtime import ChannelManager, RealtimeRelay

from .routers import health, users, files, chats, messages, websocket_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    push_provider: Optional[PushProvider] = None,
) -> FastAPI:
    """Build the app; collaborators can be swapped in for tests"""
    settings = settings or default_settings
    database = database or create_database(settings)
    channels = ChannelManager()
    push = create_push_dispatcher(settings, push_provider)
    relay = RealtimeRelay(database, channels, push, settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting LMS chat server")
        await run_migrations(database.engine)
        logger.info("Schema up to date")

        yield

        logger.info("Shutting down LMS chat server")
        await push.drain()
        await database.dispose()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="LMS Chat Server",
        description="Student/instructor messaging with real-time relay and push notifications",
        version="1.0.0",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.database = database
    app.state.channels = channels
    app.state.push = push
    app.state.relay = relay

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        logger.info(f"{request.method} {request.url.path} - {process_time:.3f}s")
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=3600,
    )

    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(files.router)
    app.include_router(chats.router)
    app.include_router(messages.router)
    app.include_router(websocket_router.router)

    return app


setup_logging(default_settings)
app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=default_settings.port)
