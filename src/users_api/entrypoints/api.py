from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from users_api.adapters.store import DocumentStore, StoreTimeoutError, StoreUnavailableError
from users_api.entrypoints.routers import users
from users_api.services.config import Settings, get_settings
from users_api.services.log import configure_logging

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Bienvenido a la API de usuarios"


def build_store(settings: Settings) -> DocumentStore:
    return DocumentStore(
        settings.MONGO_URI,
        settings.USERS_API_DB_NAME,
        settings.USERS_API_COLLECTION,
        operation_timeout=settings.USERS_API_STORE_TIMEOUT,
        retry_attempts=settings.USERS_API_RETRY_ATTEMPTS,
        server_selection_timeout_ms=settings.USERS_API_SERVER_SELECTION_TIMEOUT_MS,
        max_pool_size=settings.USERS_API_MAX_POOL_SIZE,
    )


class API(FastAPI):
    """One stateless service instance; the only shared resource is the store client pool."""

    def __init__(self, settings: Settings, store: DocumentStore, client: Optional[Any] = None) -> None:
        @asynccontextmanager
        async def lifespan(app: FastAPI) -> AsyncIterator[None]:
            store.connect(client)
            try:
                yield
            finally:
                await store.close()

        super().__init__(title="Users API", lifespan=lifespan)
        self.state.settings = settings
        self.state.store = store

        self.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.USERS_API_CORS_ORIGINS),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        @self.exception_handler(StoreTimeoutError)
        async def store_timeout(request: Request, error: StoreTimeoutError) -> JSONResponse:
            logger.error("%s %s timed out: %s", request.method, request.url.path, error)
            return JSONResponse(status_code=status.HTTP_504_GATEWAY_TIMEOUT, content={"detail": str(error)})

        @self.exception_handler(StoreUnavailableError)
        async def store_unavailable(request: Request, error: StoreUnavailableError) -> JSONResponse:
            logger.error("%s %s failed: %s", request.method, request.url.path, error)
            return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(error)})

        @self.get("/")
        async def root() -> str:
            return WELCOME_MESSAGE

        @self.get("/health")
        async def health() -> dict[str, str]:
            return {"status": "ok"}

        @self.get("/ready")
        async def ready() -> dict[str, str]:
            await store.ping()
            return {"status": "ok"}


def create_app(settings: Optional[Settings] = None, client: Optional[Any] = None) -> API:
    settings = settings or get_settings()
    configure_logging(settings.USERS_API_LOG_LEVEL)
    app = API(settings, build_store(settings), client=client)
    app.include_router(users.router, tags=["users"])
    return app
