"""Back-office FastAPI application.

JSON API over customers, products and orders. Every request runs inside the
backoffice domain context with the method, path and a request id bound to
the log context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from backoffice.api import (
    contract_router,
    customer_router,
    event_router,
    order_router,
    product_router,
    register_error_handlers,
)
from backoffice.config import get_settings
from backoffice.domain import backoffice
from backoffice.events import get_publisher, reset_publisher
from backoffice.utils.logging import bind_request_context, clear_request_context
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# Initialized at import so every uvicorn worker has a ready domain.
backoffice.init()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    settings = get_settings()
    logger.info(
        "Back office starting",
        storage=settings.storage_backend,
        publisher=settings.event_publisher,
        attachments=settings.attachment_adapter,
        contracts=settings.contract_share,
    )
    yield
    await get_publisher().close()
    reset_publisher()


app = FastAPI(
    title="Back Office API",
    description="Customers, products and orders over a partitioned store",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    bind_request_context(
        request_id=request.headers.get("x-request-id") or uuid4().hex,
        method=request.method,
        path=request.url.path,
    )
    try:
        with backoffice.domain_context():
            return await call_next(request)
    finally:
        clear_request_context()


for router in (customer_router, product_router, order_router, contract_router, event_router):
    app.include_router(router)
register_error_handlers(app)


@app.get("/health")
async def health() -> dict[str, str]:
    settings = get_settings()
    return {
        "status": "ok",
        "domain": backoffice.name,
        "storage": settings.storage_backend,
        "publisher": settings.event_publisher,
        "attachments": settings.attachment_adapter,
        "contracts": settings.contract_share,
    }
