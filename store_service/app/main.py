from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from common.logger import setup_logger
from common.middleware.request_trace import RequestTraceMiddleware
from common.mongo.client import close_client

from .api.health import router as health_router
from .api.v1 import api_router
from .exceptions import StoreServiceError
from .notifications import shutdown_notifier


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover - framework hook
    yield
    shutdown_notifier()
    close_client()


async def handle_store_service_error(
    request: Request, exc: StoreServiceError
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": {"code": exc.code, "message": exc.message}},
    )


async def handle_store_unavailable(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.error("store operation failed: %s", exc)
    return JSONResponse(
        status_code=503,
        content={
            "detail": {
                "code": "internal_unavailable",
                "message": "storage temporarily unavailable",
            }
        },
    )


def create_app() -> FastAPI:
    setup_logger()
    app = FastAPI(
        title="Store Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    # 공통 Request/Span ID 로그 미들웨어
    app.add_middleware(RequestTraceMiddleware)

    app.add_exception_handler(StoreServiceError, handle_store_service_error)
    app.add_exception_handler(PyMongoError, handle_store_unavailable)

    app.include_router(health_router, tags=["health"])
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


def main() -> None:
    import uvicorn

    port = int(os.getenv("STORE_SERVICE_PORT", "8002"))
    uvicorn.run(
        "store_service.app.main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
        access_log=False,
    )


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    main()
