from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from time import perf_counter
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from budgetsync.api.dependencies import build_context
from budgetsync.api.error_handlers import register_error_handlers
from budgetsync.api.routers.health import router as health_router
from budgetsync.api.routers.imports import router as imports_router
from budgetsync.api.routers.months import router as months_router
from budgetsync.api.routers.sync import router as sync_router
from budgetsync.domain.ports.key_value_store import KeyValueStorePort
from budgetsync.logger import get_logger, reset_request_id, set_request_id, setup_logging
from budgetsync.settings import Settings, load_settings


def create_app(settings: Settings | None = None, *, store: KeyValueStorePort | None = None) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        app.state.ctx.ledger.close()

    app = FastAPI(title="budgetsync API", version="1.0.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.ctx = build_context(settings, store=store)

    logger = get_logger()
    context_id = app.state.ctx.ledger.context_id

    @app.middleware("http")
    async def request_log_middleware(request: Request, call_next):
        request_id = (
            str(request.headers.get("x-request-id", "") or "").strip()
            or uuid4().hex[:16]
        )
        token = set_request_id(request_id)
        started = perf_counter()
        req_logger = logger.bind(
            request_id=request_id,
            context_id=context_id,
            method=request.method,
            path=request.url.path,
        )
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (perf_counter() - started) * 1000
            req_logger.bind(status_code=500).opt(exception=True).error(
                f"request failed duration_ms={duration_ms:.2f}"
            )
            reset_request_id(token)
            raise

        duration_ms = (perf_counter() - started) * 1000
        response.headers["X-Request-Id"] = request_id
        status_code = int(response.status_code)
        message = f"request completed status={status_code} duration_ms={duration_ms:.2f}"
        if status_code >= 500:
            req_logger.bind(status_code=status_code).error(message)
        elif status_code >= 400:
            req_logger.bind(status_code=status_code).warning(message)
        else:
            req_logger.bind(status_code=status_code).info(message)
        reset_request_id(token)
        return response

    register_error_handlers(app)

    prefix = "/api/v1"
    app.include_router(health_router, prefix=prefix)
    app.include_router(months_router, prefix=prefix)
    app.include_router(imports_router, prefix=prefix)
    app.include_router(sync_router, prefix=prefix)

    @app.api_route("/api/v1/{rest:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
    async def api_v1_not_found(rest: str) -> Response:
        raise HTTPException(status_code=404, detail=f"route not found: /api/v1/{rest}")

    return app


def serve(host: str = "127.0.0.1", port: int = 8000) -> None:
    settings: Settings = load_settings()
    setup_logging(settings)
    app = create_app(settings)
    get_logger().info(f"budgetsync API -> http://{host}:{port}")
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


def main() -> None:
    settings = load_settings()
    serve(host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
