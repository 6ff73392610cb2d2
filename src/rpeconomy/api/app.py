"""FastAPI application wiring for the economy ledger."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rpeconomy.api import routes
from rpeconomy.api.runtime import ApiState, build_state
from rpeconomy.config import get_settings
from rpeconomy.domain.errors import LedgerError


def create_app(*, state_factory: Callable[[], ApiState] = build_state) -> FastAPI:
    """Instantiate the FastAPI application with routing and lifecycle hooks."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state = state_factory()
        app.state.api_state = state
        try:
            yield
        finally:
            await state.shutdown()

    app = FastAPI(title="RP Economy API", version="0.1.0", lifespan=lifespan)
    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LedgerError)
    async def handle_ledger_error(request: Request, exc: LedgerError) -> JSONResponse:
        status_code, detail = routes.ledger_error_detail(exc)
        return JSONResponse(status_code=status_code, content={"detail": detail})

    app.include_router(routes.router)
    return app


app = create_app()
