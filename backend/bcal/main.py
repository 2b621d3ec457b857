"""
main.py — FastAPI Application Entrypoint

Purpose:
- Initialize application services (logging, config, schema creation).
- Register exception handlers and API routers.
- Provide `app` object used by ASGI server (uvicorn / hypercorn).

This file should stay clean — no business logic here.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bcal.api.v1 import auth, calendar
from bcal.core.config import settings
from bcal.core.database import init_db
from bcal.core.exceptions import register_exception_handlers
from bcal.core.logging import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Authentication and calendar API",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Cookies carry the tokens, so the frontend origin must be explicit
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(calendar.router)

    @app.get("/")
    def root():
        return {"status": "ok", "message": f"{settings.APP_NAME} backend running"}

    return app


app = create_app()
