"""
FastAPI application for the SciQuest Heroes auth and profile pages.

Run with `uvicorn sciquest.web.main:app`.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from .config import Settings, ensure_secure_config_on_startup, settings
from .log_config import configure_logging
from .routes import auth_router, health_router, profile_router, student_signup_router
from .security import SecurityHeadersMiddleware

logger = structlog.get_logger()

STATIC_DIR = Path(__file__).parent / "static"


def create_app(cfg: Optional[Settings] = None) -> FastAPI:
    cfg = cfg or settings
    configure_logging(cfg.LOG_LEVEL, json_logs=cfg.is_production)
    ensure_secure_config_on_startup(cfg)

    application = FastAPI(
        title="SciQuest Heroes Auth",
        description="Sign-up, sign-in and profile pages backed by Supabase",
        version="1.0.0",
    )
    application.add_middleware(SecurityHeadersMiddleware)
    application.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    application.include_router(health_router)
    application.include_router(auth_router)
    application.include_router(student_signup_router)
    application.include_router(profile_router)

    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    @application.get("/", include_in_schema=False)
    def root():
        return RedirectResponse(url="/auth", status_code=303)

    logger.info("app_created", environment=cfg.ENVIRONMENT, site_url=cfg.SITE_URL)
    return application


app = create_app()
