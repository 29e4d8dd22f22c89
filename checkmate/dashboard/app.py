#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Checkmate Web Dashboard - FastAPI Application
HTTP API over the checkmate service: daily records, reports, fines and admin
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from checkmate import __version__
from checkmate.config import CheckmateConfig, get_config
from checkmate.core.models import ValidationError
from checkmate.dashboard.api import admin, fines, history, participants, reports, state
from checkmate.dashboard.models import HealthCheck
from checkmate.services.admin import AdminAuthError, AdminRequiredError
from checkmate.services.checkmate_service import CheckmateService
from checkmate.services.scheduler import (
    create_scheduler,
    schedule_daily_rollover,
    start_scheduler,
    stop_scheduler,
)
from checkmate.utils.logger import configure_logging

logger = logging.getLogger(__name__)

def create_app(service: Optional[CheckmateService] = None, config: Optional[CheckmateConfig] = None,
               enable_scheduler: bool = True) -> FastAPI:
    """Build the application; tests pass their own service and config"""
    config = config or get_config()
    service = service or CheckmateService.from_config(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info("🚀 Starting Checkmate dashboard...")
        app.state.started_at = time.time()
        await service.initialize()

        scheduler = None
        if enable_scheduler:
            scheduler = create_scheduler(config.sync.timezone)
            schedule_daily_rollover(scheduler, service.rollover)
            start_scheduler(scheduler)
            logger.info("⏰ Daily rollover scheduled at 00:00")

        logger.info(f"🌐 Dashboard available at http://{config.server.host}:{config.server.port}")
        yield

        # Shutdown
        logger.info("🛑 Stopping Checkmate dashboard...")
        if scheduler is not None:
            stop_scheduler(scheduler)
        await service.shutdown()

    app = FastAPI(
        title="Checkmate",
        description="Group accountability tracker: mate calls, habit checks and fines",
        version=__version__,
        docs_url="/api/docs" if config.server.debug_mode else None,
        redoc_url="/api/redoc" if config.server.debug_mode else None,
        lifespan=lifespan,
    )
    app.state.service = service
    app.state.started_at = time.time()

    # ===== MIDDLEWARE =====

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        if process_time > 1.0:
            logger.warning(f"🐌 Slow request: {request.method} {request.url.path} took {process_time:.2f}s")
        return response

    # ===== ERROR HANDLERS =====

    @app.exception_handler(IndexError)
    async def not_found_handler(request: Request, exc: IndexError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": str(exc)})

    @app.exception_handler(AdminAuthError)
    async def auth_handler(request: Request, exc: AdminAuthError):
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": str(exc)})

    @app.exception_handler(AdminRequiredError)
    async def admin_required_handler(request: Request, exc: AdminRequiredError):
        return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)})

    # ===== ROUTES =====

    app.include_router(state.router, prefix="/api/state", tags=["state"])
    app.include_router(history.router, prefix="/api/history", tags=["history"])
    app.include_router(participants.router, prefix="/api/participants", tags=["participants"])
    app.include_router(reports.router, prefix="/api/reports", tags=["reports"])
    app.include_router(fines.router, prefix="/api/fines", tags=["fines"])
    app.include_router(admin.router, prefix="/api/admin", tags=["admin"])

    @app.get("/health", response_model=HealthCheck)
    async def health_check():
        return HealthCheck(
            status="healthy",
            service="checkmate",
            version=__version__,
            timestamp=time.time(),
            data={
                "saveStatus": service.sync.status.value,
                "store": service.sync.store.name,
                "uptime_seconds": time.time() - app.state.started_at,
            },
        )

    return app

def main():
    config = get_config()
    configure_logging(config)
    uvicorn.run(
        create_app(config=config),
        host=config.server.host,
        port=config.server.port,
        log_config=None,
    )

if __name__ == "__main__":
    main()
