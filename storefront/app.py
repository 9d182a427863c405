"""
Storefront backend - application entry point

Modules:
- Menu browsing and admin menu management
- Per-user carts and hosted-payment checkout
- Order fulfilment for staff, cancellation and reconciliation for admins
- Feedback, job vacancy applications and staff records
- Live WebSocket feeds for carts, orders and the job vacancy toggle
- Audit logging

Stack: FastAPI + DuckDB + JWT
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router, realtime_router
from .config.settings import settings as default_settings
from .core.context import AppContext
from .core.error_handler import (
    application_error_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from .core.exceptions import BaseApplicationError, DatabaseError


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """Create the FastAPI app; without a context one is built from the environment settings"""
    context = context or AppContext.from_settings(default_settings)
    settings = context.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            context.store.init_database()
            print("Database initialized successfully")
        except DatabaseError as e:
            # keep serving; the store retries the connection on first use
            print(f"Database initialization failed: {e}")

        yield

        context.close()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="Storefront ordering API",
        debug=settings.debug,
        lifespan=lifespan
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(BaseApplicationError, application_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(api_router, prefix=settings.api_prefix)
    app.include_router(realtime_router, tags=["realtime"])

    @app.get("/health")
    async def health_check():
        try:
            context.store.connection
            return {
                "status": "healthy",
                "version": settings.api_version,
                "database": "connected",
                "subscribers": context.hub.subscriber_count,
            }
        except DatabaseError as e:
            return {
                "status": "unhealthy",
                "version": settings.api_version,
                "database": f"error: {e}"
            }

    @app.get("/")
    async def root():
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "description": "Storefront ordering API"
        }

    return app


app = create_app()
