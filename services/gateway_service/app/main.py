"""FastAPI application entrypoint for the events backend.

Every business area runs in-process; the gateway mounts each area's
routers under ``/api/v1`` and owns the cross-cutting middleware.
"""

from __future__ import annotations

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

load_dotenv()

from libs.common.config import get_settings  # noqa: E402
from libs.common.error_handler import add_exception_handlers  # noqa: E402
from libs.common.middleware import add_observability_middleware  # noqa: E402
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler  # noqa: E402
from services.analytics_service.routers import track_router  # noqa: E402
from services.attendance_service.routers import checkin_router  # noqa: E402
from services.events_service.routers import events_router, rsvp_router  # noqa: E402
from services.members_service.routers import members_router  # noqa: E402
from services.subscribers_service.routers import subscribers_router  # noqa: E402

API_PREFIX = "/api/v1"


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = get_settings()

    app = FastAPI(
        title="Missouri Young Democrats Events API",
        version="0.1.0",
        description="Events, RSVPs, check-in, mailing list and visitor analytics.",
    )

    # Add rate limiter state to app
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability (structured logging + request tracing)
    add_observability_middleware(app)

    # Add global exception handlers for consistent error responses
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple readiness endpoint."""
        return {"status": "ok"}

    for router in (
        checkin_router,
        rsvp_router,
        events_router,
        members_router,
        subscribers_router,
        track_router,
    ):
        app.include_router(router, prefix=API_PREFIX)

    return app


app = create_app()
