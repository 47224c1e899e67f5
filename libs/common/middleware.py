"""Observability middleware for the events API.

Provides:
- Request ID generation and propagation
- Request/response timing
- Request lifecycle logging, with analytics beacons demoted to DEBUG

Usage:
    from libs.common.middleware import add_observability_middleware

    app = FastAPI()
    add_observability_middleware(app)
"""
import time
from typing import Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from libs.common.logging import (
    clear_request_context,
    configure_logging,
    get_logger,
    set_request_context,
)

logger = get_logger(__name__)

# Paths that are never logged on success.
QUIET_PATHS = ("/health",)
# Fire-and-forget analytics calls arrive on every page view.
BEACON_PREFIX = "/api/v1/track"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Sets request context for tracing and logs the request lifecycle.

    - Generates or propagates the X-Request-ID header
    - Logs completion with status code and duration
    - Clears context after the request completes
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = set_request_context(
            request_id=request.headers.get("X-Request-ID"),
            path=request.url.path,
            method=request.method,
        )
        path = request.url.path
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)

            if path not in QUIET_PATHS:
                fields = {
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                }
                if response.status_code >= 400:
                    logger.warning(
                        "Request completed", extra={"extra_fields": fields}
                    )
                elif path.startswith(BEACON_PREFIX):
                    logger.debug("Beacon recorded", extra={"extra_fields": fields})
                else:
                    logger.info("Request completed", extra={"extra_fields": fields})

            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            logger.exception(
                "Request failed with unhandled exception",
                extra={"extra_fields": {"error": str(e), "duration_ms": duration_ms}},
            )
            raise

        finally:
            clear_request_context()


def add_observability_middleware(app: FastAPI) -> None:
    """
    Configure logging and add the request context middleware to an app.
    """
    configure_logging()
    app.add_middleware(RequestContextMiddleware)
    logger.info("Observability middleware initialized")
