"""Async HTTP client for the outbound CRM integration.

The CRM owns SMS delivery. Calls are best effort: callers get a boolean and
the request never fails because the CRM is unreachable.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from libs.common.config import get_settings
from libs.common.logging import get_logger, get_request_id

logger = get_logger(__name__)

# Default timeout for CRM calls (seconds).
_DEFAULT_TIMEOUT = 10.0


async def crm_request(
    *,
    method: str,
    path: str,
    json: Any = None,
    params: Optional[dict] = None,
    timeout: float = _DEFAULT_TIMEOUT,
) -> httpx.Response:
    """Make an authenticated call to the CRM API.

    Args:
        method: HTTP method (GET, POST, …).
        path: URL path below CRM_URL (e.g. "/send-checkin-sms").
        json: Optional JSON body.
        params: Optional query parameters.
        timeout: Request timeout in seconds.

    Raises:
        httpx.RequestError on connection failures.
    """
    settings = get_settings()
    url = f"{settings.CRM_URL.rstrip('/')}{path}"
    headers = {}
    if settings.CRM_API_KEY:
        headers["Authorization"] = f"Bearer {settings.CRM_API_KEY}"
    request_id = get_request_id()
    if request_id:
        headers["X-Request-ID"] = request_id

    async with httpx.AsyncClient(timeout=timeout) as client:
        response = await client.request(
            method,
            url,
            headers=headers,
            json=json,
            params=params,
        )
    return response


async def send_checkin_sms(phone: str, event_id: str, checkin_url: str) -> bool:
    """Ask the CRM to text a check-in link to a phone we could not match.

    Returns True when the CRM accepted the request.
    """
    try:
        response = await crm_request(
            method="POST",
            path="/send-checkin-sms",
            json={"phone": phone, "eventId": event_id, "checkinUrl": checkin_url},
        )
    except httpx.HTTPError as e:
        logger.warning(
            "Check-in SMS request failed",
            extra={"extra_fields": {"event_id": event_id, "error": str(e)}},
        )
        return False

    if response.is_success:
        return True

    logger.warning(
        "CRM rejected check-in SMS",
        extra={
            "extra_fields": {
                "event_id": event_id,
                "status_code": response.status_code,
            }
        },
    )
    return False
