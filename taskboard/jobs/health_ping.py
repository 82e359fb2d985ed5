"""Keep-alive health ping: one randomly chosen GET request against the API.

Fire-and-forget. There is no retry and no state between runs; the outcome is
logged and returned so callers (the script, the scheduler) can report it.
"""

import logging
import random
from datetime import UTC, datetime

import httpx
from pydantic import BaseModel, Field

from taskboard.core.config import constants, settings


logger = logging.getLogger(__name__)


class PingRequest(BaseModel):
    """One endpoint the health ping may hit."""

    endpoint: str
    method: str = "GET"
    description: str


class PingResult(BaseModel):
    """Outcome of a single health ping."""

    endpoint: str
    success: bool = Field(..., description="True when the API answered with a 2xx status")
    status_code: int | None = Field(None, description="HTTP status, None when no response arrived")
    error: str | None = Field(None, description="Transport error message if the request failed")


RANDOM_REQUESTS: list[PingRequest] = [
    PingRequest(endpoint="/health", description="Health check"),
    PingRequest(endpoint="/tasks/stats/overview", description="Get task statistics"),
    PingRequest(endpoint="/tasks", description="Get all tasks"),
    PingRequest(endpoint="/tasks?status=PENDING", description="Get pending tasks"),
    PingRequest(endpoint="/tasks?priority=HIGH", description="Get high priority tasks"),
]


async def send_random_request(
    base_url: str | None = None,
    *,
    timeout: float | None = None,
    rng: random.Random | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> PingResult:
    """Send one randomly selected request to the API.

    Args:
        base_url: API base URL including the ``/api`` prefix; defaults to settings
        timeout: Request timeout in seconds; defaults to settings
        rng: Random source used to pick the endpoint
        transport: Optional httpx transport (tests)

    Returns:
        PingResult describing what happened. Never raises for HTTP or network failures.
    """
    request_config = (rng or random).choice(RANDOM_REQUESTS)
    url = f"{(base_url or settings.api_base_url).rstrip('/')}{request_config.endpoint}"
    headers = {"Content-Type": "application/json", "User-Agent": constants.HEALTH_PING_USER_AGENT}

    logger.info(
        "[%s] Sending %s request to: %s (%s)",
        datetime.now(UTC).isoformat(),
        request_config.method,
        request_config.endpoint,
        request_config.description,
    )

    try:
        async with httpx.AsyncClient(
            timeout=timeout or settings.health_ping_timeout_seconds, transport=transport
        ) as client:
            response = await client.request(request_config.method, url, headers=headers)
    except httpx.HTTPError as e:
        logger.error("Error sending request to %s: %s", request_config.endpoint, e)
        return PingResult(endpoint=request_config.endpoint, success=False, error=str(e) or type(e).__name__)

    if response.is_success:
        logger.info("Success: %s %s", response.status_code, response.reason_phrase)
    else:
        logger.warning("Warning: %s %s", response.status_code, response.reason_phrase)

    return PingResult(
        endpoint=request_config.endpoint,
        success=response.is_success,
        status_code=response.status_code,
    )
