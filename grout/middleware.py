"""Request tracking middleware and per-client rate limiting."""

import uuid

from fastapi import Request
from loguru import logger
from slowapi.util import get_remote_address

from .exceptions import RateLimitExceeded


async def add_request_id(request: Request, call_next):
    """Add request ID to context for tracking.

    Args:
        request: Incoming FastAPI request.
        call_next: Next middleware or handler in chain.

    Returns:
        Response with X-Request-ID header.

    """
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    request.state.request_id = request_id

    with logger.contextualize(request_id=request_id):
        logger.debug(
            "Request started",
            method=request.method,
            path=request.url.path,
            client=request.client.host if request.client else None,
        )

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        logger.debug(
            "Request completed",
            status_code=response.status_code,
        )

        return response


def client_identity(request: Request) -> str:
    """Identify the caller for rate limiting.

    Prefers the first entry of ``X-Forwarded-For``, then ``X-Real-IP``, then
    the peer address of the connection.
    """
    forwarded = request.headers.get("X-Forwarded-For", "")
    first = forwarded.split(",")[0].strip()
    if first:
        return first
    real_ip = request.headers.get("X-Real-IP", "").strip()
    if real_ip:
        return real_ip
    return get_remote_address(request)


def enforce_rate_limit(request: Request) -> None:
    """Dependency that spends one token of the caller's budget.

    Raises:
        RateLimitExceeded: If the caller has no tokens left.
    """
    client_id = client_identity(request)
    if not request.app.state.limiter.admit(client_id):
        raise RateLimitExceeded(client_id)
