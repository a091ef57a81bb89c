"""Request logging middleware."""

import logging

from starlette.requests import Request
from starlette.responses import Response

from exact_routing.core.middleware import Handler

logger = logging.getLogger(__name__)


def logging_middleware(next_handler: Handler) -> Handler:
    """Log the client address, method and URL, then always delegate."""

    async def log_request(request: Request) -> Response:
        client = f"{request.client.host}:{request.client.port}" if request.client else "-"
        logger.info(
            "Request received",
            extra={"client": client, "method": request.method, "url": str(request.url)},
        )
        return await next_handler(request)

    return log_request
