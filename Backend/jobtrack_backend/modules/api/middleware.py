import asyncio
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

READ_METHODS = {"GET", "HEAD", "OPTIONS"}


class WriteLimitMiddleware(BaseHTTPMiddleware):
    """Limits how many mutating requests run at once.

    Record files are rewritten as a whole on every change, so two writes to
    the same file must not interleave.
    """

    def __init__(self, app, max_concurrent: int = 1):
        super().__init__(app)
        self.semaphore = asyncio.Semaphore(max_concurrent)

    async def dispatch(self, request: Request, call_next):
        if request.method in READ_METHODS:
            return await call_next(request)
        async with self.semaphore:
            logger.info(f"Processing {request.method} {request.url.path}")
            return await call_next(request)
