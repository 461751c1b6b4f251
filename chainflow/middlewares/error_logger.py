import logging
from aiogram import BaseMiddleware
logger = logging.getLogger(__name__)

class ErrorLogger(BaseMiddleware):
    """Log anything an endpoint raises, then let the dispatcher see it."""

    async def __call__(self, handler, event, data):
        try:
            return await handler(event, data)
        except Exception as exc:      # noqa: BLE001
            user = getattr(getattr(event, "from_user", None), "id", None)
            logger.exception("Unhandled error for %s: %s", user, exc)
            raise
