"""
chainflow/middlewares/serialize.py
----------------------------------
Per‑recipient ordering for ``Flow.process``. aiogram may handle several
updates from one user at once; this middleware makes them take turns while
updates from different users still run side by side.
"""
from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware

from ..transport import recipient_key


class SerializeByRecipient(BaseMiddleware):
    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._waiting: Dict[str, int] = {}

    async def __call__(
        self,
        handler: Callable[[Any, Dict[str, Any]], Awaitable[Any]],
        event: Any,
        data: Dict[str, Any],
    ) -> Any:
        user = getattr(event, "from_user", None)
        if user is None:
            return await handler(event, data)

        key = recipient_key(user)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiting[key] = self._waiting.get(key, 0) + 1
        try:
            async with lock:
                return await handler(event, data)
        finally:
            self._waiting[key] -= 1
            if not self._waiting[key]:
                # Nobody else holds or waits for this lock
                del self._waiting[key]
                self._locks.pop(key, None)

    def __len__(self) -> int:
        return len(self._locks)
