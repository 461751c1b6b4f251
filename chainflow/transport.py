"""
chainflow/transport.py
----------------------
The little we need from the messaging client. Anything shaped like
``aiogram.Bot`` works as a transport; recipients are aiogram ``User`` /
``Chat`` objects or raw ids.
"""
from __future__ import annotations

from typing import Any, Optional, Protocol, Union

from .errors import UnknownRecipientError


class Transport(Protocol):
    async def send_message(self, chat_id: Union[int, str], text: str, **kwargs: Any) -> Any:
        ...


def recipient_id(recipient: Any) -> Union[int, str]:
    """Return the raw chat/user id for ``recipient``."""
    if isinstance(recipient, bool):
        raise UnknownRecipientError(f"not a recipient: {recipient!r}")
    if isinstance(recipient, (int, str)):
        return recipient
    rid = getattr(recipient, "id", None)
    if rid is None:
        raise UnknownRecipientError(f"cannot derive a recipient id from {recipient!r}")
    return rid


def recipient_key(recipient: Any) -> str:
    """Stable string key used by the position store."""
    return str(recipient_id(recipient))


def sender_of(message: Any) -> Optional[Any]:
    if message is None:
        return None
    return getattr(message, "from_user", None)
