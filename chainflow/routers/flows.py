"""
chainflow/routers/flows.py
--------------------------
Wires a ``Flow`` into aiogram:
• "/<command>" – start the flow for the sender
• "/cancel"    – drop the sender's position
• any message from a sender with a position – ``flow.process``

Include the returned router in your ``Dispatcher`` like any other.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from aiogram import Router
from aiogram.filters import BaseFilter, Command
from aiogram.types import Message

from ..errors import ChainEmptyError
from ..flow import Flow
from ..transport import recipient_key

logger = logging.getLogger(__name__)


class Tracked(BaseFilter):
    """Pass only messages whose sender currently has a position in ``flow``."""

    def __init__(self, flow: Flow):
        self.flow = flow

    async def __call__(self, message: Message) -> bool:
        if message.from_user is None:
            return False
        return recipient_key(message.from_user) in self.flow.positions


def flow_router(
    flow: Flow,
    *,
    command: str = "start",
    greeting: str = "Let's begin.",
    cancel_command: Optional[str] = "cancel",
    cancelled_text: str = "Cancelled.",
    rejected_text: Optional[str] = None,
    **start_options: Any,
) -> Router:
    router = Router(name=f"flow:{flow.flow_id}")

    # -------------------------------------------------------------------------
    # Start
    # -------------------------------------------------------------------------

    @router.message(Command(command))
    async def start_flow(message: Message):
        if message.from_user is None:
            return
        try:
            await flow.start(message.from_user, greeting, **start_options)
        except ChainEmptyError:
            logger.error("Flow %s has no nodes, /%s ignored", flow.flow_id, command)
            await message.answer("❌ This conversation is not available yet.")

    # -------------------------------------------------------------------------
    # Cancel
    # -------------------------------------------------------------------------

    if cancel_command:

        @router.message(Command(cancel_command), Tracked(flow))
        async def cancel_flow(message: Message):
            flow.delete_position(message.from_user)
            logger.info("User %s left flow %s", message.from_user.id, flow.flow_id)
            await message.answer(cancelled_text)

    # -------------------------------------------------------------------------
    # Every other message
    # -------------------------------------------------------------------------

    @router.message(Tracked(flow))
    async def advance_flow(message: Message):
        ended = flow.ended(message.from_user)
        if await flow.process(message):
            return
        if rejected_text and not ended:
            await message.answer(rejected_text)

    return router
