"""
chainflow/entry.py
------------------
Bootstrap script: builds a small feedback flow, wires it into a dispatcher
and starts polling. Real bots build their own flows the same way.
"""
from __future__ import annotations

import asyncio

from aiogram import Bot, Dispatcher, F, html
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.types import Message

from chainflow.config import settings
from chainflow.flow import Flow
from chainflow.logger import configure_logging, logger
from chainflow.middlewares import ErrorLogger, SerializeByRecipient
from chainflow.node import ENDED, UNCHANGED, Continue, Node
from chainflow.routers import flow_router

# ----------------------------------------------------------------------------
# Demo flow
# ----------------------------------------------------------------------------


async def got_name(node: Node, message: Message):
    await message.answer(f"Thanks, {html.bold(html.quote(message.text))}! Rate us from 1 to 5.")
    return Continue(node.next)


async def got_rating(node: Node, message: Message):
    if not 1 <= int(message.text) <= 5:
        await message.answer("Please pick a number from 1 to 5.")
        return UNCHANGED
    logger.info("User %s rated %s", message.from_user.id, message.text)
    await message.answer("🙏 Feedback saved.")
    return ENDED


async def retry(node: Node, message: Message):
    await message.answer("I didn't get that, try again.")
    return Continue(node)


def build_feedback_flow(bot: Bot) -> Flow:
    return (
        Flow("feedback", bot)
        .then("name", got_name, validator=F.text)
        .then("rating", got_rating, validator=F.text.regexp(r"^\d+$"))
        .default_handler(retry)
    )


# ----------------------------------------------------------------------------
# Startup
# ----------------------------------------------------------------------------


def build_dispatcher(bot: Bot) -> Dispatcher:
    dp = Dispatcher()
    if settings.SERIALIZE_UPDATES:
        dp.message.outer_middleware(SerializeByRecipient())
    dp.message.middleware(ErrorLogger())
    dp.include_router(
        flow_router(
            build_feedback_flow(bot),
            command="feedback",
            greeting="Hi! What's your name?",
        )
    )
    return dp


async def main() -> None:
    configure_logging()
    settings.validate()

    bot = Bot(
        settings.BOT_TOKEN,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    dp = build_dispatcher(bot)
    try:
        await dp.start_polling(bot)
    finally:
        logger.info("Bot stopped")


if __name__ == "__main__":
    asyncio.run(main())
