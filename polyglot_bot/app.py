from __future__ import annotations
import asyncio
import logging
from logging.handlers import RotatingFileHandler

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties

from .bootstrap import load_modules
from .handlers import router as base_router, register_common
from .i18n import build_config
from .language import LanguageSystem
from .menus import InlineMenuPresenter
from .participants import ParticipantRegistry
from .settings import Settings
from .storage import ScopeStorage


def _setup_logging(level: str) -> None:
    logger = logging.getLogger("polyglot_bot")
    logger.setLevel(level)
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    fh = RotatingFileHandler("logs/app.log", maxBytes=5_000_000, backupCount=3, encoding="utf-8")
    fh.setFormatter(fmt)
    logger.addHandler(ch)
    logger.addHandler(fh)


def run() -> None:
    settings = Settings.load()
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    (settings.data_dir.parent / "logs").mkdir(parents=True, exist_ok=True)

    _setup_logging(settings.log_level)
    logger = logging.getLogger("polyglot_bot")
    logger.info("starting bot")

    storage = ScopeStorage(settings.data_dir)
    participants = ParticipantRegistry(storage)
    bot = Bot(settings.bot_token, default=DefaultBotProperties(parse_mode="HTML"))
    presenter = InlineMenuPresenter(bot, timeout=settings.menu_timeout)
    language = LanguageSystem(build_config(settings.locale_default), storage, presenter)

    load_modules([
        ("language system", lambda: language.initialize(base_router, participants)),
        ("common commands", lambda: register_common(base_router, language, participants)),
    ])

    dp = Dispatcher()
    dp.include_router(base_router)

    asyncio.run(_poll(bot, dp))


async def _poll(bot: Bot, dp: Dispatcher) -> None:
    try:
        await bot.delete_webhook(drop_pending_updates=True)
        await dp.start_polling(bot)
    finally:
        await bot.session.close()
