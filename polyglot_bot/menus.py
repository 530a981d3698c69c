from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from aiogram import Bot, html
from aiogram.exceptions import TelegramBadRequest, TelegramForbiddenError
from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from .participants import ChatParticipant
from .utils import log_if_slow

logger = logging.getLogger("polyglot_bot")

CALLBACK_PREFIX = "lang:"


@dataclass
class _PendingMenu:
    chat_id: int
    message_id: int
    future: asyncio.Future[Optional[int]]


def build_keyboard(options: Sequence[str], back: str) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    for i, name in enumerate(options):
        builder.add(InlineKeyboardButton(text=name, callback_data=f"{CALLBACK_PREFIX}{i}"))
    builder.add(InlineKeyboardButton(text=f"🔙 {back}", callback_data=f"{CALLBACK_PREFIX}{len(options)}"))
    builder.adjust(1)
    return builder.as_markup()


def parse_callback(data: Optional[str]) -> Optional[int]:
    if not data or not data.startswith(CALLBACK_PREFIX):
        return None
    try:
        return int(data[len(CALLBACK_PREFIX):])
    except ValueError:
        return None


class InlineMenuPresenter:
    """Shows language menus as inline keyboards and waits for the tap.

    One menu per user is pending at a time; opening a new one dismisses the
    previous. Every pending menu resolves: a choice, a dismissal or the
    timeout.
    """

    def __init__(self, bot: Bot, timeout: float = 120.0) -> None:
        self.bot = bot
        self.timeout = timeout
        self._pending: dict[int, _PendingMenu] = {}

    def is_pending(self, user_id: int) -> bool:
        return user_id in self._pending

    async def ask(
        self, entity: ChatParticipant, title: str, body: str, options: Sequence[str], back: str
    ) -> Optional[int]:
        self.dismiss(entity.user_id)
        try:
            msg = await self.bot.send_message(
                entity.chat_id,
                f"{html.bold(html.quote(title))}\n\n{html.quote(body)}",
                reply_markup=build_keyboard(options, back)
            )
        except TelegramForbiddenError as e:
            logger.warning("cannot reach %s: %s", entity.user_id, e)
            entity.active = False
            return None

        fut: asyncio.Future[Optional[int]] = asyncio.get_running_loop().create_future()
        pending = _PendingMenu(chat_id=entity.chat_id, message_id=msg.message_id, future=fut)
        # Another ask may have registered a menu while send_message was awaited.
        self.dismiss(entity.user_id)
        self._pending[entity.user_id] = pending
        try:
            return await asyncio.wait_for(fut, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.info("language menu for %s expired", entity.user_id)
            return None
        finally:
            if self._pending.get(entity.user_id) is pending:
                del self._pending[entity.user_id]
            await self._close(pending)

    def resolve(self, user_id: int, message_id: int, index: int) -> bool:
        pending = self._pending.get(user_id)
        if pending is None or pending.message_id != message_id or pending.future.done():
            return False
        pending.future.set_result(index)
        return True

    def dismiss(self, user_id: int) -> None:
        pending = self._pending.pop(user_id, None)
        if pending is not None and not pending.future.done():
            pending.future.set_result(None)

    @log_if_slow()
    async def notify(self, entity: ChatParticipant, text: str) -> None:
        try:
            await self.bot.send_message(entity.chat_id, html.quote(text))
        except TelegramForbiddenError as e:
            logger.warning("cannot reach %s: %s", entity.user_id, e)
            entity.active = False

    async def _close(self, pending: _PendingMenu) -> None:
        try:
            await self.bot.edit_message_reply_markup(
                chat_id=pending.chat_id, message_id=pending.message_id, reply_markup=None
            )
        except (TelegramBadRequest, TelegramForbiddenError) as e:
            logger.debug("could not close menu %s: %s", pending.message_id, e)
