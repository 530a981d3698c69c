from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Optional

from aiogram import Router, types
from aiogram.enums import ChatMemberStatus
from aiogram.exceptions import TelegramBadRequest, TelegramForbiddenError
from aiogram.filters import Command

from .menus import CALLBACK_PREFIX, InlineMenuPresenter, parse_callback
from .participants import ChatParticipant, ParticipantRegistry

if TYPE_CHECKING:
    from .language import LanguageSystem

logger = logging.getLogger("polyglot_bot")

router = Router()

LANGUAGE_COMMANDS = frozenset({"/lang", "/language", "/语言"})


def is_language_command(text: Optional[str]) -> bool:
    return text is not None and text.lower() in LANGUAGE_COMMANDS


def _participant(m: types.Message, participants: ParticipantRegistry) -> Optional[ChatParticipant]:
    return participants.from_user(m.from_user, chat_id=m.chat.id) if m.from_user else None


def register_common(router: Router, system: LanguageSystem, participants: ParticipantRegistry) -> None:
    @router.message(Command("start"))
    async def start(m: types.Message) -> None:
        await m.answer(system.translate(_participant(m, participants), "welcome"))

    @router.message(Command("help"))
    async def help_(m: types.Message) -> None:
        await m.answer(system.translate(_participant(m, participants), "help"))


def register_language_command(router: Router, system: LanguageSystem, participants: ParticipantRegistry) -> None:
    """Wire /lang, its menu callbacks and participant invalidation into ``router``."""
    presenter = system.selector.presenter

    @router.message(lambda m: is_language_command(m.text))
    async def language_command(m: types.Message) -> None:
        # Handling the update here keeps the command away from every later handler.
        try:
            await m.delete()
        except (TelegramBadRequest, TelegramForbiddenError) as e:
            logger.debug("could not delete /lang message %s: %s", m.message_id, e)
        await system.show_language_selector(_participant(m, participants))

    @router.callback_query(lambda c: c.data and c.data.startswith(CALLBACK_PREFIX))
    async def language_choice(callback: types.CallbackQuery) -> None:
        index = parse_callback(callback.data)
        accepted = (
            isinstance(presenter, InlineMenuPresenter)
            and index is not None
            and callback.message is not None
            and presenter.resolve(callback.from_user.id, callback.message.message_id, index)
        )
        if accepted:
            await callback.answer()
        else:
            entity = participants.get(callback.from_user.id)
            await callback.answer(system.translate(entity, "system.language_menu_expired"))

    @router.my_chat_member()
    async def member_update(event: types.ChatMemberUpdated) -> None:
        if event.new_chat_member.status in (ChatMemberStatus.KICKED, ChatMemberStatus.LEFT):
            participants.invalidate(event.from_user.id)
            if isinstance(presenter, InlineMenuPresenter):
                presenter.dismiss(event.from_user.id)
