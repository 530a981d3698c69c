import asyncio
from types import SimpleNamespace

import pytest
from aiogram.exceptions import TelegramForbiddenError

from polyglot_bot.menus import InlineMenuPresenter, build_keyboard, parse_callback
from polyglot_bot.participants import ChatParticipant
from polyglot_bot.storage import ScopeStorage


class FakeBot:
    def __init__(self, forbidden: bool = False) -> None:
        self.forbidden = forbidden
        self.sent: list[SimpleNamespace] = []
        self.closed: list[int] = []

    async def send_message(self, chat_id, text, reply_markup=None):
        if self.forbidden:
            raise TelegramForbiddenError(method=None, message="bot was blocked by the user")  # type: ignore[arg-type]
        msg = SimpleNamespace(chat_id=chat_id, text=text, reply_markup=reply_markup, message_id=100 + len(self.sent))
        self.sent.append(msg)
        return msg

    async def edit_message_reply_markup(self, chat_id, message_id, reply_markup=None):
        self.closed.append(message_id)


@pytest.fixture
def ann(storage: ScopeStorage) -> ChatParticipant:
    return ChatParticipant(user_id=1, chat_id=10, name="ann", storage=storage)


async def _until_pending(presenter: InlineMenuPresenter, user_id: int) -> None:
    for _ in range(100):
        if presenter.is_pending(user_id):
            return
        await asyncio.sleep(0)
    raise AssertionError("menu never became pending")


def test_keyboard_has_one_button_per_option_and_trailing_back() -> None:
    markup = build_keyboard(["简体中文", "English"], "Back")

    data = [row[0].callback_data for row in markup.inline_keyboard]
    assert data == ["lang:0", "lang:1", "lang:2"]
    assert markup.inline_keyboard[-1][0].text.endswith("Back")


def test_parse_callback() -> None:
    assert parse_callback("lang:1") == 1
    assert parse_callback("lang:x") is None
    assert parse_callback("fd_main") is None
    assert parse_callback(None) is None


@pytest.mark.asyncio
async def test_tap_resolves_pending_menu(ann: ChatParticipant) -> None:
    bot = FakeBot()
    presenter = InlineMenuPresenter(bot, timeout=5)

    task = asyncio.create_task(presenter.ask(ann, "Title", "Body", ["a", "b"], "Back"))
    await _until_pending(presenter, ann.user_id)
    message_id = bot.sent[-1].message_id

    assert not presenter.resolve(ann.user_id, message_id + 1, 0)
    assert presenter.resolve(ann.user_id, message_id, 1)
    assert await task == 1
    assert bot.sent[-1].chat_id == 10
    assert bot.closed == [message_id]
    assert not presenter.is_pending(ann.user_id)


@pytest.mark.asyncio
async def test_menu_expires_after_timeout(ann: ChatParticipant) -> None:
    bot = FakeBot()
    presenter = InlineMenuPresenter(bot, timeout=0.01)

    assert await presenter.ask(ann, "Title", "Body", ["a"], "Back") is None
    assert bot.closed == [bot.sent[-1].message_id]


@pytest.mark.asyncio
async def test_new_menu_dismisses_previous(ann: ChatParticipant) -> None:
    bot = FakeBot()
    presenter = InlineMenuPresenter(bot, timeout=5)

    first = asyncio.create_task(presenter.ask(ann, "Title", "Body", ["a"], "Back"))
    await _until_pending(presenter, ann.user_id)
    second = asyncio.create_task(presenter.ask(ann, "Title", "Body", ["a"], "Back"))

    assert await first is None
    await _until_pending(presenter, ann.user_id)
    presenter.dismiss(ann.user_id)
    assert await second is None


@pytest.mark.asyncio
async def test_blocked_participant_is_invalidated(ann: ChatParticipant) -> None:
    presenter = InlineMenuPresenter(FakeBot(forbidden=True), timeout=5)

    assert await presenter.ask(ann, "Title", "Body", ["a"], "Back") is None
    assert not ann.is_addressable()


@pytest.mark.asyncio
async def test_notify_escapes_html(ann: ChatParticipant) -> None:
    bot = FakeBot()

    await InlineMenuPresenter(bot).notify(ann, "<ok>")

    assert bot.sent[-1].text == "&lt;ok&gt;"


class SlowBot(FakeBot):
    async def send_message(self, chat_id, text, reply_markup=None):
        await asyncio.sleep(0.01)
        return await super().send_message(chat_id, text, reply_markup=reply_markup)


@pytest.mark.asyncio
async def test_overlapping_menus_leave_only_the_latest_pending(ann: ChatParticipant) -> None:
    bot = SlowBot()
    presenter = InlineMenuPresenter(bot, timeout=5)

    first = asyncio.create_task(presenter.ask(ann, "Title", "Body", ["a"], "Back"))
    second = asyncio.create_task(presenter.ask(ann, "Title", "Body", ["a"], "Back"))

    assert await asyncio.wait_for(first, timeout=1) is None
    await _until_pending(presenter, ann.user_id)
    assert presenter.resolve(ann.user_id, bot.sent[-1].message_id, 0)
    assert await second == 0
