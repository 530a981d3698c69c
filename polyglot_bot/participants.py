from __future__ import annotations
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from aiogram import types

from .storage import Outcome, ScopeStorage, user_scope

logger = logging.getLogger("polyglot_bot")


@runtime_checkable
class Addressable(Protocol):
    """Anything that can own a language preference."""
    def is_addressable(self) -> bool: ...
    def read_preference(self, key: str) -> Outcome: ...
    def write_preference(self, key: str, value: str) -> Outcome: ...


@dataclass
class ChatParticipant:
    user_id: int
    chat_id: int
    name: str
    storage: ScopeStorage
    active: bool = True

    def is_addressable(self) -> bool:
        return self.active

    def read_preference(self, key: str) -> Outcome:
        return self.storage.read(user_scope(self.user_id), key)

    def write_preference(self, key: str, value: str) -> Outcome:
        return self.storage.write(user_scope(self.user_id), key, value)


class ParticipantRegistry:
    # Recently seen participants by user id, least recently used evicted first.
    # Preferences live in storage, so an evicted participant is rebuilt on demand.
    def __init__(self, storage: ScopeStorage, max_size: int = 10_000) -> None:
        self.storage = storage
        self.max_size = max_size
        self._by_id: OrderedDict[int, ChatParticipant] = OrderedDict()

    def get(self, user_id: int) -> Optional[ChatParticipant]:
        return self._by_id.get(user_id)

    def from_user(self, user: types.User, chat_id: Optional[int] = None) -> ChatParticipant:
        p = self._by_id.get(user.id)
        if p is None or not p.active:
            p = ChatParticipant(
                user_id=user.id,
                chat_id=chat_id if chat_id is not None else user.id,
                name=user.username or user.first_name or str(user.id),
                storage=self.storage,
            )
            self._by_id[user.id] = p
            self._by_id.move_to_end(user.id)
            while len(self._by_id) > self.max_size:
                self._by_id.popitem(last=False)
        else:
            self._by_id.move_to_end(user.id)
            if chat_id is not None:
                p.chat_id = chat_id
        return p

    def invalidate(self, user_id: int) -> Optional[ChatParticipant]:
        p = self._by_id.pop(user_id, None)
        if p is not None:
            p.active = False
            logger.info("participant %s invalidated", user_id)
        return p
