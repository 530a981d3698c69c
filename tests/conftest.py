from __future__ import annotations
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

import pytest

from polyglot_bot.i18n import LanguageConfig, build_config
from polyglot_bot.language import LanguageSystem
from polyglot_bot.storage import Outcome, ScopeStorage


class FakeEntity:
    def __init__(self, name: str = "ann", *, valid: bool = True, fail_read: bool = False, fail_write: bool = False) -> None:
        self.name = name
        self.valid = valid
        self.fail_read = fail_read
        self.fail_write = fail_write
        self.props: dict[str, str] = {}

    def is_addressable(self) -> bool:
        return self.valid

    def read_preference(self, key: str) -> Outcome:
        if self.fail_read:
            return Outcome(ok=False, error=OSError("corrupt record"))
        return Outcome(ok=True, value=self.props.get(key))

    def write_preference(self, key: str, value: str) -> Outcome:
        if self.fail_write:
            return Outcome(ok=False, error=OSError("disk full"))
        self.props[key] = value
        return Outcome(ok=True, value=value)


class FakePresenter:
    def __init__(self, answer: Optional[int] = None, on_ask: Optional[Callable[[Any], None]] = None) -> None:
        self.answer = answer
        self.on_ask = on_ask
        self.asked: list[tuple[str, str, list[str], str]] = []
        self.notified: list[tuple[Any, str]] = []

    async def ask(self, entity: Any, title: str, body: str, options: Sequence[str], back: str) -> Optional[int]:
        self.asked.append((title, body, list(options), back))
        if self.on_ask is not None:
            self.on_ask(entity)
        return self.answer

    async def notify(self, entity: Any, text: str) -> None:
        self.notified.append((entity, text))


@pytest.fixture
def storage(tmp_path: Path) -> ScopeStorage:
    return ScopeStorage(tmp_path / "data")


@pytest.fixture
def config() -> LanguageConfig:
    return build_config()


@pytest.fixture
def system(config: LanguageConfig, storage: ScopeStorage) -> LanguageSystem:
    return LanguageSystem(config, storage)


@pytest.fixture
def entity() -> FakeEntity:
    return FakeEntity()
