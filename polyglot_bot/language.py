from __future__ import annotations
import logging
from typing import Any, Optional

from aiogram import Router

from .handlers import register_language_command
from .i18n import LanguageConfig
from .participants import ParticipantRegistry
from .preferences import PreferenceStore
from .resolver import Translator
from .selector import LanguageSelector, MenuPresenter, SelectionResult
from .storage import ScopeStorage

logger = logging.getLogger("polyglot_bot")


class LanguageSystem:
    """Entry points other modules use to read, change and apply languages.

    None of the methods raise to the caller.
    """

    def __init__(self, config: LanguageConfig, storage: ScopeStorage, presenter: Optional[MenuPresenter] = None) -> None:
        self.config = config
        self.prefs = PreferenceStore(config, storage)
        self.translator = Translator(config, self.prefs)
        self.selector = LanguageSelector(config, self.prefs, self.translator, presenter)
        self._registered = False

    def translate(self, entity: Optional[Any], key: str, *args: Any) -> str:
        return self.translator.translate(entity, key, *args)

    def get_player_language(self, entity: Any) -> str:
        return self.prefs.get_entity(entity)

    def set_player_language(self, entity: Any, lang: str) -> bool:
        return self.prefs.set_entity(entity, lang)

    def get_global_language(self) -> str:
        return self.prefs.get_global()

    def set_global_language(self, lang: str) -> bool:
        return self.prefs.set_global(lang)

    async def show_language_selector(self, entity: Optional[Any] = None) -> SelectionResult:
        return await self.selector.show(entity)

    def initialize(self, router: Optional[Router] = None, participants: Optional[ParticipantRegistry] = None) -> bool:
        logger.info("[language] init start")
        complete = True
        try:
            if not self.prefs.ensure_global():
                complete = False
        except Exception as e:
            logger.error("[language] global language init failed: %s", e)
            complete = False

        if router is not None and participants is not None and not self._registered:
            try:
                register_language_command(router, self, participants)
                self._registered = True
                logger.info("[language] language command registered")
            except Exception as e:
                logger.error("[language] command registration failed: %s", e)
                complete = False

        logger.info("[language] init %s (global: %s)", "done" if complete else "partial", self.get_global_language())
        return complete
