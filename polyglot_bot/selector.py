from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol, Sequence

from .i18n import LanguageConfig
from .preferences import PreferenceStore, entity_ident, is_usable
from .resolver import Translator

logger = logging.getLogger("polyglot_bot")


class SelectionState(str, Enum):
    LISTING = "listing"
    AWAITING_CHOICE = "awaiting_choice"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class LanguageOption:
    code: str
    name: str


@dataclass(frozen=True)
class SelectionResult:
    state: SelectionState
    language: Optional[str] = None


CANCELLED = SelectionResult(SelectionState.CANCELLED)


class MenuPresenter(Protocol):
    async def ask(self, entity: Any, title: str, body: str, options: Sequence[str], back: str) -> Optional[int]:
        """Show a single-choice menu and wait for it to resolve.

        Returns the index of the chosen option, ``len(options)`` for the back
        button, or None when the menu was dismissed, expired or the entity
        went away.
        """
        ...

    async def notify(self, entity: Any, text: str) -> None: ...


class LanguageSelector:
    """Lets a participant (or the operator) pick a language.

    With a usable entity the choice is interactive and lands in the entity's
    preference; without a presenter to ask through it is cancelled. Without a
    usable entity, the first catalog language is chosen without blocking and
    becomes the global preference.
    """

    def __init__(
        self,
        config: LanguageConfig,
        prefs: PreferenceStore,
        translator: Translator,
        presenter: Optional[MenuPresenter] = None,
    ) -> None:
        self.config = config
        self.prefs = prefs
        self.translator = translator
        self.presenter = presenter

    def options(self) -> list[LanguageOption]:
        catalog = self.config.catalog
        return [LanguageOption(code, catalog.display_name(code)) for code in catalog.languages()]

    async def show(self, entity: Optional[Any] = None) -> SelectionResult:
        _trace(entity, SelectionState.LISTING)
        try:
            result = await self._run(entity)
        except Exception as e:
            logger.error("language selector failed for %s: %s", entity_ident(entity), e)
            result = CANCELLED
        _trace(entity, result.state)
        return result

    async def _run(self, entity: Optional[Any]) -> SelectionResult:
        languages = self.options()
        current = self.translator.language_for(entity)
        current_name = self.config.catalog.display_name(current)
        usable = is_usable(entity)
        if usable and self.presenter is None:
            # Only the operator path may touch the global preference.
            logger.warning("no menu presenter, cannot ask %s for a language", entity_ident(entity))
            return CANCELLED
        presenter = self.presenter if usable else None

        _trace(entity, SelectionState.AWAITING_CHOICE)
        if presenter is not None:
            selection = await presenter.ask(
                entity,
                self.translator.translate(entity, "system.language_title"),
                self.translator.translate(entity, "system.current_language", current_name),
                [lang.name for lang in languages],
                self.translator.translate(entity, "system.back"),
            )
        else:
            logger.info("=== language selection ===")
            for i, lang in enumerate(languages, start=1):
                logger.info("%d. %s (%s)", i, lang.name, lang.code)
            logger.info("%d. %s", len(languages) + 1, self.translator.translate(None, "system.back"))
            selection = 0

        if selection is None or not 0 <= selection < len(languages):
            return CANCELLED
        chosen = languages[selection]

        if presenter is None:
            if not self.prefs.set_global(chosen.code):
                return CANCELLED
            logger.info("%s", self.translator.translate(None, "system.language_changed", chosen.name))
            return SelectionResult(SelectionState.COMMITTED, chosen.code)

        # The participant may have gone away while the menu was open.
        if not is_usable(entity):
            return CANCELLED
        if not self.prefs.set_entity(entity, chosen.code):
            return CANCELLED
        await presenter.notify(entity, self.translator.translate(entity, "system.language_changed", chosen.name))
        return SelectionResult(SelectionState.COMMITTED, chosen.code)


def _trace(entity: Optional[Any], state: SelectionState) -> None:
    logger.debug("language selection for %s: %s", entity_ident(entity), state.value)
