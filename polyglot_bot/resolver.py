from __future__ import annotations
import logging
from typing import Any, Optional

from .i18n import LanguageConfig
from .preferences import PreferenceStore, entity_ident

logger = logging.getLogger("polyglot_bot")


def substitute(template: str, args: tuple[Any, ...]) -> str:
    # Only the first occurrence of each %i is replaced.
    text = template
    for i, arg in enumerate(args, start=1):
        text = text.replace(f"%{i}", str(arg), 1)
    return text


class Translator:
    def __init__(self, config: LanguageConfig, prefs: PreferenceStore) -> None:
        self.config = config
        self.prefs = prefs

    def language_for(self, entity: Optional[Any]) -> str:
        return self.prefs.get_entity(entity) if entity is not None else self.prefs.get_global()

    def template(self, lang: str, key: str) -> str:
        catalog = self.config.catalog
        return catalog.lookup(lang, key) or catalog.lookup(self.config.default_language, key) or key

    def translate(self, entity: Optional[Any], key: str, *args: Any) -> str:
        try:
            return substitute(self.template(self.language_for(entity), key), args)
        except Exception as e:
            logger.error("translate failed: %s (key: %s, entity: %s)", e, key, entity_ident(entity))
            return key
