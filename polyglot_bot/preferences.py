from __future__ import annotations
import logging
from typing import Any

from .i18n import LanguageConfig
from .participants import Addressable
from .storage import GLOBAL_SCOPE, Outcome, ScopeStorage

logger = logging.getLogger("polyglot_bot")


class PreferenceStore:
    """Global and per-entity language preferences.

    Every accessor returns a usable value or a plain success flag; storage
    failures and unusable entities are ordinary branches, never exceptions.
    """

    def __init__(self, config: LanguageConfig, storage: ScopeStorage) -> None:
        self.config = config
        self.storage = storage

    def set_global(self, lang: str) -> bool:
        lang = self.config.coerce(lang)
        res = self.storage.write(GLOBAL_SCOPE, self.config.global_key, lang)
        if not res.ok:
            logger.error("set_global(%s) failed for scope %s: %s", lang, GLOBAL_SCOPE, res.error)
        return res.ok

    def get_global(self) -> str:
        res = self.storage.read(GLOBAL_SCOPE, self.config.global_key)
        if not res.ok:
            logger.error("get_global failed for scope %s: %s", GLOBAL_SCOPE, res.error)
            return self.config.default_language
        return self.config.coerce(res.value) if res.value else self.config.default_language

    def ensure_global(self) -> bool:
        # Writes the default only when the slot is absent; a corrupt slot is left alone.
        res = self.storage.read(GLOBAL_SCOPE, self.config.global_key)
        if not res.ok:
            logger.error("ensure_global failed for scope %s: %s", GLOBAL_SCOPE, res.error)
            return False
        if res.value is not None:
            return True
        if not self.set_global(self.config.default_language):
            return False
        logger.info("global language set to %s", self.config.default_language)
        return True

    def set_entity(self, entity: Any, lang: str) -> bool:
        if not is_usable(entity):
            return False
        lang = self.config.coerce(lang)
        try:
            res = entity.write_preference(self.config.player_key, lang)
        except Exception as e:
            res = Outcome(ok=False, error=e)
        if not res.ok:
            logger.error("set_entity(%s, %s) failed: %s", entity_ident(entity), lang, res.error)
        return res.ok

    def get_entity(self, entity: Any) -> str:
        if entity is None:
            return self.get_global()
        if not isinstance(entity, Addressable):
            logger.warning("entity %s cannot hold a language preference", entity_ident(entity))
            return self.get_global()
        try:
            res = entity.read_preference(self.config.player_key)
        except Exception as e:
            res = Outcome(ok=False, error=e)
        if not res.ok:
            # The entity record may be corrupt, so skip the global scope too.
            logger.error("get_entity(%s) failed: %s", entity_ident(entity), res.error)
            return self.config.default_language
        if not res.value:
            return self.get_global()
        return self.config.coerce(res.value)


def is_usable(entity: Any) -> bool:
    if entity is None or not isinstance(entity, Addressable):
        return False
    try:
        return bool(entity.is_addressable())
    except Exception as e:
        logger.warning("entity %s validity check failed: %s", entity_ident(entity), e)
        return False


def entity_ident(entity: Any) -> str:
    if entity is None:
        return "none"
    try:
        return str(getattr(entity, "name", None) or entity)
    except Exception:
        return type(entity).__name__
