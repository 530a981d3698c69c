from __future__ import annotations
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

logger = logging.getLogger("polyglot_bot")

Translations = Mapping[str, str]

DEFAULT_LANGUAGE = "zh_CN"
PLAYER_LANG_KEY = "player_lang"
GLOBAL_LANG_KEY = "global_lang"

_catalogs: dict[str, Translations] = {
    "zh_CN": {
        "system.language_title": "语言设置",
        "system.current_language": "当前语言: %1\n请选择新的语言:",
        "system.back": "返回",
        "system.language_changed": "✅ 语言已切换至 %1",
        "system.language_menu_expired": "该菜单已失效。",
        "welcome": "欢迎使用 polyglot_bot!",
        "help": "可用命令: /start, /help, /lang",
    },
    "en_US": {
        "system.language_title": "Language Settings",
        "system.current_language": "Current language: %1\nChoose a new language:",
        "system.back": "Back",
        "system.language_changed": "✅ Language switched to %1",
        "system.language_menu_expired": "This menu has expired.",
        "welcome": "Welcome to polyglot_bot!",
        "help": "Available: /start, /help, /lang",
    },
}

_names: dict[str, str] = {
    "zh_CN": "简体中文",
    "en_US": "English",
}


class Catalog:
    """Read-only language -> (key -> template) mapping.

    Languages keep their registration order, which is also the order the
    language menu lists them in.
    """

    def __init__(self, catalogs: Mapping[str, Translations], names: Optional[Mapping[str, str]] = None) -> None:
        self._catalogs = MappingProxyType({lang: MappingProxyType(dict(m)) for lang, m in catalogs.items()})
        self._names = MappingProxyType(dict(names or {}))

    def __contains__(self, lang: object) -> bool:
        return isinstance(lang, str) and lang in self._catalogs

    def lookup(self, lang: str, key: str) -> Optional[str]:
        return self._catalogs.get(lang, {}).get(key)

    def languages(self) -> tuple[str, ...]:
        return tuple(self._catalogs)

    def display_name(self, lang: str) -> str:
        return self._names.get(lang) or lang


@dataclass(frozen=True)
class LanguageConfig:
    catalog: Catalog
    default_language: str = DEFAULT_LANGUAGE
    player_key: str = PLAYER_LANG_KEY
    global_key: str = GLOBAL_LANG_KEY

    def coerce(self, lang: object) -> str:
        # Anything the catalog does not know becomes the default language.
        return lang if isinstance(lang, str) and lang in self.catalog else self.default_language


def default_catalog() -> Catalog:
    return Catalog(_catalogs, _names)


def build_config(default_language: str = DEFAULT_LANGUAGE, catalog: Optional[Catalog] = None) -> LanguageConfig:
    catalog = catalog or default_catalog()
    if default_language not in catalog:
        fallback = DEFAULT_LANGUAGE if DEFAULT_LANGUAGE in catalog else catalog.languages()[0]
        logger.warning("default language %r has no catalog, using %s", default_language, fallback)
        default_language = fallback
    return LanguageConfig(catalog=catalog, default_language=default_language)
