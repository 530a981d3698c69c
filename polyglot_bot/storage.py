from __future__ import annotations
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .utils import log_if_slow

logger = logging.getLogger("polyglot_bot")

GLOBAL_SCOPE = "global"


def user_scope(user_id: int) -> str:
    return f"users/{user_id}"


@dataclass(frozen=True)
class Outcome:
    """Result of a storage access. Storage never raises to its callers."""
    ok: bool
    value: Optional[str] = None
    error: Optional[Exception] = None


class ScopeStorage:
    # Human-readable key-value storage, one JSON document per scope.
    def __init__(self, base: Path) -> None:
        self.base = base
        self.base.mkdir(parents=True, exist_ok=True)

    def _path(self, scope: str) -> Path:
        return self.base / scope / "properties.json"

    def _load(self, p: Path) -> dict[str, Any]:
        if not p.exists():
            return {}
        data = json.loads(p.read_text(encoding="utf-8") or "{}")
        if not isinstance(data, dict):
            raise ValueError(f"{p} does not hold a JSON object")
        return data

    @log_if_slow()
    def read(self, scope: str, key: str) -> Outcome:
        p = self._path(scope)
        try:
            data = self._load(p)
        except (OSError, ValueError) as e:
            logger.error("read(%s, %s) failed: %s", scope, key, e)
            return Outcome(ok=False, error=e)
        value = data.get(key)
        logger.debug("read(%s, %s) <- %s", scope, key, p)
        return Outcome(ok=True, value=None if value is None else str(value))

    @log_if_slow()
    def write(self, scope: str, key: str, value: str) -> Outcome:
        p = self._path(scope)
        tmp = p.with_suffix(".tmp")
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            data = self._load(p)
            data[key] = value
            tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp, p)
        except (OSError, ValueError) as e:
            logger.error("write(%s, %s) failed: %s", scope, key, e)
            return Outcome(ok=False, error=e)
        logger.debug("write(%s, %s) -> %s", scope, key, p)
        return Outcome(ok=True, value=value)
