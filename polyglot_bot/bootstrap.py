from __future__ import annotations
import logging
from typing import Any, Callable, Sequence, Tuple

logger = logging.getLogger("polyglot_bot")

VERSION = "1.1.1"

Module = Tuple[str, Callable[[], Any]]


def load_modules(modules: Sequence[Module]) -> dict[str, bool]:
    # Each initializer runs once; a failing one never stops the rest.
    logger.info("=== loading modules ===")
    status: dict[str, bool] = {}
    for name, init in modules:
        logger.info("[init] %s", name)
        try:
            result = init()
        except Exception:
            logger.exception("[error] %s failed to initialize", name)
            status[name] = False
            continue
        status[name] = result is not False
        logger.info("[%s] %s", "done" if status[name] else "partial", name)

    logger.info("=== system status ===")
    logger.info("version: %s", VERSION)
    logger.info("modules loaded: %d/%d", sum(status.values()), len(status))
    return status
