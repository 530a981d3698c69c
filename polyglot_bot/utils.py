from __future__ import annotations
import inspect
import time
import logging
from functools import wraps
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger("polyglot_bot")


def _report(name: str, start: float, threshold_ms: int) -> None:
    dur_ms = (time.perf_counter() - start) * 1000
    if dur_ms >= threshold_ms:
        logger.info("slow_op: %s took %d ms", name, int(dur_ms))


def log_if_slow(threshold_ms: int = 200) -> Callable[[F], F]:
    # Logs only when a sync or async function takes longer than threshold.
    def deco(fn: F) -> F:
        if inspect.iscoroutinefunction(fn):
            @wraps(fn)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                start = time.perf_counter()
                try:
                    return await fn(*args, **kwargs)
                finally:
                    _report(fn.__name__, start, threshold_ms)
            return async_wrapper  # type: ignore[return-value]

        @wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                _report(fn.__name__, start, threshold_ms)
        return wrapper  # type: ignore[return-value]
    return deco
