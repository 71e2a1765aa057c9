"""Shared helpers for invoking user and instrumentation callbacks."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Sequence
from typing import Any


def fire_callbacks(
    hooks: Sequence[Any],
    method: str,
    *args: Any,
    logger: logging.Logger | None = None,
    log_level: int = logging.WARNING,
    **kwargs: Any,
) -> None:
    """Call ``method`` on every hook object that defines it.

    Hooks may implement any subset of the instrumentation interface.  A hook
    that raises is logged (when ``logger`` is given) and skipped; it never
    interrupts the operation being observed.

    Parameters:
        hooks: Objects to notify.
        method: Name of the hook method to call.
        *args: Positional arguments for the hook.
        logger: Logger for reporting hook failures.
        log_level: Level used when a hook raises.
        **kwargs: Keyword arguments for the hook.
    """
    for hook in hooks:
        fn = getattr(hook, method, None)
        if fn is None or not callable(fn):
            continue
        try:
            fn(*args, **kwargs)
        except Exception:
            if logger:
                logger.log(log_level, "Hook %r.%s failed", hook, method, exc_info=True)


async def call_user_callback(fn: Callable[..., Any] | None, *args: Any) -> Any:
    """Invoke a user callback that may be sync or async; ``None`` is a no-op."""
    if fn is None:
        return None
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result
