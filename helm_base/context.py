"""Utilities for tracing construct calls."""

import contextvars
from contextlib import contextmanager
import logging
from time import perf_counter
from typing import Generator


_LOGGER = logging.getLogger(__name__)

# No public API
__all__: list[str] = []


# Copied per asyncio task.
_trace: contextvars.ContextVar[tuple[str, ...]] = contextvars.ContextVar(
    "_trace", default=()
)


def trace_label() -> str:
    """Return the label of the current trace stack, or an empty string."""
    return " > ".join(_trace.get())


@contextmanager
def trace_context(name: str) -> Generator[None, None, None]:
    """Log entry and exit of a traced block along with its duration."""
    token = _trace.set(_trace.get() + (name,))
    label = trace_label()
    t1 = perf_counter()
    _LOGGER.debug("[Trace] > %s", label)
    try:
        yield
    finally:
        t2 = perf_counter()
        _trace.reset(token)
        _LOGGER.debug("[Trace] < %s (%0.2fs)", label, (t2 - t1))
