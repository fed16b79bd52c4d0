"""Retry policy handoff for the database client.

`RetrySettings` is declarative: it names which `RetryableError` kinds are
retryable and how many attempts are allowed. `build_retrying` turns it into
a tenacity controller the client drives around its own connect calls::

    async for attempt in build_retrying(config.retry):
        with attempt:
            pool = await asyncpg.create_pool(**params["write"])

Nothing in this package retries its own calls.
"""

from __future__ import annotations

import errno
import socket
from typing import TYPE_CHECKING

import asyncpg
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_random_exponential,
)

from ..core.enums import RetryableError
from ..logger import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from structlog.stdlib import BoundLogger

    from .config import RetrySettings

logger: BoundLogger = get_logger(__name__)

_UNREACHABLE_ERRNOS = frozenset({errno.EHOSTUNREACH, errno.ENETUNREACH})
_TIMEOUT_ERRNOS = frozenset({errno.ETIMEDOUT})


def match_exception(exc: BaseException) -> RetryableError | None:
    """Map an exception raised while connecting to its error kind.

    Returns
    -------
    RetryableError | None
        The matching kind, or None for errors that are not connection-level.
    """
    # socket.gaierror subclasses OSError; check it before the errno cases
    if isinstance(exc, socket.gaierror):
        return RetryableError.HOST_NOT_FOUND
    if isinstance(exc, ConnectionRefusedError):
        return RetryableError.CONNECTION_REFUSED
    if isinstance(exc, TimeoutError):
        return RetryableError.CONNECTION_TIMED_OUT
    # PostgresConnectionError is SQLSTATE class 08; other InterfaceErrors are caller bugs
    if isinstance(exc, asyncpg.ConnectionDoesNotExistError | asyncpg.PostgresConnectionError):
        return RetryableError.INVALID_CONNECTION
    if isinstance(exc, OSError):
        if exc.errno in _UNREACHABLE_ERRNOS:
            return RetryableError.HOST_UNREACHABLE
        if exc.errno in _TIMEOUT_ERRNOS:
            return RetryableError.CONNECTION_TIMED_OUT
    return None


def is_retryable(exc: BaseException, settings: RetrySettings) -> bool:
    kind = match_exception(exc)
    return kind is not None and kind in settings.match


def _log_before_sleep(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Retrying after connection error",
        attempt=retry_state.attempt_number,
        error_kind=str(match_exception(exc)) if exc else None,
        error=str(exc) if exc else None,
    )


def _retry_kwargs(settings: RetrySettings, wait_max: float) -> dict[str, object]:
    predicate: Callable[[BaseException], bool] = lambda exc: is_retryable(exc, settings)  # noqa: E731
    return {
        "stop": stop_after_attempt(settings.max),
        "wait": wait_random_exponential(multiplier=0.1, max=wait_max),
        "retry": retry_if_exception(predicate),
        "before_sleep": _log_before_sleep,
        "reraise": True,
    }


def build_retrying(settings: RetrySettings, wait_max: float = 5.0) -> AsyncRetrying:
    """Build an async tenacity controller enforcing ``settings``.

    Parameters
    ----------
    settings
        The declarative retry policy from a `ReplicationConfig`.
    wait_max
        Upper bound in seconds of the jittered backoff between attempts.
    """
    return AsyncRetrying(**_retry_kwargs(settings, wait_max))  # type: ignore[arg-type]


def build_sync_retrying(settings: RetrySettings, wait_max: float = 5.0) -> Retrying:
    return Retrying(**_retry_kwargs(settings, wait_max))  # type: ignore[arg-type]
