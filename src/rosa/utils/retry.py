"""Backoff for remote calls that fail while a resource is still coming up."""

from collections.abc import Callable
from typing import Any, TypeVar

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from rosa.utils.logging import get_logger

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _log_retry(event: str, max_attempts: int) -> Callable[[RetryCallState], None]:
    def log(state: RetryCallState) -> None:
        error = state.outcome.exception() if state.outcome else None
        logger.debug(
            event,
            call=getattr(state.fn, "__qualname__", None),
            attempt=state.attempt_number,
            max_attempts=max_attempts,
            error=repr(error),
        )

    return log


def retry_on_exception(
    exceptions: tuple[type[Exception], ...] = (Exception,),
    max_attempts: int = 3,
    min_wait: int = 1,
    max_wait: int = 10,
    event: str = "retrying_call",
) -> Callable[[F], F]:
    """Retry the decorated call with exponential backoff.

    Only `exceptions` are retried; once `max_attempts` is reached the last
    error is raised unchanged. `event` names the diagnostic logged before
    each wait.
    """
    return retry(
        retry=retry_if_exception_type(exceptions),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(min=min_wait, max=max_wait),
        before_sleep=_log_retry(event, max_attempts),
        reraise=True,
    )
