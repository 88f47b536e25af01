"""Optimistic-concurrency retry for read-validate-write operations."""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_none,
)

from pharmastock.config import get_logger, get_settings
from pharmastock.core.exceptions import ConcurrentUpdateError

logger = get_logger(__name__)

T = TypeVar("T")


def _log_retry(retry_state: RetryCallState) -> None:
    """Log version conflicts before re-running."""
    logger.warning(
        "concurrent_update_retry",
        attempt=retry_state.attempt_number,
        error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
    )


async def run_with_version_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int | None = None,
) -> T:
    """
    Run ``operation`` until its conditional write lands.

    ``operation`` must re-read and re-validate on every call. Only
    ConcurrentUpdateError triggers a retry; every other error propagates
    immediately. When attempts run out the last conflict is raised with the
    attempt count attached.
    """
    attempts = max_attempts or get_settings().inventory.max_update_attempts
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=wait_none(),
            retry=retry_if_exception_type(ConcurrentUpdateError),
            before_sleep=_log_retry,
            reraise=True,
        ):
            with attempt:
                result = await operation()
    except ConcurrentUpdateError as e:
        logger.error(
            "concurrent_update_exhausted",
            medicine_id=e.details.get("medicine_id"),
            attempts=attempts,
        )
        raise ConcurrentUpdateError(e.details.get("medicine_id"), attempts=attempts) from e  # type: ignore[arg-type]
    return result
