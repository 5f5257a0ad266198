"""Retry policy shared by every remote answer provider.

Wraps tenacity so both providers get the same loop:
- at most `max_attempts` calls
- RateLimited waits attempt * rate_limit_backoff seconds
- any other ProviderError waits attempt * failure_backoff seconds
- no wait after the final attempt
- ConfigurationError (and anything that is not a ProviderError) is raised immediately
- waits observe an optional threading.Event and raise RequestCancelled when it is set
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

import structlog
from tenacity import RetryCallState, RetryError, Retrying, retry_if_exception_type, stop_after_attempt

from venue_assistant.core.config import settings
from venue_assistant.core.errors import ProviderError, ProviderExhausted, RateLimited, RequestCancelled

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass
class RetryPolicy:
    max_attempts: int = 3
    rate_limit_backoff: float = 2.0
    failure_backoff: float = 1.0
    sleep: Callable[[float], None] = time.sleep

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        return cls(
            max_attempts=settings.RETRY_MAX_ATTEMPTS,
            rate_limit_backoff=settings.RATE_LIMIT_BACKOFF_SECONDS,
            failure_backoff=settings.FAILURE_BACKOFF_SECONDS,
        )

    def delay_for(self, error: BaseException | None, attempt: int) -> float:
        if isinstance(error, RateLimited):
            return attempt * self.rate_limit_backoff
        return attempt * self.failure_backoff

    def _wait(self, state: RetryCallState) -> float:
        error = state.outcome.exception() if state.outcome else None
        return self.delay_for(error, state.attempt_number)

    def _sleeper(self, cancel: threading.Event | None) -> Callable[[float], None]:
        def _sleep(seconds: float) -> None:
            if cancel is None:
                self.sleep(seconds)
            elif cancel.wait(seconds):
                raise RequestCancelled("cancelled during provider backoff")
        return _sleep

    def _check_cancelled(self, cancel: threading.Event | None) -> Callable[[RetryCallState], None]:
        def _before(state: RetryCallState) -> None:
            if cancel is not None and cancel.is_set():
                raise RequestCancelled("cancelled before provider attempt")
        return _before

    def _log_retry(self, label: str) -> Callable[[RetryCallState], None]:
        def _before_sleep(state: RetryCallState) -> None:
            error = state.outcome.exception() if state.outcome else None
            logger.warning(
                "provider.retry",
                provider=label,
                attempt=state.attempt_number,
                max_attempts=self.max_attempts,
                rate_limited=isinstance(error, RateLimited),
                wait_seconds=state.next_action.sleep if state.next_action else None,
                error=str(error),
            )
        return _before_sleep

    def run(self, fn: Callable[[], T], *, label: str, cancel: threading.Event | None = None) -> T:
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self._wait,
            retry=retry_if_exception_type(ProviderError),
            sleep=self._sleeper(cancel),
            before=self._check_cancelled(cancel),
            before_sleep=self._log_retry(label),
        )
        try:
            return retrying(fn)
        except RetryError as exc:
            last = exc.last_attempt.exception()
            reason = getattr(last, "reason", None) or str(last)
            logger.warning("provider.exhausted", provider=label, attempts=self.max_attempts, error=reason)
            raise ProviderExhausted(label, self.max_attempts, reason) from last
