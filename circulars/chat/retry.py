"""Rate-limit retry for provider calls.

Only rate-limit failures are retried: HTTP 429 or a message mentioning a
rate limit or quota. Waits start at the base delay and double per attempt,
capped at the max delay.
"""

import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from tenacity import RetryCallState, Retrying, retry_if_exception, stop_after_attempt, wait_exponential

from circulars.chat.exceptions import ProviderError
from circulars.logging.logger import Log

T = TypeVar("T")

_RATE_LIMIT_PATTERN = re.compile(r"rate limit|quota", re.IGNORECASE)


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 2
    base_delay_ms: int = 2000
    max_delay_ms: int = 8000


def is_rate_limit_error(exc: BaseException) -> bool:
    if not isinstance(exc, ProviderError):
        return False
    return exc.status_code == 429 or bool(_RATE_LIMIT_PATTERN.search(str(exc)))


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    Log.warning(
        f"Provider rate limited (attempt {retry_state.attempt_number}), "
        f"retrying in {wait * 1000:.0f}ms: {exc}"
    )


def call_with_retry(
    fn: Callable[[], T],
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    retrying = Retrying(
        stop=stop_after_attempt(policy.max_retries + 1),
        wait=wait_exponential(
            multiplier=policy.base_delay_ms / 1000,
            max=policy.max_delay_ms / 1000,
        ),
        retry=retry_if_exception(is_rate_limit_error),
        before_sleep=_log_retry,
        sleep=sleep,
        reraise=True,
    )
    return retrying(fn)
