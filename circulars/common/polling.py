import time
from collections.abc import Callable

DEFAULT_TIMEOUT_SECONDS = 6.0
DEFAULT_INTERVAL_SECONDS = 0.15


def wait_for(
    condition: Callable[[], bool],
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    *,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Poll ``condition`` until it holds or the timeout elapses.

    Returns:
        True if the condition became true, False on timeout. Never raises
        on timeout; callers decide how to fail.
    """
    deadline = clock() + timeout_seconds
    while not condition():
        if clock() >= deadline:
            return False
        sleep(interval_seconds)
    return True
