"""Bounded calls - run a function in a worker thread and give up after a deadline"""

import threading
from typing import Any, Callable

from .errors import InferenceTimeout


def call_with_timeout(func: Callable[..., Any], timeout: float, *args, **kwargs) -> Any:
    """Call func(*args, **kwargs), raising InferenceTimeout if it runs past timeout.

    Exceptions raised by func propagate to the caller. A timed-out worker is
    abandoned (daemon thread); its result is discarded.
    """
    result = None
    error = None

    def run():
        nonlocal result, error
        try:
            result = func(*args, **kwargs)
        except BaseException as e:
            error = e

    thread = threading.Thread(target=run)
    thread.daemon = True
    thread.start()
    thread.join(timeout=timeout)

    if thread.is_alive():
        raise InferenceTimeout(timeout)
    if error is not None:
        raise error
    return result
