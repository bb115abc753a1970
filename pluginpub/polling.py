"""
Waiting helpers shared by the device-flow and fork-readiness poll loops.

Poll loops never hold a lock across a wait, so a caller may cancel between
iterations without leaving the working tree half-updated.
"""

import threading
import time
from typing import Callable, Optional

from .exit_codes import OperationCancelled

Sleeper = Callable[[float], None]


class CancelToken:
    """
    Signal checked by poll loops between iterations.

    Example:
        cancel = CancelToken()
        threading.Timer(60, cancel.cancel).start()
        manager = AuthSessionManager(config, store, cancel=cancel)
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled()

    def wait(self, seconds: float) -> None:
        """Block for up to `seconds`, returning early (and raising) on cancel."""
        if self._event.wait(seconds):
            raise OperationCancelled()


def pause(
    seconds: float,
    sleep: Optional[Sleeper] = None,
    cancel: Optional[CancelToken] = None
) -> None:
    """
    Wait between two poll attempts.

    Args:
        seconds: How long to wait
        sleep: Replacement for time.sleep (tests pass a recorder)
        cancel: Optional token; raises OperationCancelled once signalled
    """
    if cancel is not None:
        cancel.raise_if_cancelled()

    if sleep is not None:
        sleep(seconds)
    elif cancel is not None:
        cancel.wait(seconds)
    else:
        time.sleep(seconds)

    if cancel is not None:
        cancel.raise_if_cancelled()
