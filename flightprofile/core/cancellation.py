"""Cooperative cancellation for background profile computations."""

import threading


class CancellationToken:
    """Flag shared between the scheduler and one running computation.

    The computation polls is_cancelled at sample and leg granularity and
    abandons its work once the flag is set. Each computation gets its own
    token, so a token never goes back from cancelled to not cancelled.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancelled})"
