"""Per-request deadline threaded through every pipeline stage."""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, TypeVar

from .errors import (
    PipelineCancelledError,
    PipelineTimeoutError,
    UpstreamProviderError,
)

T = TypeVar("T")


class RequestDeadline:
    """One shared time budget plus a cooperative cancellation flag.

    Created once when a request starts. Stages call ``check`` between
    calls and route every external call through ``run`` so that an expired
    budget or a ``cancel`` aborts the in-flight task instead of leaking it.
    """

    def __init__(
        self,
        timeout_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock = clock
        self._expires_at = clock() + timeout_seconds
        self._cancelled = False
        self._inflight: set[asyncio.Future] = set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    def expired(self) -> bool:
        return self._clock() >= self._expires_at

    def check(self, stage: str) -> None:
        """Raise before ``stage`` starts if the request is already over."""

        if self._cancelled:
            raise PipelineCancelledError(f"Request cancelled before {stage}")
        if self.expired():
            raise PipelineTimeoutError(f"Deadline exhausted before {stage}")

    def cancel(self) -> None:
        """Flag the request as abandoned and abort any in-flight call."""

        self._cancelled = True
        for task in list(self._inflight):
            task.cancel()

    async def run(
        self,
        stage: str,
        call: Callable[[], Awaitable[T]],
        *,
        cap_seconds: float | None = None,
    ) -> T:
        """Await ``call()`` bounded by the remaining budget (and ``cap_seconds``)."""

        self.check(stage)
        budget = self.remaining()
        if cap_seconds is not None:
            budget = min(budget, cap_seconds)

        task = asyncio.ensure_future(call())
        self._inflight.add(task)
        try:
            return await asyncio.wait_for(task, timeout=budget)
        except asyncio.TimeoutError as exc:
            raise PipelineTimeoutError(f"Deadline exhausted during {stage}") from exc
        except UpstreamProviderError as exc:
            # A transport failure racing the deadline is reported as the timeout.
            if exc.status_code is None and self.expired():
                raise PipelineTimeoutError(f"Deadline exhausted during {stage}") from exc
            raise
        except asyncio.CancelledError:
            if self._cancelled:
                raise PipelineCancelledError(f"Request cancelled during {stage}") from None
            raise
        finally:
            self._inflight.discard(task)


__all__ = ["RequestDeadline"]
