# ---------------------------------------------------------------------
# Gufo HTTP Ping: Probe loop
# ---------------------------------------------------------------------
# Copyright (C) 2022-25, Gufo Labs
# ---------------------------------------------------------------------

"""Probe loop implementation."""

# Python modules
import asyncio
import logging
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any, AsyncIterator, Awaitable, List, Optional

# Gufo Labs modules
from .cancel import CancelToken
from .error import TransportFatal
from .outcome import Attempt, Fatal, Success, Timeout
from .proto import TransportProto
from .target import Target

logger = logging.getLogger(__name__)

# Returned by guarded waits aborted by the token
CANCELLED = object()


@dataclass
class RunState(object):
    """
    Mutable state of a single run.

    Attributes:
        requests_sent: Number of issued requests.
        durations: Round-trip times of successful attempts, in seconds.
        error: Fatal transport error, terminated the run.
    """

    requests_sent: int = 0
    durations: List[float] = field(default_factory=list)
    error: Optional[BaseException] = None

    @property
    def received(self: "RunState") -> int:
        """Number of received responses."""
        return len(self.durations)


class Probe(object):
    """
    Sequential HTTP probe.

    Issues up to `count` requests, one at a time, starting
    each request `interval` seconds after the previous one
    started. Stops early on cancellation or fatal error.

    Args:
        transport: Network collaborator.
        token: Shared cancellation token. Create new one when empty.
        count: Number of attempts.
        interval: Interval between attempts' starts, in seconds.
        timeout: Per-attempt deadline, in seconds.

    Example:
        ``` py
        async with HttpTransport() as transport:
            probe = Probe(transport, count=3)
            async for attempt in probe.iter_attempts(target):
                print(attempt)
        ```
    """

    def __init__(
        self: "Probe",
        transport: TransportProto,
        token: Optional[CancelToken] = None,
        count: int = 10,
        interval: float = 1.0,
        timeout: float = 2.0,
    ) -> None:
        if count < 0:
            msg = "count must not be negative"
            raise ValueError(msg)
        if timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)
        self.__transport = transport
        self.__token = token or CancelToken()
        self.__count = count
        self.__interval = max(0.0, interval)
        self.__timeout = timeout

    @property
    def token(self: "Probe") -> CancelToken:
        """Cancellation token."""
        return self.__token

    async def __guard(self: "Probe", aw: Awaitable[Any]) -> Any:
        """
        Await, aborting on token cancellation.

        Args:
            aw: Awaitable.

        Returns:
            * Awaitable's result.
            * `CANCELLED` - if aborted by the token.
        """
        task = asyncio.ensure_future(aw)
        self.__token.add_callback(task.cancel)
        try:
            await asyncio.wait([task])
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            self.__token.remove_callback(task.cancel)
        if task.cancelled():
            return CANCELLED
        return task.result()

    async def iter_attempts(
        self: "Probe", target: Target, state: Optional[RunState] = None
    ) -> AsyncIterator[Attempt]:
        """
        Do the serie of attempts.

        Fatal outcome is yielded and terminates the iteration.
        Attempt, aborted by cancellation, is counted as sent,
        but is not yielded.

        Args:
            target: Resolved target.
            state: Run state to update. Create new one when empty.

        Returns:
            Yields attempts in sequence order.
        """
        if state is None:
            state = RunState()
        for seq in range(self.__count):
            if self.__token.stopping:
                logger.debug("Stopped before attempt %d", seq)
                break
            state.requests_sent += 1
            t0 = perf_counter()
            r = await self.__guard(
                self.__transport.request(target, self.__timeout)
            )
            dt = perf_counter() - t0
            if r is CANCELLED:
                logger.debug("Attempt %d aborted", seq)
                break
            if isinstance(r, Timeout):
                # Deadline already consumed the interval
                yield Attempt(seq=seq, outcome=Timeout(duration=dt))
                continue
            if isinstance(r, Fatal):
                state.error = r.error
                yield Attempt(
                    seq=seq, outcome=Fatal(error=r.error, duration=dt)
                )
                return
            state.durations.append(dt)
            yield Attempt(
                seq=seq,
                outcome=Success(
                    duration=dt, byte_count=r.byte_count, status=r.status
                ),
            )
            if seq + 1 >= self.__count or self.__token.stopping:
                continue
            delay = self.__interval - dt
            if delay > 0:
                await self.__guard(asyncio.sleep(delay))

    async def run(self: "Probe", target: Target) -> RunState:
        """
        Run all attempts and collect the state.

        Args:
            target: Resolved target.

        Returns:
            Final run state.

        Raises:
            TransportFatal: if the run was terminated by transport error.
        """
        state = RunState()
        async for _ in self.iter_attempts(target, state):
            pass
        if state.error is not None:
            raise TransportFatal(state.error, state)
        return state
