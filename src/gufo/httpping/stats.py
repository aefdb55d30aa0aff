# ---------------------------------------------------------------------
# Gufo HTTP Ping: Statistics
# ---------------------------------------------------------------------
# Copyright (C) 2022-25, Gufo Labs
# ---------------------------------------------------------------------

"""Round-trip statistics."""

# Python modules
import statistics
from typing import TYPE_CHECKING, NamedTuple, Sequence

if TYPE_CHECKING:
    from .probe import RunState

MS = 1000.0


class Statistics(NamedTuple):
    """
    Run summary.

    Attributes:
        min: Minimal round-trip time, in milliseconds.
        avg: Average round-trip time, in milliseconds.
        max: Maximal round-trip time, in milliseconds.
        stddev: Population standard deviation, in milliseconds.
        loss: Lost requests, in percents.
    """

    min: float = 0.0
    avg: float = 0.0
    max: float = 0.0
    stddev: float = 0.0
    loss: float = 0.0

    @classmethod
    def from_state(cls, state: "RunState") -> "Statistics":
        """
        Summarize the run.

        Args:
            state: Run state.

        Returns:
            Statistics instance.
        """
        return summarize(state.durations, state.requests_sent)


def summarize(durations: Sequence[float], requests_sent: int) -> "Statistics":
    """
    Calculate run statistics.

    Args:
        durations: Round-trip times of successful attempts, in seconds.
        requests_sent: Number of issued requests.

    Returns:
        Statistics instance. All fields are 0 for empty input.
    """
    loss = 0.0
    if requests_sent > 0:
        lost = requests_sent - len(durations)
        loss = min(100.0, max(0.0, 100.0 * lost / requests_sent))
    if not durations:
        return Statistics(loss=loss)
    ms = [d * MS for d in durations]
    lo, hi = min(ms), max(ms)
    avg = statistics.fmean(ms)
    return Statistics(
        min=lo,
        # Rounding may place mean outside of min..max on equal values
        avg=min(max(avg, lo), hi),
        max=hi,
        stddev=statistics.pstdev(ms, mu=avg),
        loss=loss,
    )
