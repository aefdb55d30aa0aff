# ---------------------------------------------------------------------
# Gufo HTTP Ping: Output formatting
# ---------------------------------------------------------------------
# Copyright (C) 2022-25, Gufo Labs
# ---------------------------------------------------------------------

"""Output lines formatting."""

# Gufo Labs modules
from .outcome import Attempt, Success
from .stats import MS, Statistics
from .target import Target


def header(target: Target) -> str:
    """Format run header."""
    return (
        f"PING {target.scheme.upper()}: {target.host}:{target.port} "
        f"({target.path}), {target.method}"
    )


def success(attempt: Attempt, address: str) -> str:
    """
    Format successful attempt.

    Args:
        attempt: Attempt with `Success` outcome.
        address: Resolved address of the target.

    Returns:
        Formatted line.
    """
    outcome = attempt.outcome
    if not isinstance(outcome, Success):
        msg = "successful attempt expected"
        raise ValueError(msg)
    rtt = f"{outcome.duration * MS:.3f} ms"
    return (
        f"{outcome.byte_count} bytes from {address}: "
        f"seq={attempt.seq:<3d} time={rtt:<12s} {outcome.status}"
    )


def timeout(attempt: Attempt) -> str:
    """Format timed out attempt."""
    return f"Request timeout for seq {attempt.seq}"


def summary(host: str, stats: Statistics, sent: int, received: int) -> str:
    """
    Format run summary.

    Args:
        host: Target's host.
        stats: Run statistics.
        sent: Number of issued requests.
        received: Number of received responses.

    Returns:
        Multi-line summary block.
    """
    return "\n".join(
        [
            f"--- {host} httpping statistics ---",
            f"{sent} requests transmitted, "
            f"{received} responses received, "
            f"{stats.loss:.1f}% lost",
            "round-trip min/avg/max/stddev = "
            f"{stats.min:.3f}/{stats.avg:.3f}/{stats.max:.3f}/"
            f"{stats.stddev:.3f} ms",
        ]
    )
