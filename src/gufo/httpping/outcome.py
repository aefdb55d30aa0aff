# ---------------------------------------------------------------------
# Gufo HTTP Ping: Attempt outcomes
# ---------------------------------------------------------------------
# Copyright (C) 2022-25, Gufo Labs
# ---------------------------------------------------------------------

"""
Attempt and its possible outcomes.

Transport returns one of `Response`, `Timeout` or `Fatal`.
Probe loop turns `Response` into `Success` by attaching
measured duration.
"""

# Python modules
from typing import NamedTuple, Union


class Response(NamedTuple):
    """
    Response received from the server.

    Attributes:
        byte_count: Size of response body, in bytes.
        status: Status line, like `200 OK`.
    """

    byte_count: int
    status: str


class Success(NamedTuple):
    """
    Successful attempt.

    Attributes:
        duration: Round-trip time, in seconds.
        byte_count: Size of response body, in bytes.
        status: Status line.
    """

    duration: float
    byte_count: int
    status: str


class Timeout(NamedTuple):
    """Attempt exceeded its deadline."""

    duration: float = 0.0


class Fatal(NamedTuple):
    """Attempt failed with non-recoverable transport error."""

    error: BaseException
    duration: float = 0.0


Outcome = Union[Success, Timeout, Fatal]
TransportResult = Union[Response, Timeout, Fatal]


class Attempt(NamedTuple):
    """
    Single request/response cycle.

    Attributes:
        seq: Sequence number, starting from 0.
        outcome: Attempt's outcome.
    """

    seq: int
    outcome: Outcome

    @property
    def is_success(self: "Attempt") -> bool:
        """Check if the attempt is successful."""
        return isinstance(self.outcome, Success)
