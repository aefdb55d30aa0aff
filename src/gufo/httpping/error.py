# ---------------------------------------------------------------------
# Gufo HTTP Ping: Errors
# ---------------------------------------------------------------------
# Copyright (C) 2022-25, Gufo Labs
# ---------------------------------------------------------------------

"""Gufo HTTP Ping exceptions."""

# Python modules
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .probe import RunState


class HttpPingError(Exception):
    """Base class for all Gufo HTTP Ping errors."""


class InvalidTarget(HttpPingError, ValueError):  # noqa: N818
    """Target string cannot be decomposed into scheme, host, port and path."""


class UnresolvableHost(HttpPingError):  # noqa: N818
    """Host name resolution failed or returned no addresses."""


class RequestError(HttpPingError):
    """Request cannot be constructed."""


class TransportFatal(HttpPingError):  # noqa: N818
    """
    Non-recoverable transport error, terminating the run.

    Args:
        error: Original transport error.
        state: Run state at the moment of failure.
    """

    def __init__(
        self: "TransportFatal",
        error: BaseException,
        state: Optional["RunState"] = None,
    ) -> None:
        super().__init__(str(error) or error.__class__.__name__)
        self.error = error
        self.state = state
