# ---------------------------------------------------------------------
# Gufo HTTP Ping: TransportProto
# ---------------------------------------------------------------------
# Copyright (C) 2022-25, Gufo Labs
# ---------------------------------------------------------------------

"""Transport protocol definition."""

# Python modules
from typing import Protocol

# Gufo Labs modules
from .outcome import TransportResult
from .target import Target


class TransportProto(Protocol):
    """
    Transport protocol.

    Transport is the network collaborator of the probe loop.
    It sends a single request and classifies the result
    explicitly, so the probe never inspects error internals.
    """

    async def request(
        self: "TransportProto", target: Target, timeout: float
    ) -> TransportResult:
        """
        Send request and await the full response.

        Args:
            target: Resolved target.
            timeout: Request deadline, in seconds.

        Returns:
            * `Response` - when response is received.
            * `Timeout` - when deadline exceeded.
            * `Fatal` - on any other transport error.
        """
        ...

    async def close(self: "TransportProto") -> None:
        """Release all held resources."""
        ...
