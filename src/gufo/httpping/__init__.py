# ---------------------------------------------------------------------
# Gufo HTTP Ping: HTTP latency probe
# ---------------------------------------------------------------------
# Copyright (C) 2022-25, Gufo Labs
# ---------------------------------------------------------------------

"""
Gufo HTTP Ping is the Python asyncio HTTP latency probe.

Attributes:
    __version__: Current version.
"""

# Gufo Labs modules
from .cancel import CancelToken, Interrupter
from .error import (
    HttpPingError,
    InvalidTarget,
    RequestError,
    TransportFatal,
    UnresolvableHost,
)
from .outcome import Attempt, Fatal, Success, Timeout
from .probe import Probe, RunState
from .stats import Statistics, summarize
from .target import Target, parse, resolve
from .transport import HttpTransport

__version__: str = "0.1.0"
__all__ = [
    "Attempt",
    "CancelToken",
    "Fatal",
    "HttpPingError",
    "HttpTransport",
    "Interrupter",
    "InvalidTarget",
    "Probe",
    "RequestError",
    "RunState",
    "Statistics",
    "Success",
    "Target",
    "Timeout",
    "TransportFatal",
    "UnresolvableHost",
    "__version__",
    "parse",
    "resolve",
    "summarize",
]
