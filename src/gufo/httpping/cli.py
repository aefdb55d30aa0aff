# ---------------------------------------------------------------------
# Gufo HTTP Ping: Command-line utility
# ---------------------------------------------------------------------
# Copyright (C) 2024-25, Gufo Labs
# See LICENSE.md for details
# ---------------------------------------------------------------------
"""
`gufo-httpping` command line utility.

Attributes:
    NAME: Utility's name.
"""

# Python modules
import argparse
import asyncio
import logging
import re
import sys
from enum import IntEnum
from typing import List, NoReturn, Optional

# Gufo Labs modules
from . import report
from .cancel import CancelToken, Interrupter
from .error import HttpPingError, RequestError
from .outcome import Success, Timeout
from .probe import Probe, RunState
from .stats import Statistics
from .target import resolve
from .transport import HttpTransport

NAME = "gufo-httpping"
DESCRIPTION = (
    "Measure response time to the given web server "
    "by asking it to respond to an HTTP request."
)

rx_duration_part = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    """
    Cli exit codes.

    Attributes:
        OK: Successful exit
        ERR: Invalid target, unresolvable host or transport error
        USAGE: Invalid command-line arguments
        REQUEST: Request cannot be constructed
    """

    OK = 0
    ERR = 1
    USAGE = 2
    REQUEST = 3


def duration(v: str) -> float:
    """
    Parse duration.

    Accepts bare number of seconds or a sequence of
    `<number><unit>` parts, like `500ms`, `1.5s` or `1m30s`.

    Args:
        v: Duration string.

    Returns:
        Duration in seconds.

    Raises:
        ValueError: on invalid format.
    """
    v = v.strip()
    if not v:
        msg = "empty duration"
        raise ValueError(msg)
    try:
        return float(v)
    except ValueError:
        pass  # Try units
    pos = 0
    r = 0.0
    while pos < len(v):
        match = rx_duration_part.match(v, pos)
        if not match:
            msg = f"invalid duration: {v}"
            raise ValueError(msg)
        r += float(match.group(1)) * UNITS[match.group(2)]
        pos = match.end()
    return r


def get_body(data: Optional[str]) -> Optional[bytes]:
    """
    Get request body.

    Args:
        data: Body, or `@<filename>` to read body from file.

    Returns:
        Body bytes, or None when empty.

    Raises:
        RequestError: when file cannot be read.
    """
    if not data:
        return None
    if not data.startswith("@"):
        return data.encode()
    path = data[1:]
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        msg = f"cannot read request body from {path}: {e}"
        raise RequestError(msg) from e


class Cli(object):
    """`gufo-httpping` utility class."""

    def die(self: "Cli", msg: Optional[str] = None) -> NoReturn:
        """Die with message."""
        if msg:
            self.error(msg)
        sys.exit(ExitCode.USAGE)

    @staticmethod
    def error(msg: str) -> None:
        """Print error message."""
        print(f"Error: {msg}", file=sys.stderr)

    def run(self: "Cli", args: List[str]) -> ExitCode:
        """
        Parse command-line arguments and run appropriate command.

        Args:
            args: List of command-line arguments
        Returns:
            ExitCode
        """
        # Prepare command-line parser
        parser = argparse.ArgumentParser(prog=NAME, description=DESCRIPTION)
        parser.add_argument("uri", nargs=1, help="URI to ping")
        parser.add_argument(
            "-X",
            "--method",
            default="GET",
            help="HTTP method to use (default: %(default)s)",
        )
        parser.add_argument(
            "-d",
            "--data",
            help="The body of a POST or PUT request; from file use @filename",
        )
        parser.add_argument(
            "-c",
            "--count",
            type=int,
            default=10,
            help="Number of times to query (default: %(default)s)",
        )
        parser.add_argument(
            "-W",
            "--interval",
            type=duration,
            default="1s",
            help="Wait time between pings (default: %(default)s)",
        )
        parser.add_argument(
            "-t",
            "--timeout",
            type=duration,
            default="2s",
            help="Amount of time to wait for a response "
            "(default: %(default)s)",
        )
        parser.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Enable debug logging",
        )
        # Parse arguments
        ns = parser.parse_args(args)
        if ns.count < 0:
            self.die("count must not be negative")
        if ns.timeout <= 0:
            self.die("timeout must be positive")
        if ns.interval < 0:
            self.die("interval must not be negative")
        if ns.verbose:
            logging.basicConfig(
                level=logging.DEBUG,
                stream=sys.stderr,
                format="%(asctime)s [%(name)s] %(message)s",
            )
        try:
            body = get_body(ns.data)
        except RequestError as e:
            self.error(str(e))
            return ExitCode.REQUEST
        # Setup loop
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        token = CancelToken()
        Interrupter(token).install(loop)
        main_task = loop.create_task(
            self._run(
                ns.uri[0],
                method=ns.method,
                body=body,
                count=ns.count,
                interval=ns.interval,
                timeout=ns.timeout,
                token=token,
            )
        )
        # Run
        try:
            return loop.run_until_complete(main_task)
        finally:
            loop.close()

    async def _run(
        self: "Cli",
        /,
        uri: str,
        method: str,
        body: Optional[bytes],
        count: int,
        interval: float,
        timeout: float,
        token: CancelToken,
    ) -> ExitCode:
        try:
            target = await resolve(uri, method=method)
        except HttpPingError as e:
            self.error(str(e))
            return ExitCode.ERR
        if token.stopping:
            logger.debug("Interrupted during resolution, nothing to report")
            return ExitCode.OK
        address = target.address or target.host
        logger.debug("Probing %s at %s", target.url, address)
        print(report.header(target))
        state = RunState()
        async with HttpTransport(body=body) as transport:
            probe = Probe(
                transport,
                token=token,
                count=count,
                interval=interval,
                timeout=timeout,
            )
            async for attempt in probe.iter_attempts(target, state):
                if isinstance(attempt.outcome, Success):
                    print(report.success(attempt, address))
                elif isinstance(attempt.outcome, Timeout):
                    print(report.timeout(attempt))
        if state.error is not None:
            self.error(str(state.error) or repr(state.error))
            return ExitCode.ERR
        print()
        print(
            report.summary(
                target.host,
                Statistics.from_state(state),
                sent=state.requests_sent,
                received=state.received,
            )
        )
        return ExitCode.OK


def main(args: Optional[List[str]] = None) -> int:
    """Run `gufo-httpping` with command-line arguments."""
    if args is None:
        args = sys.argv[1:]
    return Cli().run(args).value
