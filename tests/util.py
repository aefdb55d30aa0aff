# ---------------------------------------------------------------------
# Gufo HTTP Ping: Test Utilities
# ---------------------------------------------------------------------
# Copyright (C) 2022-25, Gufo Labs
# ---------------------------------------------------------------------

# Python modules
import asyncio
import socket
import threading
from contextlib import asynccontextmanager, contextmanager
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, AsyncIterator, Iterator, List

# Third-party modules
from aiohttp import web

# Gufo Labs modules
from gufo.httpping.outcome import TransportResult
from gufo.httpping.target import Target


class FakeTransport(object):
    """
    Scripted transport.

    Returns prepared results in order, optionally
    sleeping for `delay` seconds before each one.

    Args:
        results: Results to return.
        delay: Delay before each result, in seconds.
    """

    def __init__(
        self: "FakeTransport",
        results: List[TransportResult],
        delay: float = 0.0,
    ) -> None:
        self.results = list(results)
        self.delay = delay
        self.calls: List[Target] = []
        self.closed = False

    async def request(
        self: "FakeTransport", target: Target, timeout: float
    ) -> TransportResult:
        self.calls.append(target)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.results[len(self.calls) - 1]

    async def close(self: "FakeTransport") -> None:
        self.closed = True


def free_port() -> int:
    """
    Get TCP port nobody listens on.

    Returns:
        Port number.
    """
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


async def _hello(request: web.Request) -> web.Response:
    return web.Response(text="Hello, world!")


async def _slow(request: web.Request) -> web.Response:
    await asyncio.sleep(1.0)
    return web.Response(text="Too late")


async def _echo(request: web.Request) -> web.Response:
    body = await request.read()
    return web.Response(body=body, status=201, reason="Created")


async def _redirect(request: web.Request) -> web.Response:
    raise web.HTTPFound("/")


@asynccontextmanager
async def aiohttp_server() -> AsyncIterator[int]:
    """
    Run aiohttp test server on loopback.

    Routes:
        * `/` - 13 bytes of text.
        * `/slow` - responds after 1 second.
        * `/echo` - returns request body with 201 status.
        * `/redirect` - 302 to `/`.

    Returns:
        Yields listening port.
    """
    app = web.Application()
    app.router.add_route("*", "/", _hello)
    app.router.add_get("/slow", _slow)
    app.router.add_route("*", "/echo", _echo)
    app.router.add_get("/redirect", _redirect)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    try:
        yield runner.addresses[0][1]
    finally:
        await runner.cleanup()


class _Handler(BaseHTTPRequestHandler):
    def do_GET(self: "_Handler") -> None:  # noqa: N802
        body = b"pong"
        self.send_response(200)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self: "_Handler", format: str, *args: Any) -> None:
        pass  # Keep test output clean


@contextmanager
def threaded_server() -> Iterator[int]:
    """
    Run blocking HTTP server in a separate thread.

    Used when the code under test owns the event loop.

    Returns:
        Yields listening port.
    """
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server.server_address[1]
    finally:
        server.shutdown()
        server.server_close()


def as_str(v: Any) -> str:
    """
    Format parameters for @parametrize(..., ids).

    Args:
        v: Input parameters.

    Returns:
        String to display as test id.

    Example:
        ``` py
        @pytest.mark.parametrize(...., ids=as_str)
        ```
    """
    return str(v)
