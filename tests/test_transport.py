# ---------------------------------------------------------------------
# Gufo HTTP Ping: Test HttpTransport
# ---------------------------------------------------------------------
# Copyright (C) 2022-25, Gufo Labs
# ---------------------------------------------------------------------

# Python modules
import asyncio
import socket
from time import perf_counter
from typing import List, Optional

# Third-party modules
import pytest

# Gufo Labs modules
from gufo.httpping.cancel import CancelToken
from gufo.httpping.outcome import Fatal, Response, Timeout, TransportResult
from gufo.httpping.probe import Probe, RunState
from gufo.httpping.target import Target
from gufo.httpping.transport import HttpTransport, StaticResolver

from .util import aiohttp_server, free_port


def request(
    path: str,
    method: str = "GET",
    body: Optional[bytes] = None,
    timeout: float = 2.0,
    host: str = "127.0.0.1",
) -> TransportResult:
    async def inner() -> TransportResult:
        async with aiohttp_server() as port:
            target = Target(
                "http", host, port, path, method=method, address="127.0.0.1"
            )
            async with HttpTransport(body=body) as transport:
                return await transport.request(target, timeout)

    return asyncio.run(inner())


def test_response() -> None:
    r = request("/")
    assert r == Response(byte_count=13, status="200 OK")


def test_head() -> None:
    r = request("/", method="HEAD")
    assert isinstance(r, Response)
    assert r.byte_count == 0


def test_body() -> None:
    r = request("/echo", method="POST", body=b"ping" * 10)
    assert r == Response(byte_count=40, status="201 Created")


def test_no_redirects() -> None:
    r = request("/redirect")
    assert isinstance(r, Response)
    assert r.status == "302 Found"


def test_not_found() -> None:
    r = request("/missing")
    assert isinstance(r, Response)
    assert r.status == "404 Not Found"


def test_timeout() -> None:
    r = request("/slow", timeout=0.1)
    assert isinstance(r, Timeout)


def test_static_resolver_used() -> None:
    # Host name must never reach real DNS
    r = request("/", host="httpping.invalid")
    assert r == Response(byte_count=13, status="200 OK")


def test_connection_refused() -> None:
    async def inner() -> TransportResult:
        port = free_port()
        target = Target("http", "127.0.0.1", port, address="127.0.0.1")
        async with HttpTransport() as transport:
            return await transport.request(target, 2.0)

    r = asyncio.run(inner())
    assert isinstance(r, Fatal)
    assert isinstance(r.error, Exception)


@pytest.mark.parametrize(
    ("address", "family"),
    [("192.0.2.1", socket.AF_INET), ("2001:db8::1", socket.AF_INET6)],
)
def test_static_resolver(address: str, family: int) -> None:
    async def inner() -> None:
        resolver = StaticResolver()
        resolver.add("example.com", address)
        r = await resolver.resolve("example.com", 443)
        assert len(r) == 1
        assert r[0]["host"] == address
        assert r[0]["hostname"] == "example.com"
        assert r[0]["port"] == 443
        assert r[0]["family"] == family
        await resolver.close()

    asyncio.run(inner())


def test_close_twice() -> None:
    async def inner() -> None:
        transport = HttpTransport()
        await transport.close()
        await transport.close()

    asyncio.run(inner())


def test_cancel_in_flight() -> None:
    async def inner() -> RunState:
        async with aiohttp_server() as port:
            target = Target("http", "127.0.0.1", port, "/slow")
            async with HttpTransport() as transport:
                probe = Probe(transport, token=token, count=3, timeout=5.0)
                asyncio.get_running_loop().call_later(0.1, token.cancel)
                t0 = perf_counter()
                state = await probe.run(target)
                elapsed.append(perf_counter() - t0)
                return state

    token = CancelToken()
    elapsed: List[float] = []
    state = asyncio.run(inner())
    # Slow handler answers after 1 second
    assert elapsed[0] < 0.8
    assert state.requests_sent == 1
    assert state.durations == []
    assert state.error is None
