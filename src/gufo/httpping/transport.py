# ---------------------------------------------------------------------
# Gufo HTTP Ping: HTTP transport
# ---------------------------------------------------------------------
# Copyright (C) 2022-25, Gufo Labs
# ---------------------------------------------------------------------

"""aiohttp-based transport implementation."""

# Python modules
import asyncio
import logging
import socket
from types import TracebackType
from typing import Any, Dict, List, Optional, Type

# Third-party modules
import aiohttp
from aiohttp.abc import AbstractResolver

# Gufo Labs modules
from .outcome import Fatal, Response, Timeout, TransportResult
from .target import Target

logger = logging.getLogger(__name__)


class StaticResolver(AbstractResolver):
    """
    aiohttp resolver, answering with pre-resolved addresses.

    Keeps host names in URLs, so `Host` header and TLS SNI
    remain intact, while DNS lookup is performed only once
    per run. Unknown hosts are passed to aiohttp's default resolver.
    """

    def __init__(self: "StaticResolver") -> None:
        self.__hosts: Dict[str, str] = {}
        self.__fallback: Optional[AbstractResolver] = None

    def add(self: "StaticResolver", host: str, address: str) -> None:
        """
        Bind host name to address.

        Args:
            host: Host name.
            address: IPv4/IPv6 address.
        """
        self.__hosts[host] = address

    async def resolve(
        self: "StaticResolver",
        host: str,
        port: int = 0,
        family: socket.AddressFamily = socket.AF_INET,
    ) -> List[Dict[str, Any]]:
        """Resolve host."""
        address = self.__hosts.get(host)
        if address is None:
            if self.__fallback is None:
                self.__fallback = aiohttp.DefaultResolver()
            return await self.__fallback.resolve(host, port, family)
        afi = socket.AF_INET6 if ":" in address else socket.AF_INET
        return [
            {
                "hostname": host,
                "host": address,
                "port": port,
                "family": afi,
                "proto": 0,
                "flags": socket.AI_NUMERICHOST,
            }
        ]

    async def close(self: "StaticResolver") -> None:
        """Close fallback resolver."""
        if self.__fallback is not None:
            await self.__fallback.close()
            self.__fallback = None


class HttpTransport(object):
    """
    HTTP/HTTPS transport.

    Sends a single request per call, reads and counts
    the response body, and classifies the result.
    Redirects are never followed.

    Args:
        body: Optional request body, passed as is.

    Example:
        ``` py
        async with HttpTransport() as transport:
            r = await transport.request(target, timeout=2.0)
        ```
    """

    def __init__(self: "HttpTransport", body: Optional[bytes] = None) -> None:
        self.__body = body
        self.__resolver = StaticResolver()
        self.__session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self: "HttpTransport") -> "HttpTransport":
        return self

    async def __aexit__(
        self: "HttpTransport",
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        await self.close()

    def __get_session(self: "HttpTransport") -> aiohttp.ClientSession:
        """
        Get client session.

        Initialize when necessary.

        Returns:
            Client session.
        """
        if self.__session is None:
            connector = aiohttp.TCPConnector(resolver=self.__resolver)
            self.__session = aiohttp.ClientSession(connector=connector)
        return self.__session

    async def request(
        self: "HttpTransport", target: Target, timeout: float
    ) -> TransportResult:
        """
        Send request and await the full response.

        Args:
            target: Resolved target.
            timeout: Request deadline, in seconds,
                covering connect, send and body read.

        Returns:
            * `Response` - when response is received.
            * `Timeout` - when deadline exceeded.
            * `Fatal` - on any other transport error.
        """
        if target.address:
            self.__resolver.add(target.host, target.address)
        session = self.__get_session()
        try:
            async with session.request(
                target.method,
                target.url,
                data=self.__body,
                allow_redirects=False,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as resp:
                size = 0
                async for chunk in resp.content.iter_any():
                    size += len(chunk)
                status = f"{resp.status} {resp.reason or ''}".rstrip()
        except asyncio.TimeoutError:
            return Timeout()
        except (aiohttp.ClientError, OSError) as e:
            logger.debug("%s %s failed: %r", target.method, target.url, e)
            return Fatal(error=e)
        return Response(byte_count=size, status=status)

    async def close(self: "HttpTransport") -> None:
        """Close session and release connections."""
        if self.__session is not None:
            await self.__session.close()
            self.__session = None
        await self.__resolver.close()
