# ---------------------------------------------------------------------
# Gufo HTTP Ping: Target resolver
# ---------------------------------------------------------------------
# Copyright (C) 2022-25, Gufo Labs
# ---------------------------------------------------------------------

"""
Target normalization and resolution.

Attributes:
    HTTP: Plain HTTP scheme.
    HTTPS: HTTP over TLS scheme.
    DEFAULT_PORTS: Default port for each scheme.
"""

# Python modules
import asyncio
import ipaddress
import logging
import re
import socket
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Dict, List, Optional
from urllib.parse import urlsplit

# Gufo Labs modules
from .error import InvalidTarget, UnresolvableHost

HTTP = "http"
HTTPS = "https"
DEFAULT_PORTS: Dict[str, int] = {HTTP: 80, HTTPS: 443}
MAX_PORT = 65535
rx_token = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")

Resolver = Callable[[str], Awaitable[List[str]]]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Target(object):
    """
    Fully-qualified probe target.

    Args:
        scheme: Either `http` or `https`.
        host: Host name or IP address, as given by user.
        port: TCP port.
        path: Request path, including query string.
        method: HTTP method.
        address: Resolved IP address, if known.
    """

    scheme: str
    host: str
    port: int
    path: str = "/"
    method: str = "GET"
    address: Optional[str] = None

    @property
    def url(self: "Target") -> str:
        """Normalized URL, with explicit port."""
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.scheme}://{host}:{self.port}{self.path}"


def is_ip(host: str) -> bool:
    """
    Check if host is the literal IPv4/IPv6 address.

    Args:
        host: Host name or address.

    Returns:
        True, if host is an IP address.
    """
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def parse(raw: str, method: str = "GET") -> Target:
    """
    Normalize user-supplied string into Target.

    `raw` may be a full URL or a bare `host[:port][/path]`.
    Missing scheme is `https`, unless explicit port is 80.
    Missing port is derived from scheme, missing path is `/`.
    No name resolution is performed.

    Args:
        raw: User input.
        method: HTTP method.

    Returns:
        Target without resolved address.

    Raises:
        InvalidTarget: if `raw` cannot be decomposed.
    """
    if not rx_token.fullmatch(method):
        msg = f"invalid HTTP method: {method!r}"
        raise InvalidTarget(msg)
    uri = raw.strip()
    if "://" not in uri and not uri.startswith("//"):
        uri = f"//{uri}"
    try:
        parts = urlsplit(uri)
        port = parts.port
    except ValueError as e:
        msg = f"invalid URI {raw}: {e}"
        raise InvalidTarget(msg) from e
    host = parts.hostname
    if not host:
        msg = f"invalid URI {raw}: no host"
        raise InvalidTarget(msg)
    if not is_ip(host):
        try:
            host.encode("idna")
        except UnicodeError as e:
            msg = f"invalid URI {raw}: invalid host name {host}"
            raise InvalidTarget(msg) from e
    if port is not None and port < 1:
        msg = f"invalid URI {raw}: port must be in 1..{MAX_PORT} range"
        raise InvalidTarget(msg)
    scheme = parts.scheme.lower()
    if not scheme:
        scheme = HTTP if port == DEFAULT_PORTS[HTTP] else HTTPS
    elif scheme not in DEFAULT_PORTS:
        msg = f"invalid URI {raw}: unsupported scheme {scheme}"
        raise InvalidTarget(msg)
    path = parts.path or "/"
    if parts.query:
        path = f"{path}?{parts.query}"
    return Target(
        scheme=scheme,
        host=host,
        port=DEFAULT_PORTS[scheme] if port is None else port,
        path=path,
        method=method.upper(),
    )


async def getaddrinfo_resolver(host: str) -> List[str]:
    """
    Resolve host name via the running loop's getaddrinfo.

    Args:
        host: Host name.

    Returns:
        List of addresses, in resolver's order, without duplicates.
    """
    infos = await asyncio.get_running_loop().getaddrinfo(
        host, None, type=socket.SOCK_STREAM
    )
    r: List[str] = []
    for _, _, _, _, sockaddr in infos:
        addr = str(sockaddr[0])
        if addr not in r:
            r.append(addr)
    return r


async def resolve(
    raw: str, method: str = "GET", resolver: Optional[Resolver] = None
) -> Target:
    """
    Normalize user input and resolve host to an address.

    Resolution is performed once, the first address
    is cached in the `Target.address`.

    Args:
        raw: User input.
        method: HTTP method.
        resolver: Async callable, returning the list of
            addresses for the host name. Use `getaddrinfo_resolver`
            when empty.

    Returns:
        Target with resolved address.

    Raises:
        InvalidTarget: if `raw` cannot be decomposed.
        UnresolvableHost: if resolution failed.
    """
    target = parse(raw, method=method)
    return await resolve_target(target, resolver=resolver)


async def resolve_target(
    target: Target, resolver: Optional[Resolver] = None
) -> Target:
    """
    Fill Target's address, when necessary.

    Args:
        target: Parsed target.
        resolver: Name resolver.

    Returns:
        Target with resolved address.
    """
    if target.address:
        return target
    if is_ip(target.host):
        return replace(target, address=target.host)
    resolver = resolver or getaddrinfo_resolver
    try:
        addrs = await resolver(target.host)
    except (OSError, UnicodeError) as e:
        msg = f"cannot resolve server hostname: {target.host}"
        raise UnresolvableHost(msg) from e
    if not addrs:
        msg = f"cannot resolve server hostname: {target.host}"
        raise UnresolvableHost(msg)
    logger.debug("%s resolved to %s", target.host, ", ".join(addrs))
    return replace(target, address=addrs[0])
