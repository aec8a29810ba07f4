"""IPv4 addresses and networks held as plain 32-bit integers."""

from __future__ import annotations

import ipaddress
import sys
from dataclasses import dataclass, field
from typing import Iterable, Union

_MAX = 0xFFFFFFFF

AddressLike = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
NetworkLike = Union[ipaddress.IPv4Network, ipaddress.IPv4Interface]


def natively_little() -> bool:
    """Report whether this machine stores integers little-endian."""
    return sys.byteorder == "little"


def _unquote(data: Union[str, bytes]) -> str:
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode()
    return data.strip('"')


def _parse_address(s: str) -> AddressLike:
    if "%" in s:
        raise ValueError("Invalid IP address format")
    try:
        return ipaddress.ip_address(s)
    except ValueError:
        raise ValueError("Invalid IP address format") from None


@dataclass(frozen=True, order=True, repr=False)
class IP4:
    """An IPv4 address as an unsigned 32-bit integer in host order."""

    value: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.value <= _MAX:
            raise ValueError(f"IPv4 value out of range: {self.value}")

    def __int__(self) -> int:
        return self.value

    def __add__(self, other: int) -> IP4:
        return IP4((self.value + int(other)) & _MAX)

    def __repr__(self) -> str:
        return f"IP4('{self}')"

    def __str__(self) -> str:
        return str(self.to_ip())

    def octets(self) -> tuple[int, int, int, int]:
        a, b, c, d = self.value.to_bytes(4, "big")
        return a, b, c, d

    def to_ip(self) -> ipaddress.IPv4Address:
        return ipaddress.IPv4Address(self.value)

    def network_order(self) -> int:
        """Return the integer whose in-memory layout is the address in network byte order."""
        if natively_little():
            return int.from_bytes(self.value.to_bytes(4, "big"), "little")
        return self.value

    def string_sep(self, sep: str) -> str:
        return sep.join(str(octet) for octet in self.octets())

    def to_json(self) -> str:
        return f'"{self}"'

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> IP4:
        return parse_ip4(_unquote(data))

    def is_private(self) -> bool:
        """Report whether the address is private according to RFC 1918."""
        a, b, _, _ = self.octets()
        return a == 10 or (a == 172 and b & 0xF0 == 16) or (a == 192 and b == 168)


def from_bytes(ip: bytes) -> IP4:
    """Build an address from the first four bytes of ``ip``."""
    if len(ip) < 4:
        raise ValueError("at least four bytes are needed for an IPv4 address")
    return IP4(int.from_bytes(bytes(ip[:4]), "big"))


def from_ip(ip: AddressLike) -> IP4:
    """Convert an IPv4 (or IPv4-mapped IPv6) address."""
    if isinstance(ip, ipaddress.IPv6Address):
        mapped = ip.ipv4_mapped
        if mapped is None:
            raise ValueError("Address is not an IPv4 address")
        ip = mapped
    if not isinstance(ip, ipaddress.IPv4Address):
        raise TypeError(f"expected an IP address, got {type(ip).__name__}")
    return from_bytes(ip.packed)


def parse_ip4(s: str) -> IP4:
    return from_ip(_parse_address(s))


@dataclass
class IP4Net:
    """An IPv4 network: an address and a prefix length."""

    ip: IP4 = field(default_factory=IP4)
    prefix_len: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.prefix_len <= 32:
            raise ValueError(f"invalid IPv4 prefix length: {self.prefix_len}")

    def __str__(self) -> str:
        return f"{self.ip}/{self.prefix_len}"

    def string_sep(self, octet_sep: str, prefix_sep: str) -> str:
        return f"{self.ip.string_sep(octet_sep)}{prefix_sep}{self.prefix_len}"

    def network(self) -> IP4Net:
        return IP4Net(IP4(self.ip.value & self.mask()), self.prefix_len)

    def next(self) -> IP4Net:
        return IP4Net(self.ip + (1 << (32 - self.prefix_len)), self.prefix_len)

    def increment_ip(self) -> None:
        self.ip = self.ip + 1

    def to_ipnet(self) -> ipaddress.IPv4Interface:
        return ipaddress.IPv4Interface((self.ip.value, self.prefix_len))

    def overlaps(self, other: IP4Net) -> bool:
        mask = self.mask() if self.prefix_len < other.prefix_len else other.mask()
        return (self.ip.value & mask) == (other.ip.value & mask)

    def mask(self) -> int:
        return (_MAX << (32 - self.prefix_len)) & _MAX

    def contains(self, ip: IP4) -> bool:
        mask = self.mask()
        return (self.ip.value & mask) == (ip.value & mask)

    def contains_cidr(self, other: IP4Net) -> bool:
        return self.mask() <= other.mask() and self.contains(other.ip)

    def empty(self) -> bool:
        return self.ip.value == 0 and self.prefix_len == 0

    def to_json(self) -> str:
        return f'"{self}"'


def from_ipnet(n: NetworkLike) -> IP4Net:
    """Convert an IPv4 network or interface."""
    if isinstance(n, ipaddress.IPv4Interface):
        return IP4Net(from_ip(n.ip), n.network.prefixlen)
    if isinstance(n, ipaddress.IPv4Network):
        return IP4Net(from_ip(n.network_address), n.prefixlen)
    if isinstance(n, (ipaddress.IPv6Network, ipaddress.IPv6Interface)):
        raise ValueError("Address is not an IPv4 address")
    raise TypeError(f"expected an IPv4 network, got {type(n).__name__}")


def parse_ip4net(s: Union[str, bytes]) -> IP4Net:
    """Parse CIDR notation, optionally in JSON quotes; the address is masked to its network."""
    text = _unquote(s)
    addr, sep, prefix = text.partition("/")
    if not sep or not prefix.isascii() or not prefix.isdigit():
        raise ValueError(f"invalid CIDR address: {text}")
    try:
        address = _parse_address(addr)
        network = ipaddress.ip_network(f"{address}/{int(prefix)}", strict=False)
    except ValueError:
        raise ValueError(f"invalid CIDR address: {text}") from None
    return from_ipnet(network)


def map_ip4_to_string(nws: Iterable[IP4Net]) -> list[str]:
    return [str(n) for n in nws]