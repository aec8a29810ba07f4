"""IPv6 addresses and networks held as 128-bit integers."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Iterable, Optional, Union

_BITS = 128
_LIMIT = 1 << _BITS
_MAPPED_PREFIX = 0xFFFF << 32

AddressLike = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
NetworkLike = Union[
    ipaddress.IPv4Network,
    ipaddress.IPv4Interface,
    ipaddress.IPv6Network,
    ipaddress.IPv6Interface,
]


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
class IP6:
    """An IPv6 address as an unsigned 128-bit integer."""

    value: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.value < _LIMIT:
            raise ValueError(f"IPv6 value out of range: {self.value}")

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"IP6('{self}')"

    def __str__(self) -> str:
        return str(self.to_ip())

    def to_ip(self) -> AddressLike:
        """Return the address; values with exactly four significant bytes
        and IPv4-mapped values come back as IPv4 addresses."""
        if 1 << 24 <= self.value < 1 << 32:
            return ipaddress.IPv4Address(self.value)
        address = ipaddress.IPv6Address(self.value)
        mapped = address.ipv4_mapped
        return mapped if mapped is not None else address

    def to_json(self) -> str:
        return f'"{self}"'

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> IP6:
        return parse_ip6(_unquote(data))

    def cmp(self, other: IP6) -> int:
        return (self.value > other.value) - (self.value < other.value)

    def is_private(self) -> bool:
        """Report whether the leading byte marks an RFC 4193 private address."""
        if self.value == 0:
            raise ValueError("the zero address has no leading byte")
        shift = 8 * ((self.value.bit_length() - 1) // 8)
        return (self.value >> shift) & 0xFE == 0xFC


def from_ip16_bytes(ip: bytes) -> IP6:
    return IP6(int.from_bytes(bytes(ip), "big"))


def from_ip6(ip: AddressLike) -> IP6:
    """Convert an address; IPv4 addresses become IPv4-mapped IPv6 ones."""
    if isinstance(ip, ipaddress.IPv4Address):
        return IP6(_MAPPED_PREFIX | int(ip))
    if isinstance(ip, ipaddress.IPv6Address):
        return from_ip16_bytes(ip.packed)
    raise TypeError(f"expected an IP address, got {type(ip).__name__}")


def parse_ip6(s: str) -> IP6:
    return from_ip6(_parse_address(s))


def mask(prefix_len: int) -> int:
    """Return the 128-bit mask for ``prefix_len``, or 0 if it is out of range."""
    if not 0 <= prefix_len <= _BITS:
        return 0
    return ((1 << prefix_len) - 1) << (_BITS - prefix_len)


def is_empty(subnet: Optional[IP6]) -> bool:
    return subnet is None or subnet.value == 0


def get_ipv6_subnet_min(network_ip: IP6, subnet_size: int) -> IP6:
    return IP6(network_ip.value + subnet_size)


def get_ipv6_subnet_max(network_ip: IP6, subnet_size: int) -> IP6:
    return IP6(network_ip.value - subnet_size)


def check_ipv6_subnet(subnet_ip: IP6, mask: int) -> bool:
    return subnet_ip.value == subnet_ip.value & mask


@dataclass
class IP6Net:
    """An IPv6 network: an address and a prefix length."""

    ip: Optional[IP6] = None
    prefix_len: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.prefix_len <= _BITS:
            raise ValueError(f"invalid IPv6 prefix length: {self.prefix_len}")

    @property
    def _value(self) -> int:
        return self.ip.value if self.ip is not None else 0

    def __str__(self) -> str:
        return f"{self.ip or IP6()}/{self.prefix_len}"

    def string_sep(self, hex_sep: str, prefix_sep: str) -> str:
        return f"{self.ip or IP6()}{prefix_sep}{self.prefix_len}"

    def network(self) -> IP6Net:
        return IP6Net(IP6(self._value & self.mask()), self.prefix_len)

    def next(self) -> IP6Net:
        return IP6Net(IP6(self._value + (1 << (_BITS - self.prefix_len))), self.prefix_len)

    def increment_ip(self) -> None:
        self.ip = IP6(self._value + 1)

    def to_ipnet(self) -> ipaddress.IPv6Interface:
        return ipaddress.IPv6Interface((self._value, self.prefix_len))

    def overlaps(self, other: IP6Net) -> bool:
        m = self.mask() if self.prefix_len < other.prefix_len else other.mask()
        return (self._value & m) == (other._value & m)

    def mask(self) -> int:
        return mask(self.prefix_len)

    def contains(self, ip: IP6) -> bool:
        m = self.mask()
        return (self._value & m) == (ip.value & m)

    def contains_cidr(self, other: IP6Net) -> bool:
        return self.mask() <= other.mask() and self.contains(other.ip or IP6())

    def empty(self) -> bool:
        return is_empty(self.ip) and self.prefix_len == 0

    def to_json(self) -> str:
        return f'"{self}"'


def from_ip6net(n: NetworkLike) -> IP6Net:
    """Convert a network or interface object."""
    if isinstance(n, (ipaddress.IPv4Interface, ipaddress.IPv6Interface)):
        return IP6Net(from_ip6(n.ip), n.network.prefixlen)
    if isinstance(n, (ipaddress.IPv4Network, ipaddress.IPv6Network)):
        return IP6Net(from_ip6(n.network_address), n.prefixlen)
    raise TypeError(f"expected an IP network, got {type(n).__name__}")


def parse_ip6net(s: Union[str, bytes]) -> IP6Net:
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
    return from_ip6net(network)


def map_ip6_to_string(nws: Iterable[IP6Net]) -> list[str]:
    return [str(n) for n in nws]