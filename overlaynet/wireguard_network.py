"""Peer endpoint selection and MTU rules for the WireGuard backend."""

from __future__ import annotations

import ipaddress
from typing import Optional, Union

from overlaynet.ip4 import IP4
from overlaynet.ip6 import IP6, from_ip6
from overlaynet.wireguard_config import Mode

# 20-byte IPv4 header or 40-byte IPv6 header, 8-byte UDP header, 4-byte type,
# 4-byte key index, 8-byte nonce and a 16-byte authentication tag.
OVERHEAD = 80

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


def network_mtu(mtu: int) -> int:
    """MTU left for traffic once the WireGuard overhead is taken off."""
    return mtu - OVERHEAD


def select_public_endpoint(
    ip4: Optional[IP4],
    ip6: Optional[IP6],
    ext_addr: Optional[IPAddress],
    ext_v6_addr: Optional[IPAddress],
) -> str:
    """Pick the remote address most likely to allow a connection.

    With both families available, IPv4 is preferred when the remote address
    is public and this host has an external IPv4 address; IPv6 is used when
    the remote address and this host's external IPv6 address are both public.
    Otherwise IPv4 is used.
    """
    if ip4 is None and ip6 is None:
        raise ValueError("no public address to select an endpoint from")
    if ip6 is None:
        return str(ip4)
    if ip4 is None:
        return f"[{ip6}]"

    if not ip4.is_private() and ext_addr is not None:
        return str(ip4)

    if (
        not ip6.is_private()
        and ext_v6_addr is not None
        and not from_ip6(ext_v6_addr).is_private()
    ):
        return f"[{ip6}]"

    return str(ip4)


def peer_endpoint(
    mode: Union[Mode, str],
    public_ip: Optional[IP4],
    public_ipv6: Optional[IP6],
    listen_port: int,
    ext_addr: Optional[IPAddress],
    ext_v6_addr: Optional[IPAddress],
) -> str:
    """Endpoint of a remote peer for a single shared device in ``mode``."""
    try:
        mode = Mode(mode)
    except ValueError:
        raise ValueError("no valid Mode configured") from None

    if mode is Mode.IPV4:
        if public_ip is None:
            raise ValueError("lease has no public IPv4 address")
        return f"{public_ip}:{listen_port}"
    if mode is Mode.IPV6:
        if public_ipv6 is None:
            raise ValueError("lease has no public IPv6 address")
        return f"[{public_ipv6}]:{listen_port}"
    if mode is Mode.AUTO:
        host = select_public_endpoint(public_ip, public_ipv6, ext_addr, ext_v6_addr)
        return f"{host}:{listen_port}"
    raise ValueError("separate mode uses one endpoint per address family")