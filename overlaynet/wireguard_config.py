"""WireGuard backend configuration and lease attributes."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from enum import Enum
from typing import Union

from overlaynet.vxlan import (
    JSONInput,
    _boolean,
    _decode,
    _int64,
    _object_pairs,
    _text,
)

BACKEND_TYPE = "wireguard"
DEFAULT_LISTEN_PORT = 51820
DEFAULT_LISTEN_PORT_V6 = 51821
DEVICE_NAME = "flannel-wg"
DEVICE_NAME_V6 = "flannel-wg-v6"


class Mode(str, Enum):
    """How IPv4 and IPv6 traffic is spread over WireGuard devices."""

    SEPARATE = "separate"
    AUTO = "auto"
    IPV4 = "ipv4"
    IPV6 = "ipv6"


@dataclass(frozen=True)
class WireguardConfig:
    """Settings of the WireGuard backend."""

    listen_port: int = DEFAULT_LISTEN_PORT
    listen_port_v6: int = DEFAULT_LISTEN_PORT_V6
    mtu: int = 0
    psk: str = ""
    persistent_keepalive_interval: int = 0
    mode: Mode = Mode.SEPARATE

    def keepalive_seconds(self) -> int:
        """Persistent keepalive interval, counted in seconds."""
        return self.persistent_keepalive_interval


_FIELDS = {
    "ListenPort": ("listen_port", _int64),
    "ListenPortV6": ("listen_port_v6", _int64),
    "MTU": ("mtu", _int64),
    "PSK": ("psk", _text),
    "PersistentKeepaliveInterval": ("persistent_keepalive_interval", _int64),
    "Mode": ("mode", _text),
}


def parse_wireguard_config(data: JSONInput, default_mtu: int) -> WireguardConfig:
    """Decode the backend section of the network config; empty data gives defaults."""
    config = WireguardConfig(mtu=default_mtu)
    if data:
        try:
            values = _decode(_object_pairs(data, "WireGuard backend config"), _FIELDS)
        except ValueError as exc:
            raise ValueError(f"error decoding backend config: {exc}") from exc
        if "mode" in values:
            try:
                values["mode"] = Mode(values["mode"])
            except ValueError:
                raise ValueError("no valid Mode configured") from None
        config = dataclasses.replace(config, **values)
    return config


def _go_json_string(s: str) -> str:
    return (
        json.dumps(s, ensure_ascii=False)
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


@dataclass(frozen=True)
class WireguardLeaseAttrs:
    """Backend data published with a WireGuard lease."""

    public_key: str = ""

    def to_json(self) -> str:
        return f'{{"PublicKey":{_go_json_string(self.public_key)}}}'

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> WireguardLeaseAttrs:
        pairs = _object_pairs(data, "WireGuard lease attributes")
        return cls(**_decode(pairs, {"PublicKey": ("public_key", _text)}))


__all__ = [
    "Mode",
    "WireguardConfig",
    "WireguardLeaseAttrs",
    "parse_wireguard_config",
    "_boolean",
]