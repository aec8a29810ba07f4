"""VXLAN backend configuration, lease attributes and hardware addresses."""

from __future__ import annotations

import dataclasses
import json
import logging
import string
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Union

log = logging.getLogger(__name__)

BACKEND_TYPE = "vxlan"
DEFAULT_VNI = 1
WINDOWS_DEFAULT_VNI = 4096
WINDOWS_VXLAN_PORT = 4789
DEFAULT_MAC_PREFIX = "0E-2A"

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_UINT16_MAX = 0xFFFF

JSONInput = Union[str, bytes, bytearray, Mapping[str, Any], None]


def _invalid_mac(s: str) -> ValueError:
    return ValueError(f"address {s}: invalid MAC address")


def _hex_groups(groups: list[str], width: int) -> bool:
    return all(len(g) == width and all(c in string.hexdigits for c in g) for g in groups)


def parse_mac(s: str) -> HardwareAddr:
    """Parse a 6, 8 or 20 octet hardware address.

    Accepted forms are colon or hyphen separated pairs of hex digits
    and dot separated groups of four hex digits.
    """
    if len(s) < 14:
        raise _invalid_mac(s)
    if s[2] in ":-":
        if (len(s) + 1) % 3:
            raise _invalid_mac(s)
        count = (len(s) + 1) // 3
        groups = s.split(s[2])
        width = 2
    elif s[4] == ".":
        if (len(s) + 1) % 5:
            raise _invalid_mac(s)
        count = 2 * (len(s) + 1) // 5
        groups = s.split(".")
        width = 4
    else:
        raise _invalid_mac(s)
    if count not in (6, 8, 20):
        raise _invalid_mac(s)
    if len(groups) * width // 2 != count or not _hex_groups(groups, width):
        raise _invalid_mac(s)
    return HardwareAddr(bytes.fromhex("".join(groups)))


@dataclass(frozen=True)
class HardwareAddr:
    """A link-layer address."""

    octets: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "octets", bytes(self.octets))

    def __str__(self) -> str:
        return ":".join(f"{b:02x}" for b in self.octets)

    def __bytes__(self) -> bytes:
        return self.octets

    def __len__(self) -> int:
        return len(self.octets)

    def to_json(self) -> str:
        return json.dumps(str(self))

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> HardwareAddr:
        return hardware_addr_from_json(data)


def hardware_addr_from_json(data: Union[str, bytes, bytearray]) -> HardwareAddr:
    """Decode a quoted hardware address as written by ``HardwareAddr.to_json``."""
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode("utf-8", errors="replace")
    if len(data) < 2 or not data.startswith('"') or not data.endswith('"'):
        raise ValueError("error parsing hardware addr")
    return parse_mac(data[1:-1])


# --- JSON object decoding with case-insensitive field names ------------------

class _Pairs(list):
    """Key/value pairs of one JSON object, in document order."""


_Converter = Callable[[Any, str], Any]


def _kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, _Pairs):
        return "object"
    if isinstance(value, list):
        return "array"
    return "object"


def _object_pairs(data: JSONInput, what: str) -> list[tuple[str, Any]]:
    if data is None:
        return []
    if isinstance(data, Mapping):
        return list(data.items())
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ValueError(f"invalid UTF-8 in {what}") from exc
    try:
        obj = json.loads(data, object_pairs_hook=_Pairs)
    except json.JSONDecodeError as exc:
        raise ValueError(str(exc)) from exc
    if obj is None:
        return []
    if not isinstance(obj, _Pairs):
        raise ValueError(f"cannot unmarshal {_kind(obj)} into {what}")
    return list(obj)


def _integer(lo: int, hi: int, type_name: str) -> _Converter:
    def convert(value: Any, name: str) -> Optional[int]:
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(
                f"cannot unmarshal {_kind(value)} into field {name} of type {type_name}"
            )
        if isinstance(value, float) or not lo <= value <= hi:
            raise ValueError(
                f"cannot unmarshal number {value} into field {name} of type {type_name}"
            )
        return value

    return convert


def _boolean(value: Any, name: str) -> Optional[bool]:
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ValueError(f"cannot unmarshal {_kind(value)} into field {name} of type bool")
    return value


def _text(value: Any, name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"cannot unmarshal {_kind(value)} into field {name} of type string")
    return value


def _mac(value: Any, name: str) -> HardwareAddr:
    if not isinstance(value, str):
        raise ValueError("error parsing hardware addr")
    return parse_mac(value)


_int64 = _integer(_INT64_MIN, _INT64_MAX, "int")
_uint16 = _integer(0, _UINT16_MAX, "uint16")


def _decode(
    pairs: list[tuple[str, Any]], fields: Mapping[str, tuple[str, _Converter]]
) -> dict[str, Any]:
    """Map JSON keys onto attribute names; a null value leaves a field unset."""
    lookup = {key.lower(): (key, attr, conv) for key, (attr, conv) in fields.items()}
    values: dict[str, Any] = {}
    for key, value in pairs:
        entry = lookup.get(str(key).lower())
        if entry is None:
            continue
        name, attr, conv = entry
        result = conv(value, name)
        if result is not None:
            values[attr] = result
    return values


# --- lease attributes ---------------------------------------------------------

@dataclass(frozen=True)
class VxlanLeaseAttrs:
    """Backend data published with a VXLAN lease."""

    vni: int = 0
    vtep_mac: HardwareAddr = field(default_factory=HardwareAddr)

    def __post_init__(self) -> None:
        if isinstance(self.vni, bool) or not 0 <= self.vni <= _UINT16_MAX:
            raise ValueError(f"VNI out of range for lease attributes: {self.vni}")

    def to_json(self) -> str:
        return f'{{"VNI":{self.vni},"VtepMAC":{self.vtep_mac.to_json()}}}'


_LEASE_FIELDS: dict[str, tuple[str, _Converter]] = {
    "VNI": ("vni", _uint16),
    "VtepMAC": ("vtep_mac", _mac),
}


def lease_attrs_from_json(data: JSONInput) -> VxlanLeaseAttrs:
    """Decode the backend data of a VXLAN lease."""
    pairs = _object_pairs(data, "VXLAN lease attributes")
    return VxlanLeaseAttrs(**_decode(pairs, _LEASE_FIELDS))


# --- backend configuration ----------------------------------------------------

def device_name(vni: int, ipv6: bool = False) -> str:
    """Name of the VXLAN device created for ``vni``."""
    return f"flannel-v6.{vni}" if ipv6 else f"flannel.{vni}"


@dataclass(frozen=True)
class VxlanConfig:
    """Settings of the VXLAN backend."""

    vni: int = DEFAULT_VNI
    port: int = 0
    mtu: int = 0
    gbp: bool = False
    learning: bool = False
    direct_routing: bool = False


_VXLAN_FIELDS: dict[str, tuple[str, _Converter]] = {
    "VNI": ("vni", _int64),
    "Port": ("port", _int64),
    "MTU": ("mtu", _int64),
    "GBP": ("gbp", _boolean),
    "Learning": ("learning", _boolean),
    "DirectRouting": ("direct_routing", _boolean),
}


def parse_vxlan_config(data: JSONInput, default_mtu: int) -> VxlanConfig:
    """Decode the backend section of the network config; empty data gives defaults."""
    config = VxlanConfig(mtu=default_mtu)
    if data:
        try:
            values = _decode(_object_pairs(data, "VXLAN backend config"), _VXLAN_FIELDS)
        except ValueError as exc:
            raise ValueError(f"error decoding VXLAN backend config: {exc}") from exc
        config = dataclasses.replace(config, **values)
    log.info(
        "VXLAN config: VNI=%d Port=%d GBP=%s Learning=%s DirectRouting=%s",
        config.vni, config.port, config.gbp, config.learning, config.direct_routing,
    )
    return config


@dataclass(frozen=True)
class WindowsVxlanConfig:
    """Settings of the VXLAN backend on a host-compute-network platform."""

    name: str = ""
    mac_prefix: str = DEFAULT_MAC_PREFIX
    vni: int = WINDOWS_DEFAULT_VNI
    port: int = WINDOWS_VXLAN_PORT
    gbp: bool = False
    direct_routing: bool = False


_WINDOWS_FIELDS: dict[str, tuple[str, _Converter]] = {
    "Name": ("name", _text),
    "MacPrefix": ("mac_prefix", _text),
    "VNI": ("vni", _int64),
    "Port": ("port", _int64),
    "GBP": ("gbp", _boolean),
    "DirectRouting": ("direct_routing", _boolean),
}


def _check_windows(config: WindowsVxlanConfig) -> None:
    if config.vni < WINDOWS_DEFAULT_VNI:
        raise ValueError(
            f"invalid VXLAN backend config. VNI [{config.vni}] must be greater than "
            f"or equal to {WINDOWS_DEFAULT_VNI} on Windows"
        )
    if config.port != WINDOWS_VXLAN_PORT:
        raise ValueError(
            f"invalid VXLAN backend config. Port [{config.port}] is not supported on "
            f"Windows. Omit the setting to default to port {WINDOWS_VXLAN_PORT}"
        )
    if config.direct_routing:
        raise ValueError(
            "invalid VXLAN backend config. DirectRouting is not supported on Windows"
        )
    if config.gbp:
        raise ValueError("invalid VXLAN backend config. GBP is not supported on Windows")
    prefix = config.mac_prefix.encode("utf-8")
    if len(prefix) != 5 or prefix[2:3] != b"-":
        raise ValueError(
            f"invalid VXLAN backend config.MacPrefix [{config.mac_prefix}] is invalid, "
            "prefix must be of the format xx-xx e.g. 0E-2A"
        )


def parse_windows_vxlan_config(data: JSONInput) -> WindowsVxlanConfig:
    """Decode and validate the backend section; the device name defaults from the VNI."""
    config = WindowsVxlanConfig()
    if data:
        try:
            values = _decode(_object_pairs(data, "VXLAN backend config"), _WINDOWS_FIELDS)
        except ValueError as exc:
            raise ValueError(f"error decoding VXLAN backend config: {exc}") from exc
        config = dataclasses.replace(config, **values)
    _check_windows(config)
    if not config.name:
        config = dataclasses.replace(config, name=device_name(config.vni))
    log.info(
        "VXLAN config: Name=%s MacPrefix=%s VNI=%d Port=%d GBP=%s DirectRouting=%s",
        config.name, config.mac_prefix, config.vni, config.port, config.gbp,
        config.direct_routing,
    )
    return config