"""VXLAN device settings and the compatibility check for existing devices."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import Optional, Union

from overlaynet.vxlan import HardwareAddr

ENCAP_OVERHEAD = 50
LINK_TYPE = "vxlan"

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


def network_mtu(mtu: int) -> int:
    """MTU left for traffic once the VXLAN encapsulation overhead is taken off."""
    return mtu - ENCAP_OVERHEAD


@dataclass
class VxlanLink:
    """The attributes of a VXLAN network link."""

    name: str = ""
    hardware_addr: HardwareAddr = field(default_factory=HardwareAddr)
    mtu: int = 0
    vxlan_id: int = 0
    vtep_dev_index: int = 0
    src_addr: Optional[IPAddress] = None
    group: Optional[IPAddress] = None
    port: int = 0
    learning: bool = False
    l2miss: bool = False
    gbp: bool = False
    index: int = 0
    link_type: str = LINK_TYPE


@dataclass(frozen=True)
class VxlanDeviceAttrs:
    """What is asked of a VXLAN device before it is created."""

    vni: int
    name: str
    mtu: int
    vtep_index: int = 0
    vtep_addr: Optional[IPAddress] = None
    vtep_port: int = 0
    gbp: bool = False
    learning: bool = False

    def to_link(self, hardware_addr: HardwareAddr) -> VxlanLink:
        """Describe the link to create for these attributes."""
        return VxlanLink(
            name=self.name,
            hardware_addr=hardware_addr,
            mtu=network_mtu(self.mtu),
            vxlan_id=self.vni,
            vtep_dev_index=self.vtep_index,
            src_addr=self.vtep_addr,
            port=self.vtep_port,
            learning=self.learning,
            gbp=self.gbp,
        )


def _normalized(address: IPAddress) -> IPAddress:
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped is not None:
        return address.ipv4_mapped
    return address


def _differ(a: Optional[IPAddress], b: Optional[IPAddress]) -> bool:
    return a is not None and b is not None and _normalized(a) != _normalized(b)


def _fmt(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def links_incompat(l1: VxlanLink, l2: VxlanLink) -> str:
    """Describe the first setting in which two links disagree, or return ''."""
    if l1.link_type != l2.link_type:
        return f"link type: {l1.link_type} vs {l2.link_type}"
    if l1.vxlan_id != l2.vxlan_id:
        return f"vni: {l1.vxlan_id} vs {l2.vxlan_id}"
    if l1.vtep_dev_index > 0 and l2.vtep_dev_index > 0 and l1.vtep_dev_index != l2.vtep_dev_index:
        return f"vtep (external) interface: {l1.vtep_dev_index} vs {l2.vtep_dev_index}"
    if _differ(l1.src_addr, l2.src_addr):
        return f"vtep (external) IP: {l1.src_addr} vs {l2.src_addr}"
    if _differ(l1.group, l2.group):
        return f"group address: {l1.group} vs {l2.group}"
    if l1.l2miss != l2.l2miss:
        return f"l2miss: {_fmt(l1.l2miss)} vs {_fmt(l2.l2miss)}"
    if l1.port > 0 and l2.port > 0 and l1.port != l2.port:
        return f"port: {l1.port} vs {l2.port}"
    if l1.gbp != l2.gbp:
        return f"gbp: {_fmt(l1.gbp)} vs {_fmt(l2.gbp)}"
    return ""