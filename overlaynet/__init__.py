"""IPv4/IPv6 address arithmetic and VXLAN/WireGuard backend configuration for overlay networks."""

__version__ = "0.1.0"
__all__ = ["ip4", "ip6", "vxlan", "vxlan_device", "wireguard_config", "wireguard_network"]