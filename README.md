# overlaynet

Building blocks for a layer-3 overlay network. The package provides exact
IPv4 and IPv6 address and subnet arithmetic. It also handles the
configuration and lease data that a VXLAN or WireGuard backend needs.

It needs nothing beyond the Python standard library.

## Installation

```
pip install overlaynet
```

## IPv4 subnets: `overlaynet.ip4`

`IP4` stores an address as a 32-bit integer. `IP4Net` pairs an `IP4`
with a prefix length.

```python
from overlaynet.ip4 import parse_ip4, parse_ip4net

net = parse_ip4net("1.2.3.0/24")
net.contains(parse_ip4("1.2.3.4"))        # True
net.overlaps(parse_ip4net("1.2.0.0/16"))  # True
str(net.next())                           # '1.2.4.0/24'
net.to_json()                             # '"1.2.3.0/24"'
parse_ip4("1.2.3.4").string_sep("*")      # '1*2*3*4'
parse_ip4("10.1.2.3").is_private()        # True (RFC 1918)
```

`IP4Net` has these methods:

- `network()`
- `next()`
- `increment_ip()`
- `mask()`
- `contains_cidr()`
- `empty()`
- `to_ipnet()`, which returns an `ipaddress.IPv4Interface`.

The module-level helpers are:

- `from_bytes`
- `from_ip`
- `from_ipnet`
- `map_ip4_to_string`
- `natively_little`

`IP4.network_order()` returns the integer whose layout in memory is the address in network byte order.

## IPv6 subnets: `overlaynet.ip6`

`IP6` stores an address as a 128-bit integer. `IP6Net` pairs an `IP6`
with a prefix length.

```python
from overlaynet.ip6 import parse_ip6, parse_ip6net

net6 = parse_ip6net("fc00:1::/64")
net6.contains(parse_ip6("fc00:1::1"))     # True
net6.overlaps(parse_ip6net("fc00::/16"))  # True
parse_ip6("fd00::1").is_private()         # True (RFC 4193)
```

The module-level helpers are:

- `mask(prefix_len)`
- `is_empty`
- `check_ipv6_subnet`
- `get_ipv6_subnet_min`
- `get_ipv6_subnet_max`
- `from_ip6`
- `from_ip16_bytes`
- `from_ip6net`
- `map_ip6_to_string`

## VXLAN backend data: `overlaynet.vxlan` and `overlaynet.vxlan_device`

`parse_vxlan_config` reads the backend section of a network configuration.
JSON field names are matched without regard to case. An empty section gives
the defaults: VNI 1, with the MTU taken from `default_mtu`.

```python
from overlaynet.vxlan import device_name, lease_attrs_from_json, parse_vxlan_config

cfg = parse_vxlan_config(b'{"VNI": 4, "DirectRouting": true}', default_mtu=1500)
cfg.direct_routing                        # True
device_name(cfg.vni)                      # 'flannel.4'
device_name(cfg.vni, ipv6=True)           # 'flannel-v6.4'

attrs = lease_attrs_from_json(b'{"VNI": 1, "VtepMAC": "02:00:00:00:00:01"}')
str(attrs.vtep_mac)                       # '02:00:00:00:00:01'
attrs.to_json()                           # '{"VNI":1,"VtepMAC":"02:00:00:00:00:01"}'
```

`parse_mac` accepts hardware addresses of 6, 8 or 20 octets. It takes
colon-separated, hyphen-separated or dotted notation. `HardwareAddr`
converts to and from JSON.

`parse_windows_vxlan_config` applies the Windows defaults and checks. It
raises `ValueError` in these cases:

- the VNI is below 4096;
- the port is anything other than 4789;
- `DirectRouting` or `GBP` is set;
- the MAC prefix is not of the form `xx-xx`.

If no name is given, the device name defaults to `flannel.<VNI>`.

In `overlaynet.vxlan_device`:

- `VxlanDeviceAttrs.to_link()` describes the `VxlanLink` to create.
- `links_incompat(l1, l2)` names the first setting in which two links
  disagree, or returns `''` when the existing link can be reused.
- `network_mtu(mtu)` subtracts the 50-byte encapsulation overhead.

## WireGuard backend data: `overlaynet.wireguard_config` and `overlaynet.wireguard_network`

```python
from overlaynet.ip4 import parse_ip4
from overlaynet.wireguard_config import Mode, parse_wireguard_config
from overlaynet.wireguard_network import network_mtu, peer_endpoint

cfg = parse_wireguard_config(b'{"Mode": "auto"}', default_mtu=1500)
cfg.mode is Mode.AUTO                     # True
cfg.listen_port, cfg.listen_port_v6       # (51820, 51821)

peer_endpoint(Mode.AUTO, parse_ip4("203.0.113.5"), None, 51820, None, None)
# '203.0.113.5:51820'
network_mtu(1500)                         # 1420
```

`Mode` has four values: `separate`, `auto`, `ipv4` and `ipv6`. An unknown
mode raises `ValueError("no valid Mode configured")`.

When a lease carries both an IPv4 and an IPv6 address,
`select_public_endpoint` picks one of them as follows:

- It prefers a public remote IPv4 address when this host has an external
  IPv4 address.
- Otherwise it uses IPv6 when both the remote address and this host's
  external IPv6 address are public.
- In every other case it falls back to IPv4.

`WireguardLeaseAttrs` holds the public key that is published with a lease.

## What the package does not do

The package works only on data. It does not do any of the following:

- create or configure VXLAN or WireGuard devices;
- set routes, ARP or forwarding entries;
- generate keys;
- acquire or watch subnet leases;
- run as a daemon.

Those steps are left to the program that uses these helpers.

## Running the tests

```
pip install -e ".[test]"
pytest
```