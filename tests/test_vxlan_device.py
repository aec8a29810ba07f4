import dataclasses
import ipaddress

import pytest

from overlaynet.vxlan import parse_mac
from overlaynet.vxlan_device import (
    VxlanDeviceAttrs,
    VxlanLink,
    links_incompat,
    network_mtu,
)

MAC = parse_mac("02:00:00:00:00:01")


def _attrs(**kwargs):
    base = dict(
        vni=1,
        name="flannel.1",
        mtu=1500,
        vtep_index=3,
        vtep_addr=ipaddress.ip_address("10.0.0.1"),
        vtep_port=8472,
        gbp=False,
        learning=True,
    )
    base.update(kwargs)
    return VxlanDeviceAttrs(**base)


def test_network_mtu_pinned():
    assert network_mtu(1500) == 1450


def test_to_link_copies_settings():
    attrs = _attrs()
    link = attrs.to_link(MAC)
    assert link.name == "flannel.1"
    assert link.vxlan_id == 1
    assert link.vtep_dev_index == 3
    assert link.src_addr == ipaddress.ip_address("10.0.0.1")
    assert link.port == 8472
    assert link.learning is True
    assert link.gbp is False
    assert link.hardware_addr == MAC
    assert link.link_type == "vxlan"


def test_to_link_takes_off_overhead():
    attrs = _attrs(mtu=9000)
    assert attrs.to_link(MAC).mtu == network_mtu(9000)


def test_identical_links_compatible():
    link = _attrs().to_link(MAC)
    assert links_incompat(link, dataclasses.replace(link)) == ""


def test_link_type_differs():
    a = VxlanLink(link_type="vxlan")
    b = VxlanLink(link_type="bridge")
    assert links_incompat(a, b) == "link type: vxlan vs bridge"


def test_vni_differs_reported_before_port():
    a = VxlanLink(vxlan_id=1, port=8472)
    b = VxlanLink(vxlan_id=2, port=4789)
    assert links_incompat(a, b) == "vni: 1 vs 2"


def test_vtep_index_ignored_when_unset():
    a = VxlanLink(vtep_dev_index=0)
    b = VxlanLink(vtep_dev_index=7)
    assert links_incompat(a, b) == ""


def test_vtep_index_differs():
    a = VxlanLink(vtep_dev_index=2)
    b = VxlanLink(vtep_dev_index=7)
    assert links_incompat(a, b) == "vtep (external) interface: 2 vs 7"


def test_src_addr_differs():
    a = VxlanLink(src_addr=ipaddress.ip_address("10.0.0.1"))
    b = VxlanLink(src_addr=ipaddress.ip_address("10.0.0.2"))
    assert links_incompat(a, b) == "vtep (external) IP: 10.0.0.1 vs 10.0.0.2"


def test_src_addr_missing_ignored():
    a = VxlanLink(src_addr=None)
    b = VxlanLink(src_addr=ipaddress.ip_address("10.0.0.2"))
    assert links_incompat(a, b) == ""


def test_src_addr_mapped_form_matches():
    a = VxlanLink(src_addr=ipaddress.ip_address("10.0.0.1"))
    b = VxlanLink(src_addr=ipaddress.ip_address("::ffff:10.0.0.1"))
    assert links_incompat(a, b) == ""


def test_group_differs():
    a = VxlanLink(group=ipaddress.ip_address("239.1.1.1"))
    b = VxlanLink(group=ipaddress.ip_address("239.1.1.2"))
    assert links_incompat(a, b) == "group address: 239.1.1.1 vs 239.1.1.2"


def test_l2miss_differs():
    assert links_incompat(VxlanLink(l2miss=False), VxlanLink(l2miss=True)) == "l2miss: false vs true"


@pytest.mark.parametrize("p1,p2", [(0, 4789), (4789, 0), (4789, 4789)])
def test_port_ignored_or_equal(p1, p2):
    assert links_incompat(VxlanLink(port=p1), VxlanLink(port=p2)) == ""


def test_port_differs():
    assert links_incompat(VxlanLink(port=8472), VxlanLink(port=4789)) == "port: 8472 vs 4789"


def test_gbp_differs():
    assert links_incompat(VxlanLink(gbp=True), VxlanLink(gbp=False)) == "gbp: true vs false"


def test_learning_not_compared():
    assert links_incompat(VxlanLink(learning=True), VxlanLink(learning=False)) == ""