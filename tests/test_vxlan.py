import pytest

from overlaynet.vxlan import (
    HardwareAddr,
    VxlanConfig,
    VxlanLeaseAttrs,
    WindowsVxlanConfig,
    device_name,
    hardware_addr_from_json,
    lease_attrs_from_json,
    parse_mac,
    parse_vxlan_config,
    parse_windows_vxlan_config,
)

MAC = "02:00:00:00:00:01"


def test_parse_mac_forms_agree():
    colon = parse_mac(MAC)
    assert parse_mac("02-00-00-00-00-01") == colon
    assert parse_mac("0200.0000.0001") == colon


def test_parse_mac_string_round_trip():
    assert str(parse_mac(MAC)) == MAC


def test_parse_mac_uppercase_is_lowered():
    assert str(parse_mac("0A:00:00:00:00:0B")) == str(parse_mac("0a:00:00:00:00:0b"))


def test_parse_mac_long_forms():
    assert len(parse_mac("02:00:00:00:00:00:00:01")) == 8
    twenty = ":".join(["00"] * 19 + ["01"])
    assert len(parse_mac(twenty)) == 20
    assert str(parse_mac(twenty)) == twenty


@pytest.mark.parametrize(
    "text",
    [
        "",
        "02:00:00:00:00",
        "02:00:00:00:00:0g",
        "02:00-00:00:00:01",
        "0200.0000.000",
        "020000000001",
        "02:00:00:00:00:01:02",
        "020:00:00:00:00:01",
    ],
)
def test_parse_mac_rejects(text):
    with pytest.raises(ValueError, match="invalid MAC address"):
        parse_mac(text)


def test_hardware_addr_json_round_trip():
    addr = parse_mac(MAC)
    assert addr.to_json() == f'"{MAC}"'
    assert hardware_addr_from_json(addr.to_json()) == addr
    assert HardwareAddr.from_json(addr.to_json().encode()) == addr


@pytest.mark.parametrize("data", ["x", '"', MAC, f'"{MAC}', 5])
def test_hardware_addr_from_json_needs_quotes(data):
    if isinstance(data, int):
        data = str(data)
    with pytest.raises(ValueError, match="error parsing hardware addr"):
        hardware_addr_from_json(data)


def test_empty_hardware_addr_json():
    empty = HardwareAddr()
    assert empty.to_json() == '""'
    with pytest.raises(ValueError, match="invalid MAC address"):
        hardware_addr_from_json(empty.to_json())


def test_lease_attrs_to_json_layout():
    attrs = VxlanLeaseAttrs(vni=1, vtep_mac=parse_mac(MAC))
    assert attrs.to_json() == f'{{"VNI":1,"VtepMAC":"{MAC}"}}'


def test_lease_attrs_round_trip():
    attrs = VxlanLeaseAttrs(vni=4096, vtep_mac=parse_mac(MAC))
    assert lease_attrs_from_json(attrs.to_json()) == attrs
    assert lease_attrs_from_json(attrs.to_json().encode()) == attrs


def test_lease_attrs_keys_are_case_insensitive():
    attrs = lease_attrs_from_json(f'{{"vni": 7, "vtepmac": "{MAC}", "other": 1}}')
    assert attrs.vni == 7
    assert str(attrs.vtep_mac) == MAC


def test_lease_attrs_missing_fields_default():
    attrs = lease_attrs_from_json("{}")
    assert attrs.vni == 0
    assert len(attrs.vtep_mac) == 0


@pytest.mark.parametrize("vni", ["70000", "-1", "1.0", '"1"', "true"])
def test_lease_attrs_bad_vni(vni):
    with pytest.raises(ValueError, match="VNI"):
        lease_attrs_from_json(f'{{"VNI": {vni}}}')


@pytest.mark.parametrize("mac", ["null", "5", '"nope"'])
def test_lease_attrs_bad_mac(mac):
    with pytest.raises(ValueError, match="hardware addr|invalid MAC address"):
        lease_attrs_from_json(f'{{"VtepMAC": {mac}}}')


def test_lease_attrs_rejects_non_object():
    with pytest.raises(ValueError, match="cannot unmarshal array"):
        lease_attrs_from_json("[]")


def test_lease_attrs_out_of_range_construction():
    with pytest.raises(ValueError):
        VxlanLeaseAttrs(vni=1 << 16)


def test_device_names():
    assert device_name(1) == "flannel.1"
    assert device_name(1, True) == "flannel-v6.1"
    assert device_name(42, False).startswith("flannel.")


@pytest.mark.parametrize("data", [None, "", b"", {}])
def test_vxlan_config_defaults(data):
    config = parse_vxlan_config(data, 1500)
    assert config == VxlanConfig(vni=1, port=0, mtu=1500)
    assert not (config.gbp or config.learning or config.direct_routing)


def test_vxlan_config_values():
    config = parse_vxlan_config(
        '{"VNI": 4, "Port": 8472, "GBP": true, "Learning": true, "DirectRouting": true}',
        1500,
    )
    assert (config.vni, config.port, config.mtu) == (4, 8472, 1500)
    assert config.gbp and config.learning and config.direct_routing


def test_vxlan_config_mtu_override_and_case():
    config = parse_vxlan_config(b'{"mtu": 1400, "directrouting": true}', 1500)
    assert config.mtu == 1400
    assert config.direct_routing is True


def test_vxlan_config_from_mapping():
    config = parse_vxlan_config({"VNI": 9}, 1450)
    assert config.vni == 9
    assert config.mtu == 1450


def test_vxlan_config_null_keeps_default():
    assert parse_vxlan_config('{"VNI": null}', 1500).vni == 1
    assert parse_vxlan_config('{"VNI": 3, "vni": null}', 1500).vni == 3


@pytest.mark.parametrize(
    "data", ["{", '{"GBP": "yes"}', '{"VNI": 1.5}', '{"Port": "1"}', "[1]", "  "]
)
def test_vxlan_config_errors(data):
    with pytest.raises(ValueError, match="error decoding VXLAN backend config"):
        parse_vxlan_config(data, 1500)


def test_windows_config_defaults():
    config = parse_windows_vxlan_config(None)
    assert config.vni == 4096
    assert config.port == 4789
    assert config.mac_prefix == "0E-2A"
    assert config.name == device_name(4096)


def test_windows_config_custom_values():
    config = parse_windows_vxlan_config('{"Name": "overlay", "VNI": 5000, "MacPrefix": "0A-0B"}')
    assert config == WindowsVxlanConfig(name="overlay", mac_prefix="0A-0B", vni=5000)


def test_windows_config_name_follows_vni():
    assert parse_windows_vxlan_config('{"VNI": 5000}').name == device_name(5000)


@pytest.mark.parametrize(
    "data, message",
    [
        ('{"VNI": 100}', "must be greater than or equal to 4096 on Windows"),
        ('{"Port": 8472}', "Omit the setting to default to port 4789"),
        ('{"DirectRouting": true}', "DirectRouting is not supported on Windows"),
        ('{"GBP": true}', "GBP is not supported on Windows"),
        ('{"MacPrefix": "0E2A"}', "prefix must be of the format xx-xx"),
        ('{"MacPrefix": "0E:2A"}', "prefix must be of the format xx-xx"),
        ('{"MacPrefix": ""}', "prefix must be of the format xx-xx"),
        ('{"Name": 1}', "error decoding VXLAN backend config"),
    ],
)
def test_windows_config_errors(data, message):
    with pytest.raises(ValueError, match=message):
        parse_windows_vxlan_config(data)