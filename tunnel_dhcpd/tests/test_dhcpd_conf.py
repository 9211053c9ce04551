# STATUS: done
"""
Test cases for tunnel-dhcpd configuration generation.
"""

import pytest
import os
import sys
from ipaddress import IPv4Address, IPv4Network

# Add the project root to Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from tunnel_dhcpd.common.dhcpd_conf import (
    DnsConfig, TunnelState, SubnetConfigBuilder, Option, render_config,
    render_option, generate_config, parse_subnet,
)
from tunnel_dhcpd.common.errors import InterfaceNotFound
from tunnel_dhcpd.common.routes import RouteEntry

HEADER = (
    "option rfc3442-classless-static-routes code 121 = array of integer 8;\n"
    "option ms-classless-static-routes code 249 = array of integer 8;\n"
    "\n"
)


def route(dest, mask, gateway="10.10.0.1"):
    return RouteEntry(IPv4Address(dest), IPv4Address(mask), IPv4Address(gateway))


DEFAULT_ROUTE = route("0.0.0.0", "0.0.0.0")
SPLIT_ROUTES = (
    route("10.1.0.0", "255.255.0.0"),
    route("172.16.4.0", "255.255.255.0"),
    route("0.0.0.0", "0.0.0.0"),
)
DNS = DnsConfig(ns1=IPv4Address("10.10.0.53"), ns2=IPv4Address("10.10.0.54"),
                dns_suffix="corp.example.com")


def resolver(ifname):
    assert ifname == "tap0"
    return IPv4Address("10.0.0.5")


def missing_resolver(ifname):
    raise InterfaceNotFound(f"Interface '{ifname}' has no IPv4 address")


def build(**kwargs):
    kwargs.setdefault("dhcpd_ifname", "tap0")
    return SubnetConfigBuilder(resolver).build(TunnelState(**kwargs))


class TestSubnetConfigBuilder:
    """Test cases for the configuration document."""

    def test_subnet_is_slash_24_around_router(self):
        """Test the subnet and lease range derived from the interface address."""
        config = build(set_dns=False, set_routes=False)

        assert config.subnet.network == IPv4Network("10.0.0.0/24")
        assert config.subnet.range_start == IPv4Address("10.0.0.100")
        assert config.subnet.range_end == IPv4Address("10.0.0.200")
        assert config.subnet.options == []

    def test_route_option_declarations(self):
        """Test that both classless route options are declared."""
        config = build(set_dns=False, set_routes=False)

        codes = {d.name: d.code for d in config.declarations}
        assert codes == {
            "rfc3442-classless-static-routes": 121,
            "ms-classless-static-routes": 249,
        }

    def test_dns_primary_and_secondary(self):
        """Test that both nameservers are listed when set."""
        config = build(dns=DNS, set_routes=False)

        option = config.subnet.get_option("domain-name-servers")
        assert option.values == ["10.10.0.53", "10.10.0.54"]

    def test_dns_primary_only(self):
        """Test that the secondary nameserver is optional."""
        config = build(dns=DnsConfig(ns1=IPv4Address("10.10.0.53")), set_routes=False)

        assert config.subnet.get_option("domain-name-servers").values == ["10.10.0.53"]
        assert config.subnet.get_option("domain-search") is None

    def test_secondary_without_primary_is_ignored(self):
        """Test that a secondary nameserver alone is never emitted."""
        config = build(dns=DnsConfig(ns2=IPv4Address("10.10.0.54")), set_routes=False)

        assert config.subnet.get_option("domain-name-servers") is None

    def test_search_domain(self):
        """Test that the search domain is emitted as a quoted option."""
        config = build(dns=DnsConfig(dns_suffix="corp.example.com"), set_routes=False)

        option = config.subnet.get_option("domain-search")
        assert option.values == ["corp.example.com"]
        assert option.quoted

    def test_dns_disabled(self):
        """Test that no DNS options are emitted when DNS is not requested."""
        config = build(dns=DNS, set_dns=False, set_routes=False)

        assert config.subnet.options == []

    def test_split_routes_are_encoded(self):
        """Test that split routes go into both classless route options."""
        config = build(set_dns=False, gateway_route=DEFAULT_ROUTE, split_routes=SPLIT_ROUTES)

        expected = [[16, 10, 1, 10, 0, 0, 5], [24, 172, 16, 4, 10, 0, 0, 5]]
        assert config.subnet.get_option("rfc3442-classless-static-routes").values == expected
        assert config.subnet.get_option("ms-classless-static-routes").values == expected
        assert config.subnet.get_option("routers") is None

    def test_routes_matching_default_are_excluded(self):
        """Test that the default route's destination never shows up encoded."""
        config = build(set_dns=False, gateway_route=DEFAULT_ROUTE, split_routes=SPLIT_ROUTES)

        for name in ("rfc3442-classless-static-routes", "ms-classless-static-routes"):
            for entry in config.subnet.get_option(name).values:
                assert entry[:2] != [0, 0]

    def test_only_default_route_emits_nothing(self):
        """Test that neither route option is emitted when every route is excluded."""
        config = build(set_dns=False, gateway_route=DEFAULT_ROUTE,
                       split_routes=(route("0.0.0.0", "0.0.0.0"),))

        assert config.subnet.options == []

    def test_no_split_routes_uses_router(self):
        """Test that the tunnel becomes the default gateway without split routes."""
        config = build(set_dns=False, gateway_route=DEFAULT_ROUTE)

        assert [o.name for o in config.subnet.options] == ["routers"]
        assert config.subnet.get_option("routers").values == ["10.0.0.5"]

    def test_routes_disabled(self):
        """Test that no route options are emitted when routes are not requested."""
        config = build(set_dns=False, set_routes=False, split_routes=SPLIT_ROUTES)

        assert config.subnet.options == []

    def test_interface_not_found(self):
        """Test that a missing interface aborts the build."""
        builder = SubnetConfigBuilder(missing_resolver)

        with pytest.raises(InterfaceNotFound):
            builder.build(TunnelState(dhcpd_ifname="tap0"))

    def test_builds_do_not_share_state(self):
        """Test that two builds return independent documents."""
        builder = SubnetConfigBuilder(resolver)
        state = TunnelState(dhcpd_ifname="tap0", set_dns=False)

        first = builder.build(state)
        second = builder.build(state)
        first.subnet.options.clear()

        assert [o.name for o in second.subnet.options] == ["routers"]


class TestRenderConfig:
    """Test cases for the dhcpd.conf text."""

    def test_full_config(self):
        """Test the text for DNS and split routes."""
        text = generate_config(
            TunnelState(dhcpd_ifname="tap0", dns=DNS, gateway_route=DEFAULT_ROUTE,
                        split_routes=SPLIT_ROUTES),
            resolver,
        )

        assert text == HEADER + (
            "subnet 10.0.0.0 netmask 255.255.255.0 {\n"
            "  range 10.0.0.100 10.0.0.200;\n"
            "  option domain-name-servers 10.10.0.53, 10.10.0.54;\n"
            "  option domain-search \"corp.example.com\";\n"
            "  option rfc3442-classless-static-routes 16, 10, 1, 10, 0, 0, 5,\n"
            + " " * 41 + "24, 172, 16, 4, 10, 0, 0, 5;\n"
            "  option ms-classless-static-routes 16, 10, 1, 10, 0, 0, 5,\n"
            + " " * 36 + "24, 172, 16, 4, 10, 0, 0, 5;\n"
            "}\n"
        )

    def test_router_fallback(self):
        """Test the text when no split routes are pushed."""
        text = generate_config(TunnelState(dhcpd_ifname="tap0", set_dns=False), resolver)

        assert text == HEADER + (
            "subnet 10.0.0.0 netmask 255.255.255.0 {\n"
            "  range 10.0.0.100 10.0.0.200;\n"
            "  option routers 10.0.0.5;\n"
            "}\n"
        )
        assert "  option rfc3442-classless-static-routes" not in text
        assert "  option ms-classless-static-routes" not in text

    def test_router_and_routes_are_exclusive(self):
        """Test that a file never holds both the router and route options."""
        states = [
            TunnelState(dhcpd_ifname="tap0"),
            TunnelState(dhcpd_ifname="tap0", gateway_route=DEFAULT_ROUTE, split_routes=SPLIT_ROUTES),
            TunnelState(dhcpd_ifname="tap0", gateway_route=DEFAULT_ROUTE, split_routes=SPLIT_ROUTES[2:]),
        ]
        for state in states:
            text = generate_config(state, resolver)
            has_router = "option routers" in text
            has_routes = "  option rfc3442-classless-static-routes" in text
            assert not (has_router and has_routes)

    def test_single_route_is_one_line(self):
        """Test that a single route stays on the option line."""
        option = Option("rfc3442-classless-static-routes", [[24, 172, 16, 4, 10, 0, 0, 5]], wrap=True)

        assert render_option(option) == \
            "  option rfc3442-classless-static-routes 24, 172, 16, 4, 10, 0, 0, 5;"

    def test_empty_subnet(self):
        """Test the text with neither DNS nor routes."""
        config = SubnetConfigBuilder(resolver).build(
            TunnelState(dhcpd_ifname="tap0", set_dns=False, set_routes=False))

        assert render_config(config) == HEADER + (
            "subnet 10.0.0.0 netmask 255.255.255.0 {\n"
            "  range 10.0.0.100 10.0.0.200;\n"
            "}\n"
        )


class TestParseSubnet:
    """Test cases for reading a generated file back."""

    @pytest.mark.parametrize("address", ["10.0.0.5", "192.168.77.1", "172.31.255.254"])
    def test_round_trip(self, address):
        """Test that the parsed subnet matches the interface address's /24."""
        text = generate_config(
            TunnelState(dhcpd_ifname="tap0", dns=DNS, gateway_route=DEFAULT_ROUTE,
                        split_routes=SPLIT_ROUTES),
            lambda ifname: IPv4Address(address),
        )

        network, first, last = parse_subnet(text)

        expected = IPv4Network(f"{address}/24", strict=False)
        assert network == expected
        assert first == expected.network_address + 100
        assert last == expected.network_address + 200

    def test_missing_subnet(self):
        """Test that text without a subnet is rejected."""
        with pytest.raises(ValueError):
            parse_subnet("option routers 10.0.0.5;\n")

    def test_missing_range(self):
        """Test that a subnet without a range is rejected."""
        with pytest.raises(ValueError):
            parse_subnet("subnet 10.0.0.0 netmask 255.255.255.0 {\n}\n")


if __name__ == '__main__':
    pytest.main([__file__])
