# STATUS: done
"""
dhcpd configuration generation for tunnel-dhcpd.

The builder assembles a small document (option declarations plus one subnet
block) from the tunnel state, and render_config() turns it into the text
read by ISC dhcpd.
"""

import logging
import re
from dataclasses import dataclass, field
from ipaddress import IPv4Address, IPv4Network
from typing import Callable, List, Optional, Tuple, Union

from .constants import (
    RFC3442_OPTION_NAME, RFC3442_OPTION_CODE, MS_ROUTES_OPTION_NAME,
    MS_ROUTES_OPTION_CODE, ROUTE_OPTION_TYPE, SUBNET_NETMASK,
    RANGE_FIRST_HOST, RANGE_LAST_HOST,
)
from .interface import get_interface_address
from .routes import RouteEntry, encode_route, filter_split_routes

logger = logging.getLogger(__name__)

OptionValue = Union[str, List[int]]


# ---------- Tunnel input ----------

@dataclass(frozen=True)
class DnsConfig:
    """Nameservers and search domain pushed by the VPN gateway."""
    ns1: Optional[IPv4Address] = None
    ns2: Optional[IPv4Address] = None
    dns_suffix: Optional[str] = None


@dataclass(frozen=True)
class TunnelState:
    """Snapshot of the tunnel settings a configuration is built from."""
    dhcpd_ifname: str
    set_dns: bool = True
    set_routes: bool = True
    dns: DnsConfig = field(default_factory=DnsConfig)
    gateway_route: Optional[RouteEntry] = None
    split_routes: Tuple[RouteEntry, ...] = ()


# ---------- Document ----------

@dataclass
class OptionDeclaration:
    name: str
    code: int
    type: str = ROUTE_OPTION_TYPE


@dataclass
class Option:
    """
    One `option` statement inside the subnet block.

    Values are either plain strings (addresses, names) or lists of byte
    values (encoded routes). With wrap set, each value after the first goes
    on its own line, aligned under the first one.
    """
    name: str
    values: List[OptionValue]
    quoted: bool = False
    wrap: bool = False


@dataclass
class SubnetBlock:
    network: IPv4Network
    range_start: IPv4Address
    range_end: IPv4Address
    options: List[Option] = field(default_factory=list)

    def get_option(self, name: str) -> Optional[Option]:
        for option in self.options:
            if option.name == name:
                return option
        return None


@dataclass
class DhcpdConfig:
    declarations: List[OptionDeclaration]
    subnet: SubnetBlock


# ---------- Builder ----------

class SubnetConfigBuilder:
    """Builds the dhcpd document for the subnet behind the tunnel interface."""

    def __init__(self, resolver: Callable[[str], IPv4Address] = get_interface_address):
        self.resolver = resolver

    def build(self, state: TunnelState) -> DhcpdConfig:
        """
        Build the configuration document for a tunnel state.

        Args:
            state: Current tunnel settings

        Returns:
            DhcpdConfig: The complete document

        Raises:
            InterfaceNotFound: If the tunnel interface has no IPv4 address
        """
        router = self.resolver(state.dhcpd_ifname)
        network = IPv4Network(f"{router}/{SUBNET_NETMASK}", strict=False)
        logger.debug(f"Using network {router}/{network.prefixlen}")

        subnet = SubnetBlock(
            network=network,
            range_start=network.network_address + RANGE_FIRST_HOST,
            range_end=network.network_address + RANGE_LAST_HOST,
        )

        if state.set_dns:
            subnet.options.extend(self._dns_options(state.dns))

        if state.set_routes:
            subnet.options.extend(self._route_options(state, router))

        declarations = [
            OptionDeclaration(RFC3442_OPTION_NAME, RFC3442_OPTION_CODE),
            OptionDeclaration(MS_ROUTES_OPTION_NAME, MS_ROUTES_OPTION_CODE),
        ]
        return DhcpdConfig(declarations=declarations, subnet=subnet)

    def _dns_options(self, dns: DnsConfig) -> List[Option]:
        options = []

        # A secondary nameserver is only meaningful next to a primary one
        if dns.ns1 is not None:
            servers = [str(dns.ns1)]
            logger.debug(f"Using '{dns.ns1}' as primary nameserver")
            if dns.ns2 is not None:
                servers.append(str(dns.ns2))
                logger.debug(f"Using '{dns.ns2}' as secondary nameserver")
            options.append(Option("domain-name-servers", servers))

        if dns.dns_suffix:
            options.append(Option("domain-search", [dns.dns_suffix], quoted=True))
            logger.debug(f"Using '{dns.dns_suffix}' as search domain")

        return options

    def _route_options(self, state: TunnelState, router: IPv4Address) -> List[Option]:
        if not state.split_routes:
            logger.debug(f"Set {router} as router")
            return [Option("routers", [str(router)])]

        routes = filter_split_routes(state.split_routes, state.gateway_route)
        if not routes:
            return []

        return [
            Option(RFC3442_OPTION_NAME, [encode_route(r, router) for r in routes], wrap=True),
            Option(MS_ROUTES_OPTION_NAME, [encode_route(r, router) for r in routes], wrap=True),
        ]


# ---------- Serialization ----------

def _format_value(value: OptionValue) -> str:
    if isinstance(value, str):
        return value
    return ", ".join(str(byte) for byte in value)


def render_option(option: Option) -> str:
    """Render one option statement, indented for the subnet block."""
    head = f"  option {option.name} "
    values = [_format_value(v) for v in option.values]
    if option.quoted:
        values = [f'"{v}"' for v in values]

    separator = ",\n" + " " * len(head) if option.wrap else ", "
    return head + separator.join(values) + ";"


def render_config(config: DhcpdConfig) -> str:
    """
    Serialize a configuration document to dhcpd.conf text.

    Args:
        config: Document produced by SubnetConfigBuilder

    Returns:
        str: The configuration file contents
    """
    lines = [f"option {d.name} code {d.code} = {d.type};" for d in config.declarations]
    lines.append("")

    subnet = config.subnet
    lines.append(f"subnet {subnet.network.network_address} netmask {subnet.network.netmask} {{")
    lines.append(f"  range {subnet.range_start} {subnet.range_end};")
    lines.extend(render_option(option) for option in subnet.options)
    lines.append("}")

    return "\n".join(lines) + "\n"


def generate_config(state: TunnelState,
                    resolver: Callable[[str], IPv4Address] = get_interface_address) -> str:
    """Build and render the dhcpd configuration for a tunnel state."""
    return render_config(SubnetConfigBuilder(resolver).build(state))


_SUBNET_RE = re.compile(r'^subnet\s+(\S+)\s+netmask\s+(\S+)\s*\{', re.MULTILINE)
_RANGE_RE = re.compile(r'^\s*range\s+(\S+)\s+(\S+)\s*;', re.MULTILINE)


def parse_subnet(text: str) -> Tuple[IPv4Network, IPv4Address, IPv4Address]:
    """
    Read the subnet and lease range back out of a dhcpd configuration.

    Args:
        text: Configuration file contents

    Returns:
        Tuple[IPv4Network, IPv4Address, IPv4Address]: (network, first, last)

    Raises:
        ValueError: If the subnet declaration or range line is missing
    """
    subnet_match = _SUBNET_RE.search(text)
    if not subnet_match:
        raise ValueError("No subnet declaration found")

    range_match = _RANGE_RE.search(text, subnet_match.end())
    if not range_match:
        raise ValueError("No range statement found in subnet block")

    network = IPv4Network(f"{subnet_match.group(1)}/{subnet_match.group(2)}")
    return (network,
            IPv4Address(range_match.group(1)),
            IPv4Address(range_match.group(2)))
