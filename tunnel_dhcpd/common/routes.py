# STATUS: done
"""
Classless static route encoding for tunnel-dhcpd.

Routes pushed by the VPN gateway are handed to DHCP clients through the
RFC3442 option (code 121) and its Microsoft twin (code 249). Both carry the
same compact form: the prefix length, only the destination octets that the
prefix covers, then the router address.
"""

import logging
from dataclasses import dataclass
from ipaddress import IPv4Address
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteEntry:
    """A route from the tunnel's routing table."""
    destination: IPv4Address
    netmask: IPv4Address
    gateway: IPv4Address

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "RouteEntry":
        """
        Build a route from its JSON form.

        Args:
            data: Mapping with "dest", "mask" and "gateway" keys

        Returns:
            RouteEntry: The parsed route

        Raises:
            ValueError: If a key is missing or an address is invalid
        """
        try:
            return cls(
                destination=IPv4Address(data['dest']),
                netmask=IPv4Address(data['mask']),
                gateway=IPv4Address(data.get('gateway', '0.0.0.0')),
            )
        except KeyError as e:
            raise ValueError(f"Route is missing field {e}") from e

    def to_dict(self) -> Dict[str, str]:
        return {
            "dest": str(self.destination),
            "mask": str(self.netmask),
            "gateway": str(self.gateway),
        }


def prefix_length(netmask: IPv4Address) -> int:
    """
    Count the bits set in a subnet mask.

    The mask is not checked for contiguity; 255.0.255.0 counts as 16.
    """
    return sum(bin(octet).count('1') for octet in netmask.packed)


def significant_octets(prefix: int) -> int:
    """
    Number of destination octets carried for a given prefix length.

    A /0 route still carries one octet.
    """
    if prefix > 24:
        return 4
    if prefix > 16:
        return 3
    if prefix >= 8:
        return 2
    return 1


def encode_route(route: RouteEntry, router: IPv4Address) -> List[int]:
    """
    Encode one route entry for a classless static routes option.

    Args:
        route: Route to push to DHCP clients
        router: Address of the tunnel interface, used as the gateway

    Returns:
        List[int]: prefix length, significant destination octets, then the
            four router octets, as unsigned byte values
    """
    prefix = prefix_length(route.netmask)
    destination = route.destination.packed[:significant_octets(prefix)]

    logger.debug(f"Pushing route {route.destination}/{prefix} to {router}")

    return [prefix, *destination, *router.packed]


def filter_split_routes(routes: Iterable[RouteEntry],
                        default_route: Optional[RouteEntry]) -> List[RouteEntry]:
    """
    Drop the routes that duplicate the tunnel's default route.

    The default route is served through the subnet's router option instead,
    so any route with the same destination is left out. Order is kept.
    """
    if default_route is None:
        return list(routes)
    return [r for r in routes if r.destination != default_route.destination]
