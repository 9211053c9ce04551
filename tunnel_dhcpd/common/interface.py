# STATUS: done
"""
Address lookup for the tunnel's virtual network interface.
"""

import logging
from ipaddress import IPv4Address, AddressValueError

import netifaces

from .errors import InterfaceNotFound

logger = logging.getLogger(__name__)


def get_interface_address(ifname: str) -> IPv4Address:
    """
    Return the IPv4 address bound to a network interface.

    Args:
        ifname: Interface name, matched exactly (e.g. "tap0")

    Returns:
        IPv4Address: The first IPv4 address found on the interface

    Raises:
        InterfaceNotFound: If no interface of that name has an IPv4 address,
            or if the host interfaces cannot be enumerated
    """
    try:
        names = netifaces.interfaces()
    except (OSError, ValueError) as e:
        logger.debug(f"Cannot fetch IP addresses: {e}")
        raise InterfaceNotFound(f"Cannot fetch IP addresses: {e}") from e

    for name in names:
        if name != ifname:
            continue

        try:
            entries = netifaces.ifaddresses(name).get(netifaces.AF_INET, [])
        except (OSError, ValueError) as e:
            logger.debug(f"Cannot fetch IP addresses of '{name}': {e}")
            raise InterfaceNotFound(
                f"Cannot fetch IP addresses of '{name}': {e}") from e

        for entry in entries:
            try:
                return IPv4Address(entry['addr'])
            except (KeyError, AddressValueError):
                continue

    logger.debug(f"Cannot find interface '{ifname}'")
    raise InterfaceNotFound(f"Interface '{ifname}' has no IPv4 address")
