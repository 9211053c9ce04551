# STATUS: done
"""
Utility functions for tunnel-dhcpd.
"""

import json
import logging
from ipaddress import IPv4Address
from typing import Dict, Any, Optional

from .constants import (
    LOGGER_NAME, DEFAULT_DHCPD_IFNAME, DEFAULT_DHCPD_CONF_PATH,
    DEFAULT_SERVICE_NAME, DEFAULT_SERVICE_TOOL,
)
from .dhcpd_conf import DnsConfig, TunnelState
from .routes import RouteEntry


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Set up logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        logging.Logger: Configured logger
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {level}')

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    return logger


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration from JSON file.

    Args:
        config_path: Path to JSON config file

    Returns:
        Dict[str, Any]: Configuration dictionary, with defaults filled in

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is invalid JSON or lacks dhcpd_ifname
    """
    try:
        with open(config_path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Config file not found: {config_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}") from e

    if not isinstance(config, dict) or not config.get('dhcpd_ifname'):
        raise ValueError("Missing required config field: dhcpd_ifname")

    config.setdefault('set_dns', True)
    config.setdefault('set_routes', True)
    config.setdefault('dhcpd_conf_path', DEFAULT_DHCPD_CONF_PATH)
    config.setdefault('service_name', DEFAULT_SERVICE_NAME)
    config.setdefault('service_tool', DEFAULT_SERVICE_TOOL)

    return config


def save_config(config: Dict[str, Any], config_path: str) -> None:
    """
    Save configuration to JSON file.

    Args:
        config: Configuration dictionary
        config_path: Path to save JSON config file
    """
    with open(config_path, 'w') as f:
        json.dump(config, f, indent=2)


def generate_config_template() -> Dict[str, Any]:
    """
    Generate a configuration template.

    Returns:
        Dict[str, Any]: Configuration template
    """
    return {
        "dhcpd_ifname": DEFAULT_DHCPD_IFNAME,
        "set_dns": True,
        "set_routes": True,
        "dns": {
            "ns1": "10.10.0.53",
            "ns2": "10.10.0.54",
            "dns_suffix": "corp.example.com"
        },
        "gateway_route": {"dest": "0.0.0.0", "mask": "0.0.0.0", "gateway": "10.10.0.1"},
        "split_routes": [
            {"dest": "10.10.0.0", "mask": "255.255.0.0", "gateway": "10.10.0.1"},
            {"dest": "172.16.4.0", "mask": "255.255.255.0", "gateway": "10.10.0.1"}
        ],
        "dhcpd_conf_path": DEFAULT_DHCPD_CONF_PATH,
        "service_name": DEFAULT_SERVICE_NAME,
        "service_tool": DEFAULT_SERVICE_TOOL
    }


def parse_nameserver(value: Optional[str]) -> Optional[IPv4Address]:
    """
    Parse a nameserver address.

    Empty values and 0.0.0.0 mean "not set".
    """
    if not value:
        return None
    address = IPv4Address(value)
    if int(address) == 0:
        return None
    return address


def tunnel_state_from_config(config: Dict[str, Any]) -> TunnelState:
    """
    Convert a loaded configuration dictionary to a TunnelState.

    Args:
        config: Configuration dictionary

    Returns:
        TunnelState: Snapshot used to build the dhcpd configuration

    Raises:
        ValueError: If an address or route is malformed
    """
    dns_data = config.get('dns') or {}
    dns = DnsConfig(
        ns1=parse_nameserver(dns_data.get('ns1')),
        ns2=parse_nameserver(dns_data.get('ns2')),
        dns_suffix=dns_data.get('dns_suffix') or None,
    )

    gateway_data = config.get('gateway_route')
    gateway_route = RouteEntry.from_dict(gateway_data) if gateway_data else None

    return TunnelState(
        dhcpd_ifname=config['dhcpd_ifname'],
        set_dns=bool(config.get('set_dns', True)),
        set_routes=bool(config.get('set_routes', True)),
        dns=dns,
        gateway_route=gateway_route,
        split_routes=tuple(RouteEntry.from_dict(r) for r in config.get('split_routes') or []),
    )
