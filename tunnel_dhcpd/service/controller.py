# STATUS: done
"""
tunnel-dhcpd controller
Writes the dhcpd configuration for the tunnel interface and toggles the
interface and the dhcpd service around it.
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import Optional

from ..common.dhcpd_conf import (
    SubnetConfigBuilder, TunnelState, render_config, parse_subnet,
)
from ..common.errors import DhcpdError, ConfigWriteFailed
from ..common.utils import setup_logging, load_config, tunnel_state_from_config
from ..common.constants import DEFAULT_DHCPD_CONF_PATH
from .commands import SystemCommands, ShellCommands

logger = logging.getLogger(__name__)


class DaemonController:
    """Starts and stops dhcpd for the subnet behind the tunnel interface."""

    def __init__(self, state: TunnelState, commands: SystemCommands,
                 conf_path: str = DEFAULT_DHCPD_CONF_PATH,
                 builder: Optional[SubnetConfigBuilder] = None):
        self.state = state
        self.commands = commands
        self.conf_path = Path(conf_path)
        self.builder = builder or SubnetConfigBuilder()

    def render(self) -> str:
        """
        Generate the dhcpd configuration text.

        Raises:
            InterfaceNotFound: If the tunnel interface has no IPv4 address
        """
        return render_config(self.builder.build(self.state))

    def write_config(self) -> Path:
        """
        Generate the configuration and write it to conf_path.

        The file is only opened once the whole configuration has been built,
        so a failed build leaves the previous file untouched.

        Returns:
            Path: Where the configuration was written

        Raises:
            InterfaceNotFound: If the tunnel interface has no IPv4 address
            ConfigWriteFailed: If the file cannot be written
        """
        text = self.render()

        logger.debug(f"Writing dhcpd config to {self.conf_path}")
        try:
            self.conf_path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise ConfigWriteFailed(f"Failed to write {self.conf_path}: {e}") from e
        return self.conf_path

    def start(self) -> bool:
        """
        Write the configuration, bring the interface up and (re)start dhcpd.

        Returns:
            bool: True if every step succeeded; the first failure stops the
                sequence and is logged
        """
        ifname = self.state.dhcpd_ifname

        try:
            self.write_config()
        except DhcpdError as e:
            logger.error(f"Cannot write dhcpd config: {e}")
            return False

        try:
            self.commands.interface_up(ifname)
        except DhcpdError as e:
            logger.error(f"Bringing {ifname} up failed: {e}")
            return False

        try:
            self.commands.restart_service()
        except DhcpdError as e:
            logger.error(f"Failed to (re)start the dhcpd service: {e}")
            return False

        logger.info(f"dhcpd serving {ifname}")
        return True

    def stop(self) -> bool:
        """
        Stop dhcpd, then bring the interface down.

        Returns:
            bool: True if both steps succeeded
        """
        ifname = self.state.dhcpd_ifname

        try:
            self.commands.stop_service()
        except DhcpdError as e:
            logger.error(f"Failed to stop dhcpd service: {e}")
            return False

        try:
            self.commands.interface_down(ifname)
        except DhcpdError as e:
            logger.error(f"Bringing {ifname} down failed: {e}")
            return False

        logger.info(f"dhcpd stopped on {ifname}")
        return True


def controller_from_config(config: dict) -> DaemonController:
    """Build a DaemonController using shell commands from a loaded configuration."""
    commands = ShellCommands(config['service_name'], config['service_tool'])
    return DaemonController(tunnel_state_from_config(config), commands,
                            conf_path=config['dhcpd_conf_path'])


def show_status(conf_path: str) -> int:
    try:
        text = Path(conf_path).read_text(encoding="utf-8")
        network, first, last = parse_subnet(text)
    except (OSError, ValueError) as e:
        logger.error(f"Cannot read {conf_path}: {e}")
        return 1

    print(f"Config : {conf_path}")
    print(f"Subnet : {network}")
    print(f"Range  : {first} - {last}")
    return 0


def main(argv=None):
    """Main entry point for tunnel-dhcpd."""
    parser = argparse.ArgumentParser(prog='tunnel-dhcpd',
                                     description='dhcpd for the VPN tunnel interface')
    parser.add_argument('--config', '-c', required=True,
                        help='Path to tunnel-dhcpd configuration file')
    parser.add_argument('--log-level', '-l', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level')
    sub = parser.add_subparsers(dest='cmd', required=True)
    sub.add_parser('start', help='write dhcpd.conf, bring the interface up, restart dhcpd')
    sub.add_parser('stop', help='stop dhcpd and bring the interface down')
    sub.add_parser('render', help='print the generated dhcpd.conf')
    sub.add_parser('status', help='show the subnet of the current dhcpd.conf')

    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        config = load_config(args.config)
        controller = controller_from_config(config)
    except (OSError, ValueError) as e:
        logger.error(f"Cannot load configuration: {e}")
        sys.exit(1)

    if args.cmd == 'render':
        try:
            print(controller.render(), end='')
        except DhcpdError as e:
            logger.error(f"Cannot generate dhcpd config: {e}")
            sys.exit(1)
        return

    if args.cmd == 'status':
        sys.exit(show_status(config['dhcpd_conf_path']))

    ok = controller.start() if args.cmd == 'start' else controller.stop()
    if not ok:
        sys.exit(1)


if __name__ == '__main__':
    main()
