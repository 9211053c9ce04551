#!/usr/bin/env python3
# STATUS: done
"""
tunnel-dhcpd - Configuration Generator
Writes a template configuration describing the tunnel interface, DNS and
routes.
"""

import os
import argparse

from .common.utils import generate_config_template, save_config


def main(argv=None):
    """Generate a tunnel-dhcpd configuration file."""
    parser = argparse.ArgumentParser(description='Generate a tunnel-dhcpd configuration file')
    parser.add_argument('--output-dir', '-o', default='config',
                        help='Output directory for the config file')
    parser.add_argument('--ifname', '-i', default=None,
                        help='Tunnel interface dhcpd should serve')
    parser.add_argument('--systemd', action='store_true',
                        help='Control dhcpd with systemctl instead of rc-service')

    args = parser.parse_args(argv)

    # Create output directory if it doesn't exist
    os.makedirs(args.output_dir, exist_ok=True)

    config = generate_config_template()
    if args.ifname:
        config['dhcpd_ifname'] = args.ifname
    if args.systemd:
        config['service_tool'] = 'systemctl'
        config['service_name'] = 'isc-dhcp-server'

    config_path = os.path.join(args.output_dir, 'tunnel-dhcpd.json')
    save_config(config, config_path)

    print("tunnel-dhcpd configuration file generated:")
    print(f"  Config: {config_path}")
    print(f"  Interface: {config['dhcpd_ifname']}")
    print("")
    print("Next steps:")
    print(f"1. Edit the DNS servers and split routes in {config_path}")
    print(f"2. Preview: tunnel-dhcpd -c {config_path} render")
    print(f"3. Start: sudo tunnel-dhcpd -c {config_path} start")


if __name__ == '__main__':
    main()
