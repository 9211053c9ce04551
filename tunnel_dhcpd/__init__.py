# STATUS: done
"""
tunnel-dhcpd: serve DHCP on a VPN tunnel's virtual interface.

Generates an ISC dhcpd configuration for the /24 behind the tunnel
interface, pushing the tunnel's DNS servers and split routes to clients.
"""

__version__ = '0.1.0'
