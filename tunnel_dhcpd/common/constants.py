# STATUS: done
"""
Constants used throughout the tunnel-dhcpd project.
"""

# Classless static route options (RFC3442 and the Microsoft variant)
RFC3442_OPTION_NAME = "rfc3442-classless-static-routes"
RFC3442_OPTION_CODE = 121
MS_ROUTES_OPTION_NAME = "ms-classless-static-routes"
MS_ROUTES_OPTION_CODE = 249
ROUTE_OPTION_TYPE = "array of integer 8"

# Subnet layout (fixed /24 around the tunnel interface address)
SUBNET_NETMASK = "255.255.255.0"
RANGE_FIRST_HOST = 100
RANGE_LAST_HOST = 200

# Defaults for the dhcpd service
DEFAULT_DHCPD_CONF_PATH = "/etc/dhcp/dhcpd.conf"
DEFAULT_SERVICE_NAME = "dhcpd"
DEFAULT_SERVICE_TOOL = "rc-service"
DEFAULT_DHCPD_IFNAME = "tap0"

# Logger name shared by all modules
LOGGER_NAME = "tunnel_dhcpd"
