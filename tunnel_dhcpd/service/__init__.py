# STATUS: done
"""dhcpd service and interface control."""
