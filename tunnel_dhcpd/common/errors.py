# STATUS: done
"""
Exceptions raised by tunnel-dhcpd.
"""

__all__ = ['DhcpdError', 'InterfaceNotFound', 'ConfigWriteFailed',
           'ExternalCommandFailed']


class DhcpdError(Exception):
    """Base class for tunnel-dhcpd errors."""
    pass


class InterfaceNotFound(DhcpdError):
    """Raised when the named interface has no IPv4 address bound."""
    pass


class ConfigWriteFailed(DhcpdError):
    """Raised when the generated dhcpd configuration cannot be written."""
    pass


class ExternalCommandFailed(DhcpdError):
    """Raised when an interface toggle or service command fails."""
    pass
