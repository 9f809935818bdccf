"""
DNS Redirect

Hosts-file driven hostname to IPv4 redirection for a DNS MITM layer.
"""

from .core import AddressRecord, HostRedirectionResolver

__version__ = "0.1.0"

__all__ = ["AddressRecord", "HostRedirectionResolver", "__version__"]
