"""
Delivery sinks for accepted records
"""

from .bridge import BRIDGED_ATTR, LoggingBridge
from .http import HTTPTransport, HTTPTransportConfig, create_http_transport
from .hub import Sink, TransportHub

__all__ = [
    "Sink",
    "TransportHub",
    "HTTPTransport",
    "HTTPTransportConfig",
    "create_http_transport",
    "LoggingBridge",
    "BRIDGED_ATTR",
]
