"""SciX API gateway: transport and client operations."""

from scix.client.client import SciXClient
from scix.client.transport import Transport, classify_response

__all__ = ["SciXClient", "Transport", "classify_response"]
