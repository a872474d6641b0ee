"""Transport layer."""

from .async_base import AsyncBaseTransport
from .async_tcp import AsyncTcpTransport
from .base import BaseTransport
from .tcp import TcpTransport

__all__ = [
    "AsyncBaseTransport",
    "AsyncTcpTransport",
    "BaseTransport",
    "TcpTransport",
]
