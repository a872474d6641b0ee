"""smallModbus library: a Modbus TCP client for the read function codes."""

from typing import Any

from .client import AsyncModbusClient, ModbusClient
from .const import ExceptionCode, FunctionCode
from .frame import RequestFrame, RequestFrameBuilder, build_request, expected_response_length
from .parser import (
    Fault,
    ParseOutcome,
    ProtocolFailure,
    Registers,
    ResponseFrame,
    ResponseParser,
    parse_response,
    unwrap,
)
from .transport import AsyncTcpTransport, TcpTransport

try:
    from ._version import __version__
except ImportError:  # pragma: no cover
    __version__ = "0.0.0"


def create_tcp_client(
    host: str,
    port: int = 502,
    *,
    unit_id: int,
    timeout: float = 10.0,
    connect_timeout: float = 10.0,
) -> ModbusClient:
    """Create a blocking TCP Modbus client.

    Args:
        host: The IP address or hostname of the Modbus server.
        port: The port number of the Modbus server (default is 502).
        unit_id: The unit ID to use for requests.
        timeout: Timeout in seconds for reading a response, default 10.0s
        connect_timeout: Timeout for establishing connection, default 10.0s

    Returns:
        An instance of ModbusClient configured for TCP transport.

    """
    transport = TcpTransport(host, port, timeout=timeout, connect_timeout=connect_timeout)
    return ModbusClient(transport, unit_id=unit_id)


def create_async_tcp_client(
    host: str,
    port: int = 502,
    *,
    unit_id: int,
    timeout: float = 10.0,
    connect_timeout: float = 10.0,
    **connection_kwargs: Any,
) -> AsyncModbusClient:
    """Create an asynchronous TCP Modbus client.

    Args:
        host: The IP address or hostname of the Modbus server.
        port: The port number of the Modbus server (default is 502).
        unit_id: The unit ID to use for requests.
        timeout: Timeout in seconds for reading a response, default 10.0s
        connect_timeout: Timeout for establishing connection, default 10.0s
        connection_kwargs: Additional connection parameters passed to `asyncio.open_connection` (e.g., SSL context)

    Returns:
        An instance of AsyncModbusClient configured for TCP transport.

    """
    transport = AsyncTcpTransport(
        host,
        port,
        timeout=timeout,
        connect_timeout=connect_timeout,
        **connection_kwargs,
    )
    return AsyncModbusClient(transport, unit_id=unit_id)


__all__ = [
    "AsyncModbusClient",
    "AsyncTcpTransport",
    "ExceptionCode",
    "Fault",
    "FunctionCode",
    "ModbusClient",
    "ParseOutcome",
    "ProtocolFailure",
    "Registers",
    "RequestFrame",
    "RequestFrameBuilder",
    "ResponseFrame",
    "ResponseParser",
    "TcpTransport",
    "__version__",
    "build_request",
    "create_async_tcp_client",
    "create_tcp_client",
    "expected_response_length",
    "parse_response",
    "unwrap",
]
