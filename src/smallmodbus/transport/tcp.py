"""Blocking TCP Transport Layer Implementation.

Implements Modbus TCP over a blocking socket with a connect timeout and a read timeout.
"""

import logging
import socket
import threading
from functools import partial

from smallmodbus.const import MBAP_HEADER_LENGTH
from smallmodbus.exceptions import MalformedResponseError, ModbusConnectionError, TransactionMismatchError
from smallmodbus.frame import RequestFrame
from smallmodbus.parser import ProtocolFailure, Registers, ResponseFrame, parse_response, remaining_response_length, unwrap
from smallmodbus.utils.raw_traffic_logger import log_raw_traffic as base_log_raw_traffic

from .base import BaseTransport

logger = logging.getLogger(__name__)
log_raw_traffic = partial(base_log_raw_traffic, "TCP")


def check_connection_parameters(port: int, timeout: float, connect_timeout: float) -> None:
    """Validate the parameters shared by the TCP transports.

    Raises:
        ValueError: When parameters are invalid

    """
    if not 0 < port <= 65535:  # noqa: PLR2004
        msg = "Port must be an integer between 1-65535."
        raise ValueError(msg)
    if timeout <= 0:
        msg = "Timeout must be a positive number."
        raise ValueError(msg)
    if connect_timeout <= 0:
        msg = "Connect timeout must be a positive number."
        raise ValueError(msg)


def handle_response(frame: RequestFrame, response: bytes) -> ResponseFrame:
    """Parse a complete response frame, log it and return the decoded response.

    Raises:
        InvalidResponseError: The response does not match the request or is malformed
        ModbusResponseError: The server returned an exception response

    """
    outcome = parse_response(frame, response)
    log_raw_traffic("recv", response, is_error=not isinstance(outcome, Registers))

    if isinstance(outcome, ProtocolFailure) and isinstance(outcome.error, TransactionMismatchError):
        logger.warning(
            "Received response with Transaction ID %d while waiting for %d. Discarding bytes: %s",
            outcome.error.received,
            outcome.error.expected,
            response.hex(" ").upper(),
        )

    return unwrap(outcome)


class TcpTransport(BaseTransport):
    """Blocking Modbus TCP Transport Layer Implementation.

    Handles Modbus TCP communication over a blocking socket:
    - TCP socket connection management with connect and read timeouts
    - MBAP header construction and parsing
    - Reading exactly one response per request
    """

    _socket: socket.socket | None = None

    def __init__(
        self,
        host: str,
        port: int = 502,
        *,
        timeout: float = 10.0,
        connect_timeout: float = 10.0,
    ) -> None:
        """Initialize TCP transport layer.

        Args:
            host: Target host IP address or domain name
            port: Target port, default 502 (Modbus TCP standard port)
            timeout: Timeout in seconds for reading a response, default 10.0s
            connect_timeout: Timeout for establishing connection, default 10.0s

        Raises:
            ValueError: When parameters are invalid

        """
        super().__init__()
        check_connection_parameters(port, timeout, connect_timeout)

        self.host = host
        self.port = port
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self._exchange_lock = threading.Lock()

    def open(self) -> None:
        """Establish TCP connection."""
        if self.is_open():
            logger.debug("TCP connection already open: %s:%d", self.host, self.port)
            return

        try:
            sock = socket.create_connection((self.host, self.port), timeout=self.connect_timeout)
        except TimeoutError:
            logger.warning("TCP connection timeout: %s:%d", self.host, self.port, exc_info=True)
            raise
        except OSError as e:
            logger.exception("TCP connection error: %s:%d", self.host, self.port)
            msg = f"Unable to connect to {self.host}:{self.port}"
            raise ModbusConnectionError(msg) from e

        sock.settimeout(self.timeout)
        self._socket = sock
        logger.info("TCP connection established: %s:%d", self.host, self.port)

    def close(self) -> None:
        """Close TCP connection."""
        if self._socket is None:
            logger.debug("TCP connection already closed: %s:%d", self.host, self.port)
            return

        sock, self._socket = self._socket, None
        try:
            sock.close()
            logger.info("TCP connection closed: %s:%d", self.host, self.port)
        except OSError as e:
            logger.debug("Error during connection close: %s", e)

    def is_open(self) -> bool:
        """Check if TCP connection is open."""
        return self._socket is not None

    def send_and_receive(self, frame: RequestFrame) -> ResponseFrame:
        """Send a request frame and receive the response.

        1. Encode the request (MBAP header + PDU) and send it
        2. Receive the response MBAP header
        3. Receive the rest of the response, as announced by the header
        4. Validate and decode the response
        """
        with self._exchange_lock:
            sock = self._socket
            if sock is None:
                msg = "Transport is not connected."
                raise ModbusConnectionError(msg)

            request = frame.encode()
            try:
                sock.sendall(request)
            except OSError as e:
                self._abort()
                msg = "Error while sending request."
                raise ModbusConnectionError(msg) from e
            log_raw_traffic("sent", request)

            header = self._recv_exactly(sock, MBAP_HEADER_LENGTH)
            try:
                remaining = remaining_response_length(frame, header)
            except MalformedResponseError:
                log_raw_traffic("recv", header, is_error=True)
                # the end of the frame is unknown: the stream can not be used anymore
                self._abort()
                raise

            response = header + self._recv_exactly(sock, remaining, already_read=header)

        return handle_response(frame, response)

    def _recv_exactly(self, sock: socket.socket, size: int, *, already_read: bytes = b"") -> bytes:
        buffer = bytearray()
        while len(buffer) < size:
            try:
                chunk = sock.recv(size - len(buffer))
            except TimeoutError as e:
                self._abort()
                msg = f"Response timeout after {self.timeout} seconds"
                raise TimeoutError(msg) from e
            except OSError as e:
                self._abort()
                msg = "Error while receiving response."
                raise ModbusConnectionError(msg, bytes_read=already_read + buffer) from e

            if not chunk:
                self._abort()
                msg = "Connection closed by remote host before the response was complete."
                raise ModbusConnectionError(msg, bytes_read=already_read + buffer)
            buffer.extend(chunk)

        return bytes(buffer)

    def _abort(self) -> None:
        logger.warning("Closing TCP connection %s:%d after a communication error.", self.host, self.port)
        self.close()


__all__ = ["TcpTransport"]
