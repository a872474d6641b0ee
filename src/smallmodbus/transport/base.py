"""Blocking Transport layer base class.

Defines the interface that the blocking transport implementations must follow.
"""

import threading
from abc import ABC, abstractmethod
from types import TracebackType
from typing import Self

from smallmodbus.frame import RequestFrame
from smallmodbus.parser import ResponseFrame


class BaseTransport(ABC):
    """Blocking Transport Layer Base Class.

    A transport owns the connection to the Modbus server. It sends the bytes of a request frame,
    reads back exactly one response and hands it to the response parser.
    Only one request/response exchange is in flight at a time.
    """

    def __init__(self) -> None:
        """Initialize the transaction ID counter."""
        self._next_transaction_id = 1
        self._transaction_id_lock = threading.Lock()

    def next_transaction_id(self) -> int:
        """Get a transaction ID for a new request on this transport.

        IDs are handed out sequentially starting at 1, wrapping around after 0xFFFF.
        """
        with self._transaction_id_lock:
            current_id = self._next_transaction_id
            self._next_transaction_id = (self._next_transaction_id + 1) % 0x10000  # 16-bit wraparound
            return current_id

    @abstractmethod
    def open(self) -> None:
        """Open Transport Connection.

        Raises:
            ModbusConnectionError: When connection cannot be established
            TimeoutError: When the connection is not established within the connect timeout

        """

    @abstractmethod
    def close(self) -> None:
        """Close Transport Connection."""

    @abstractmethod
    def is_open(self) -> bool:
        """Check Connection Status.

        Returns:
            True if connection is established and available, False otherwise

        """

    @abstractmethod
    def send_and_receive(self, frame: RequestFrame) -> ResponseFrame:
        """Send a request frame and receive the response.

        Args:
            frame: The request to send

        Returns:
            The decoded response

        Raises:
            ModbusConnectionError: Connection error
            TimeoutError: No response within the timeout
            InvalidResponseError: The response does not match the request or is malformed
            ModbusResponseError: The server returned an exception response

        """

    def __enter__(self) -> Self:
        """Context Manager Entry."""
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context Manager Exit."""
        self.close()
