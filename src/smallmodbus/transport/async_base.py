"""Async Transport layer base class.

Defines the unified interface that all async transport layer implementations must follow.
"""

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Self

from smallmodbus.frame import RequestFrame
from smallmodbus.parser import ResponseFrame


class AsyncBaseTransport(ABC):
    """Async Transport Layer Base Class.

    Async counterpart of `BaseTransport`: MBAP framing and response validation stay inside the
    transport, the client only deals with request frames and decoded responses.
    """

    _next_transaction_id: int = 1

    def next_transaction_id(self) -> int:
        """Get a transaction ID for a new request on this transport.

        IDs are handed out sequentially starting at 1, wrapping around after 0xFFFF.
        """
        current_id = self._next_transaction_id
        self._next_transaction_id = (self._next_transaction_id + 1) % 0x10000  # 16-bit wraparound
        return current_id

    @abstractmethod
    async def open(self) -> None:
        """Open Transport Connection.

        Raises:
            ModbusConnectionError: When connection cannot be established
            TimeoutError: When the connection is not established within the connect timeout

        """

    @abstractmethod
    async def close(self) -> None:
        """Close Transport Connection."""

    @abstractmethod
    def is_open(self) -> bool:
        """Check Connection Status.

        Returns:
            True if connection is established and available, False otherwise

        """

    @abstractmethod
    async def send_and_receive(self, frame: RequestFrame) -> ResponseFrame:
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

    async def __aenter__(self) -> Self:
        """Async Context Manager Entry."""
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async Context Manager Exit."""
        await self.close()
