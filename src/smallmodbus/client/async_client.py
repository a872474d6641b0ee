"""Asynchronous Modbus TCP read client.

Provides user-friendly asynchronous Modbus client API.
"""

import logging
from types import TracebackType
from typing import Self, cast

from smallmodbus.const import FunctionCode
from smallmodbus.frame import RequestFrame
from smallmodbus.parser import ResponseFrame
from smallmodbus.transport.async_base import AsyncBaseTransport

from .base import check_unit_id

logger = logging.getLogger(__name__)


class AsyncModbusClient:
    """Asynchronous Modbus Client.

    Provides an user-friendly asynchronous interface to read the registers of a single Modbus device.
    If you want to query another device on the same connection, use the `for_unit_id` method.

    Example:
        >>> import asyncio
        >>> from smallmodbus import AsyncModbusClient, AsyncTcpTransport
        >>> async def main():
        ...     transport = AsyncTcpTransport('localhost', 502)
        ...     client = AsyncModbusClient(transport, unit_id=1)
        ...     async with client:
        ...         print("Contents of register 0:", await client.read_holding_registers(0, 1))
        ...
        >>> asyncio.run(main())

    """

    def __init__(self, transport: AsyncBaseTransport, *, unit_id: int) -> None:
        """Initialize Async Modbus Client.

        Args:
            transport: Async transport layer instance (AsyncTcpTransport, etc.)
            unit_id: Unit ID of the Modbus device

        Raises:
            ValueError: If the unit ID is not in range 0-255

        """
        check_unit_id(unit_id)
        self.transport = transport
        self.unit_id = unit_id

    async def connect(self) -> None:
        """Connect to the server."""
        await self.transport.open()

    @property
    def connected(self) -> bool:
        """Report if the client is connected to the server."""
        return self.transport.is_open()

    async def disconnect(self) -> None:
        """Close the server connection."""
        await self.transport.close()

    async def execute(self, frame: RequestFrame) -> ResponseFrame:
        """Execute a request frame as-is.

        Args:
            frame: The request to send, including its transaction ID and unit ID

        Returns:
            The decoded response

        Raises:
            InvalidResponseError: If response is invalid or does not match request
            ModbusResponseError: If the server returned an exception response

        """
        return await self.transport.send_and_receive(frame)

    async def _read(
        self,
        function_code: FunctionCode,
        start_address: int,
        quantity: int,
        transaction_id: int | None,
    ) -> list[bool] | list[int]:
        frame = RequestFrame(
            function_code,
            start_address,
            quantity,
            transaction_id=self.transport.next_transaction_id() if transaction_id is None else transaction_id,
            unit_id=self.unit_id,
        )
        logger.debug("Executing %r", frame)
        response = await self.execute(frame)
        return response.registers

    async def read_coils(
        self,
        start_address: int,
        quantity: int,
        *,
        transaction_id: int | None = None,
    ) -> list[bool]:
        """Read Coil Status (Function Code 0x01).

        Args:
            start_address: Starting address
            quantity: Quantity to read (1-2000)
            transaction_id: Transaction ID to use, allocated by the transport when omitted

        Returns:
            List of coil status, True for ON, False for OFF

        Raises:
            OutOfRangeError: If the address or quantity is invalid
            InvalidResponseError: If response is invalid or does not match request
            ModbusResponseError: If the server returned an exception response

        Example:
            >>> coils = await client.read_coils(0, 8)
            [True, False, True, False, False, False, True, False]

        """
        return cast(
            "list[bool]",
            await self._read(FunctionCode.READ_COILS, start_address, quantity, transaction_id),
        )

    async def read_discrete_inputs(
        self,
        start_address: int,
        quantity: int,
        *,
        transaction_id: int | None = None,
    ) -> list[bool]:
        """Read Discrete Inputs (Function Code 0x02).

        Args:
            start_address: Starting address
            quantity: Quantity to read (1-2000)
            transaction_id: Transaction ID to use, allocated by the transport when omitted

        Returns:
            List of input status, True for ON, False for OFF

        """
        return cast(
            "list[bool]",
            await self._read(FunctionCode.READ_DISCRETE_INPUTS, start_address, quantity, transaction_id),
        )

    async def read_holding_registers(
        self,
        start_address: int,
        quantity: int,
        *,
        transaction_id: int | None = None,
    ) -> list[int]:
        """Read Holding Registers (Function Code 0x03).

        Args:
            start_address: Starting address
            quantity: Quantity to read (1-125)
            transaction_id: Transaction ID to use, allocated by the transport when omitted

        Returns:
            List of register values, each value is a 16-bit unsigned integer (0-65535)

        Example:
            >>> registers = await client.read_holding_registers(0, 4)  # Read holding registers 0, 1, 2, 3
            [1234, 5678, 9012, 3456]

        """
        return cast(
            "list[int]",
            await self._read(FunctionCode.READ_HOLDING_REGISTERS, start_address, quantity, transaction_id),
        )

    async def read_input_registers(
        self,
        start_address: int,
        quantity: int,
        *,
        transaction_id: int | None = None,
    ) -> list[int]:
        """Read Input Registers (Function Code 0x04).

        Args:
            start_address: Starting address
            quantity: Quantity to read (1-125)
            transaction_id: Transaction ID to use, allocated by the transport when omitted

        Returns:
            List of register values, each value is a 16-bit unsigned integer (0-65535)

        """
        return cast(
            "list[int]",
            await self._read(FunctionCode.READ_INPUT_REGISTERS, start_address, quantity, transaction_id),
        )

    async def __aenter__(self) -> Self:
        """Async context manager entry."""
        await self.transport.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async context manager exit."""
        await self.transport.close()

    def for_unit_id(self, unit_id: int) -> "AsyncModbusClient":
        """Create a new client instance for a different unit ID, but using the same connection.

        Args:
            unit_id: The unit ID for the new client instance.

        Returns:
            A new instance of AsyncModbusClient configured for the specified unit ID.

        """
        return AsyncModbusClient(self.transport, unit_id=unit_id)
