"""Blocking Modbus TCP read client."""

import logging
from types import TracebackType
from typing import Self, cast

from smallmodbus.const import FunctionCode
from smallmodbus.frame import RequestFrame
from smallmodbus.parser import ResponseFrame
from smallmodbus.transport.base import BaseTransport

from .base import check_unit_id

logger = logging.getLogger(__name__)


class ModbusClient:
    """Blocking Modbus Client.

    Reads the coils, discrete inputs and registers of a single Modbus device.
    If you want to query another device on the same connection, use the `for_unit_id` method.

    Example:
        >>> from smallmodbus import ModbusClient, TcpTransport
        >>> with ModbusClient(TcpTransport("localhost", 502), unit_id=1) as client:
        ...     print("Status of coils 0-7:", client.read_coils(0, 8))

    """

    def __init__(self, transport: BaseTransport, *, unit_id: int) -> None:
        """Initialize Modbus Client.

        Args:
            transport: Blocking transport layer instance (TcpTransport)
            unit_id: Unit ID of the Modbus device

        Raises:
            ValueError: If the unit ID is not in range 0-255

        """
        check_unit_id(unit_id)
        self.transport = transport
        self.unit_id = unit_id

    def connect(self) -> None:
        """Connect to the server."""
        self.transport.open()

    @property
    def connected(self) -> bool:
        """Report if the client is connected to the server."""
        return self.transport.is_open()

    def disconnect(self) -> None:
        """Close the server connection."""
        self.transport.close()

    def execute(self, frame: RequestFrame) -> ResponseFrame:
        """Execute a request frame as-is.

        Args:
            frame: The request to send, including its transaction ID and unit ID

        Returns:
            The decoded response

        Raises:
            InvalidResponseError: If response is invalid or does not match request
            ModbusResponseError: If the server returned an exception response

        """
        return self.transport.send_and_receive(frame)

    def _read(
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
        return self.execute(frame).registers

    def read_coils(self, start_address: int, quantity: int, *, transaction_id: int | None = None) -> list[bool]:
        """Read Coil Status (Function Code 0x01).

        Args:
            start_address: Starting address
            quantity: Quantity to read (1-2000)
            transaction_id: Transaction ID to use, allocated by the transport when omitted

        Returns:
            List of coil status, True for ON, False for OFF

        """
        return cast("list[bool]", self._read(FunctionCode.READ_COILS, start_address, quantity, transaction_id))

    def read_discrete_inputs(
        self,
        start_address: int,
        quantity: int,
        *,
        transaction_id: int | None = None,
    ) -> list[bool]:
        """Read Discrete Inputs (Function Code 0x02)."""
        return cast(
            "list[bool]",
            self._read(FunctionCode.READ_DISCRETE_INPUTS, start_address, quantity, transaction_id),
        )

    def read_holding_registers(
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

        """
        return cast(
            "list[int]",
            self._read(FunctionCode.READ_HOLDING_REGISTERS, start_address, quantity, transaction_id),
        )

    def read_input_registers(
        self,
        start_address: int,
        quantity: int,
        *,
        transaction_id: int | None = None,
    ) -> list[int]:
        """Read Input Registers (Function Code 0x04)."""
        return cast(
            "list[int]",
            self._read(FunctionCode.READ_INPUT_REGISTERS, start_address, quantity, transaction_id),
        )

    def __enter__(self) -> Self:
        """Context manager entry."""
        self.transport.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit."""
        self.transport.close()

    def for_unit_id(self, unit_id: int) -> "ModbusClient":
        """Create a new client instance for a different unit ID, but using the same connection."""
        return ModbusClient(self.transport, unit_id=unit_id)
