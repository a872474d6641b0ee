"""Holding/Input Registers PDU Module."""

import struct

from smallmodbus.const import MAX_WORD_QUANTITY, FunctionCode

from .base import BaseReadPDU


class ReadHoldingRegistersPDU(BaseReadPDU[list[int]]):
    """Read Holding Registers PDU."""

    function_code = FunctionCode.READ_HOLDING_REGISTERS
    max_quantity = MAX_WORD_QUANTITY

    @property
    def expected_byte_count(self) -> int:
        """Two bytes per register."""
        return self.quantity * 2

    def decode_data(self, data: bytes) -> list[int]:
        """Decode the register values.

        Args:
            data: Response data, without function code and byte count

        Returns:
            List of register values, each a 16-bit unsigned integer (0-65535)

        """
        return [*struct.unpack(f">{self.quantity}H", data)]


class ReadInputRegistersPDU(ReadHoldingRegistersPDU):
    """Read Input Registers PDU."""

    function_code = FunctionCode.READ_INPUT_REGISTERS
