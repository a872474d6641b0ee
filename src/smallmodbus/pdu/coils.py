"""Read Coils PDU Module."""

from smallmodbus.const import MAX_BIT_QUANTITY, FunctionCode

from .base import BaseReadPDU


class ReadCoilsPDU(BaseReadPDU[list[bool]]):
    """Read Coils PDU."""

    function_code = FunctionCode.READ_COILS
    max_quantity = MAX_BIT_QUANTITY

    @property
    def expected_byte_count(self) -> int:
        """One bit per coil, the last byte padded with zeros."""
        return (self.quantity + 7) // 8

    def decode_data(self, data: bytes) -> list[bool]:
        """Decode the coil states.

        Bits are packed least significant bit first, bytes in ascending order.

        Args:
            data: Response data, without function code and byte count

        Returns:
            List of boolean values representing the coil states

        """
        return [bool((data[i // 8] >> (i % 8)) & 1) for i in range(self.quantity)]
