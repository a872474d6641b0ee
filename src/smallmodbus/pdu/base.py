"""Base class for the read request PDUs (Protocol Data Units)."""

import struct
from abc import ABC, abstractmethod
from typing import TypeVar

from smallmodbus.const import FunctionCode
from smallmodbus.exceptions import OutOfRangeError

RT = TypeVar("RT")


class BaseReadPDU[RT](ABC):
    """Base class that defines the functions needed to handle a read request on the client-side.

    Every supported read request has the same layout: function code, starting address and quantity.
    Subclasses define the function code, the allowed quantity and how the response data is decoded.
    """

    function_code: FunctionCode
    max_quantity: int

    def __init__(self, start_address: int, quantity: int) -> None:
        """Initialize the read PDU.

        Args:
            start_address: Address of the first register to read
            quantity: Number of registers to read

        Raises:
            OutOfRangeError: If start_address or quantity is invalid

        """
        if not (0 <= start_address < 65536):
            msg = "Address must be between 0 and 65535."
            raise OutOfRangeError(msg)
        self.start_address = start_address

        if not (1 <= quantity <= self.max_quantity):
            msg = f"Quantity must be between 1 and {self.max_quantity}."
            raise OutOfRangeError(msg)
        self.quantity = quantity

    def encode_request(self) -> bytes:
        """Convert PDU to bytes.

        Returns:
            Function code, starting address and quantity, big endian

        """
        return struct.pack(">BHH", self.function_code, self.start_address, self.quantity)

    @property
    @abstractmethod
    def expected_byte_count(self) -> int:
        """Value of the byte count field in a successful response."""

    @abstractmethod
    def decode_data(self, data: bytes) -> RT:
        """Decode the data part of the response.

        Args:
            data: Response data, without function code and byte count

        """

    def __repr__(self) -> str:
        """Return a readable representation of the request."""
        return f"{type(self).__name__}(start_address={self.start_address}, quantity={self.quantity})"
