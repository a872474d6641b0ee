"""Modbus TCP request frame.

A `RequestFrame` bundles every parameter of a single read request and derives the exact bytes to send
(MBAP header + PDU) as well as the length of the successful response.
"""

import struct
from dataclasses import dataclass
from typing import Any, Self

from .const import MBAP_HEADER_LENGTH, MODBUS_TCP_PROTOCOL_ID, FunctionCode
from .exceptions import OutOfRangeError, RequestConstructionError, UnsupportedFunctionError
from .pdu import BaseReadPDU, get_pdu_class

DEFAULT_TRANSACTION_ID = 1


def _to_function_code(function_code: int) -> FunctionCode:
    try:
        return FunctionCode(function_code)
    except ValueError as e:
        raise UnsupportedFunctionError(function_code) from e


def _check_transaction_id(transaction_id: int) -> None:
    if not (0 <= transaction_id <= 0xFFFF):
        msg = "Transaction ID must be between 0 and 65535."
        raise OutOfRangeError(msg)


def _check_unit_id(unit_id: int) -> None:
    if not (0 <= unit_id <= 0xFF):
        msg = "Unit ID must be between 0 and 255."
        raise OutOfRangeError(msg)


@dataclass(frozen=True)
class RequestFrame:
    """Validated parameters of a single read request.

    All fields are validated together when the frame is created, and again every time the frame is
    encoded, so the quantity is always checked against the function code it is sent with.

    Example:
        >>> frame = RequestFrame(FunctionCode.READ_COILS, 0, 8)
        >>> frame.encode().hex(" ")
        '00 01 00 00 00 06 00 01 00 00 00 08'
        >>> frame.expected_response_length
        10

    """

    function_code: FunctionCode
    start_address: int
    quantity: int
    transaction_id: int = DEFAULT_TRANSACTION_ID
    unit_id: int = 0

    def __post_init__(self) -> None:
        """Validate the request parameters.

        Raises:
            UnsupportedFunctionError: If the function code is not one of the read function codes
            OutOfRangeError: If any other field is outside of its valid range

        """
        object.__setattr__(self, "function_code", _to_function_code(self.function_code))
        self._validate()

    def _validate(self) -> BaseReadPDU[Any]:
        """Check every field against the others and return the matching PDU."""
        _check_transaction_id(self.transaction_id)
        _check_unit_id(self.unit_id)
        pdu_class = get_pdu_class(self.function_code)
        return pdu_class(self.start_address, self.quantity)

    @property
    def pdu(self) -> BaseReadPDU[Any]:
        """PDU for this request, validated against the current field values."""
        return self._validate()

    def encode(self) -> bytes:
        """Convert the request to bytes.

        Returns:
            MBAP header (7 bytes) followed by the request PDU (5 bytes)

        """
        request_pdu_bytes = self._validate().encode_request()

        # MBAP header format:
        # - Transaction ID (2 bytes): echoed by the server
        # - Protocol ID (2 bytes): fixed to 0x0000
        # - Length (2 bytes): number of following bytes (Unit ID + PDU)
        # - Unit ID (1 byte)
        mbap_header = struct.pack(
            ">HHHB",
            self.transaction_id,
            MODBUS_TCP_PROTOCOL_ID,
            len(request_pdu_bytes) + 1,
            self.unit_id,
        )
        return mbap_header + request_pdu_bytes

    @property
    def expected_response_length(self) -> int:
        """Length in bytes of a successful response to this request.

        MBAP header + function code + byte count + data.
        """
        return MBAP_HEADER_LENGTH + 2 + self.pdu.expected_byte_count


class RequestFrameBuilder:
    """Step-by-step construction of a `RequestFrame`.

    Every setter validates its own value right away. The quantity is checked against the function
    code bound at that moment, so the function code must be set first. Changing the function code
    afterwards does not re-check the quantity: `build` does, together with every other field.

    Example:
        >>> frame = RequestFrameBuilder().function_code(3).start_address(100).quantity(2).build()

    """

    def __init__(self) -> None:
        """Initialize an empty builder."""
        self._function_code: FunctionCode | None = None
        self._start_address = 0
        self._quantity: int | None = None
        self._transaction_id = DEFAULT_TRANSACTION_ID
        self._unit_id = 0

    def function_code(self, function_code: int) -> Self:
        """Set the function code.

        Raises:
            UnsupportedFunctionError: If the function code is not one of the read function codes

        """
        self._function_code = _to_function_code(function_code)
        return self

    def start_address(self, start_address: int) -> Self:
        """Set the address of the first register to read.

        Raises:
            OutOfRangeError: If the address is not between 0 and 65535

        """
        if not (0 <= start_address <= 0xFFFF):
            msg = "Address must be between 0 and 65535."
            raise OutOfRangeError(msg)
        self._start_address = start_address
        return self

    def quantity(self, quantity: int) -> Self:
        """Set the number of registers to read.

        Raises:
            OutOfRangeError: If no function code is set yet, or the quantity is invalid for it

        """
        if self._function_code is None:
            msg = "Function code must be set before the quantity."
            raise OutOfRangeError(msg)

        max_quantity = get_pdu_class(self._function_code).max_quantity
        if not (1 <= quantity <= max_quantity):
            msg = f"Quantity must be between 1 and {max_quantity}."
            raise OutOfRangeError(msg)
        self._quantity = quantity
        return self

    def transaction_id(self, transaction_id: int) -> Self:
        """Set the transaction identifier echoed by the server."""
        _check_transaction_id(transaction_id)
        self._transaction_id = transaction_id
        return self

    def unit_id(self, unit_id: int) -> Self:
        """Set the unit identifier."""
        _check_unit_id(unit_id)
        self._unit_id = unit_id
        return self

    def build(self) -> RequestFrame:
        """Validate all fields together and create the request frame.

        Raises:
            RequestConstructionError: If the function code is missing
            OutOfRangeError: If the quantity is missing or invalid for the function code

        """
        if self._function_code is None:
            msg = "Function code must be set."
            raise RequestConstructionError(msg)
        if self._quantity is None:
            msg = "Quantity must be set."
            raise OutOfRangeError(msg)

        return RequestFrame(
            self._function_code,
            self._start_address,
            self._quantity,
            transaction_id=self._transaction_id,
            unit_id=self._unit_id,
        )

    finalize = build


def build_request(frame: RequestFrame) -> bytes:
    """Get the bytes to send for a request."""
    return frame.encode()


def expected_response_length(frame: RequestFrame) -> int:
    """Get the length of a successful response, used to size the receive buffer."""
    return frame.expected_response_length
