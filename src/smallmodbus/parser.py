"""Modbus TCP response parser.

Validates a raw response against the request that caused it and decodes it. Parsing never raises for
conditions caused by the response: the result is one of three outcomes.

- `Registers`: the decoded response frame
- `Fault`: the server answered with a Modbus exception response
- `ProtocolFailure`: the response does not belong to the request or is malformed

Use `unwrap` to turn an outcome back into a response frame or a raised exception.
"""

import logging
import struct
from dataclasses import dataclass

from .const import EXCEPTION_FLAG, MBAP_HEADER_LENGTH, MODBUS_TCP_PROTOCOL_ID, ExceptionCode
from .exceptions import (
    FunctionCodeError,
    HeaderMismatchError,
    InvalidResponseError,
    MalformedResponseError,
    ModbusResponseError,
    TransactionMismatchError,
    exception_for_code,
)
from .frame import RequestFrame

logger = logging.getLogger(__name__)

# Transaction ID + Protocol ID + Length: the bytes that are not counted by the MBAP length field
_UNCOUNTED_HEADER_LENGTH = MBAP_HEADER_LENGTH - 1


@dataclass(frozen=True)
class ResponseFrame:
    """A successful response, decoded."""

    transaction_id: int
    protocol_id: int
    length: int
    """Number of bytes following the length field: Unit ID + function code + byte count + data."""
    unit_id: int
    function_code: int
    byte_count: int
    payload: bytes
    registers: list[bool] | list[int]
    """Coil/discrete input states for bit functions, 16-bit register values for word functions."""


@dataclass(frozen=True)
class Registers:
    """Outcome: the response was decoded."""

    frame: ResponseFrame

    @property
    def values(self) -> list[bool] | list[int]:
        """Decoded register values."""
        return self.frame.registers


@dataclass(frozen=True)
class Fault:
    """Outcome: the server rejected the request with a Modbus exception response."""

    function_code: int
    """Function code of the request."""
    exception_code: int
    response_bytes: bytes = b""

    @property
    def kind(self) -> ExceptionCode | None:
        """The known exception code, or None when the server returned an unknown code."""
        try:
            return ExceptionCode(self.exception_code)
        except ValueError:
            return None

    @property
    def error(self) -> ModbusResponseError:
        """Exception matching the exception code."""
        return exception_for_code(self.exception_code, self.function_code)


@dataclass(frozen=True)
class ProtocolFailure:
    """Outcome: the response could not be matched with the request or decoded."""

    error: InvalidResponseError


type ParseOutcome = Registers | Fault | ProtocolFailure


class ResponseParser:
    """Parses responses to a single request frame."""

    def __init__(self, frame: RequestFrame) -> None:
        """Initialize the parser.

        Args:
            frame: The request that the responses answer

        """
        self.frame = frame
        self.pdu = frame.pdu

    def parse(self, data: bytes) -> ParseOutcome:
        """Validate and decode a complete response.

        Args:
            data: The full response frame: MBAP header + PDU

        Returns:
            Registers, Fault or ProtocolFailure

        """
        try:
            return self._parse(bytes(data))
        except InvalidResponseError as e:
            logger.debug("Invalid response for %r: %s", self.frame, e)
            return ProtocolFailure(e)

    def _parse(self, data: bytes) -> Registers | Fault:
        if len(data) < MBAP_HEADER_LENGTH + 1:
            msg = f"Response too short: expected at least {MBAP_HEADER_LENGTH + 1} bytes, got {len(data)}"
            raise MalformedResponseError(msg, response_bytes=data)

        transaction_id, protocol_id, length, unit_id, function_code = struct.unpack_from(">HHHBB", data)

        if transaction_id != self.frame.transaction_id:
            raise TransactionMismatchError(self.frame.transaction_id, transaction_id, response_bytes=data)

        if protocol_id != MODBUS_TCP_PROTOCOL_ID:
            msg = f"Invalid protocol ID: expected {MODBUS_TCP_PROTOCOL_ID:#06x}, received {protocol_id:#06x}"
            raise MalformedResponseError(msg, response_bytes=data)

        if unit_id != self.frame.unit_id:
            msg = f"Unit ID mismatch: expected {self.frame.unit_id:#04x}, received {unit_id:#04x}"
            raise HeaderMismatchError(msg, response_bytes=data)

        is_exception = function_code == self.frame.function_code | EXCEPTION_FLAG
        if not is_exception and function_code != self.frame.function_code:
            msg = f"Invalid function code: expected {self.frame.function_code:#04x}, received {function_code:#04x}"
            raise FunctionCodeError(msg, response_bytes=data)

        if len(data) < MBAP_HEADER_LENGTH + 2:
            msg = "Expected response to contain a byte count or exception code"
            raise MalformedResponseError(msg, response_bytes=data)

        if len(data) != _UNCOUNTED_HEADER_LENGTH + length:
            msg = f"Invalid response length: header declares {length} bytes, got {len(data) - _UNCOUNTED_HEADER_LENGTH}"
            raise MalformedResponseError(msg, response_bytes=data)

        if is_exception:
            return Fault(self.frame.function_code, data[MBAP_HEADER_LENGTH + 1], data)

        byte_count = data[MBAP_HEADER_LENGTH + 1]
        if byte_count != self.pdu.expected_byte_count:
            msg = f"Invalid byte count: expected {self.pdu.expected_byte_count}, got {byte_count}"
            raise MalformedResponseError(msg, response_bytes=data)

        payload = data[MBAP_HEADER_LENGTH + 2 :]
        if len(payload) != byte_count:
            msg = f"Invalid response data length: expected {byte_count}, got {len(payload)}"
            raise MalformedResponseError(msg, response_bytes=data)

        return Registers(
            ResponseFrame(
                transaction_id=transaction_id,
                protocol_id=protocol_id,
                length=length,
                unit_id=unit_id,
                function_code=function_code,
                byte_count=byte_count,
                payload=payload,
                registers=self.pdu.decode_data(payload),
            )
        )


def parse_response(frame: RequestFrame, data: bytes) -> ParseOutcome:
    """Validate and decode a response to the given request."""
    return ResponseParser(frame).parse(data)


def unwrap(outcome: ParseOutcome) -> ResponseFrame:
    """Get the response frame of an outcome.

    Raises:
        ModbusResponseError: For a Fault, the exception matching the exception code
        InvalidResponseError: For a ProtocolFailure, the carried error

    """
    match outcome:
        case Registers(frame=response_frame):
            return response_frame
        case Fault():
            raise outcome.error
        case ProtocolFailure(error=error):
            raise error


def remaining_response_length(frame: RequestFrame, header: bytes) -> int:
    """Get the number of bytes that follow a response MBAP header.

    The result never exceeds what a successful response to the request needs, so a transport reading
    exactly that many bytes stays within the buffer size predicted by `RequestFrame.expected_response_length`.

    Args:
        frame: The request that the response answers
        header: The first 7 bytes of the response

    Raises:
        MalformedResponseError: If the declared length is impossible for this request

    """
    try:
        _transaction_id, _protocol_id, length, _unit_id = struct.unpack(">HHHB", header)
    except struct.error as e:
        msg = f"Expected a {MBAP_HEADER_LENGTH}-byte MBAP header, got {len(header)} bytes"
        raise MalformedResponseError(msg, response_bytes=bytes(header)) from e

    remaining = length - 1  # the unit ID is part of the header
    if remaining < 2:  # noqa: PLR2004
        msg = f"Declared length {length} is too short for a response"
        raise MalformedResponseError(msg, response_bytes=bytes(header))
    if MBAP_HEADER_LENGTH + remaining > frame.expected_response_length:
        msg = (
            f"Declared length {length} exceeds the expected response length "
            f"of {frame.expected_response_length} bytes"
        )
        raise MalformedResponseError(msg, response_bytes=bytes(header))

    return remaining
