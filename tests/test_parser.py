"""Tests for smallmodbus/parser.py ."""

import struct

import pytest
from smallmodbus.const import ExceptionCode, FunctionCode
from smallmodbus.exceptions import (
    FunctionCodeError,
    HeaderMismatchError,
    IllegalDataAddressError,
    InvalidResponseError,
    MalformedResponseError,
    ModbusResponseError,
    TransactionMismatchError,
    UnknownModbusResponseError,
)
from smallmodbus.frame import RequestFrame
from smallmodbus.parser import (
    Fault,
    ProtocolFailure,
    Registers,
    ResponseParser,
    parse_response,
    remaining_response_length,
    unwrap,
)


def _response(
    pdu: bytes,
    *,
    transaction_id: int = 1,
    protocol_id: int = 0,
    unit_id: int = 1,
    length: int | None = None,
) -> bytes:
    """Build a response frame around a PDU."""
    if length is None:
        length = len(pdu) + 1
    return struct.pack(">HHHB", transaction_id, protocol_id, length, unit_id) + pdu


@pytest.fixture
def coils_frame() -> RequestFrame:
    """Read 8 coils from unit 1."""
    return RequestFrame(FunctionCode.READ_COILS, 0, 8, transaction_id=1, unit_id=1)


@pytest.fixture
def registers_frame() -> RequestFrame:
    """Read 2 holding registers from unit 1."""
    return RequestFrame(FunctionCode.READ_HOLDING_REGISTERS, 100, 2, transaction_id=1, unit_id=1)


class TestSuccessfulResponses:
    """Tests for decoding successful responses."""

    def test_read_coils(self, coils_frame: RequestFrame) -> None:
        """Test decoding of coils, least significant bit first."""
        outcome = parse_response(coils_frame, _response(bytes([0x01, 0x01, 0b10110010])))

        assert isinstance(outcome, Registers)
        assert outcome.values == [False, True, False, False, True, True, False, True]
        assert outcome.frame.transaction_id == 1
        assert outcome.frame.protocol_id == 0
        assert outcome.frame.length == 4
        assert outcome.frame.unit_id == 1
        assert outcome.frame.function_code == 0x01
        assert outcome.frame.byte_count == 1
        assert outcome.frame.payload == bytes([0b10110010])

    def test_read_coils_response_has_expected_length(self, coils_frame: RequestFrame) -> None:
        """Test that a successful response fills the predicted buffer exactly."""
        response = _response(bytes([0x01, 0x01, 0xFF]))
        assert len(response) == coils_frame.expected_response_length

    def test_read_discrete_inputs_over_multiple_bytes(self) -> None:
        """Test decoding of discrete inputs spanning more than one byte."""
        frame = RequestFrame(FunctionCode.READ_DISCRETE_INPUTS, 0, 9, transaction_id=5, unit_id=1)
        outcome = parse_response(frame, _response(bytearray.fromhex("02 02 00 01"), transaction_id=5))

        assert isinstance(outcome, Registers)
        assert outcome.values == [False] * 8 + [True]

    def test_read_holding_registers(self, registers_frame: RequestFrame) -> None:
        """Test decoding of big endian registers."""
        outcome = parse_response(registers_frame, _response(bytearray.fromhex("03 04 00 0A 01 2C")))

        assert isinstance(outcome, Registers)
        assert outcome.values == [10, 300]
        assert outcome.frame.byte_count == 4

    def test_read_input_registers(self) -> None:
        """Test decoding of input registers."""
        frame = RequestFrame(FunctionCode.READ_INPUT_REGISTERS, 0, 1, transaction_id=0xFFFF, unit_id=0)
        outcome = parse_response(frame, _response(bytearray.fromhex("04 02 FF FE"), transaction_id=0xFFFF, unit_id=0))

        assert isinstance(outcome, Registers)
        assert outcome.values == [0xFFFE]

    def test_parser_is_reusable(self, registers_frame: RequestFrame) -> None:
        """Test that a parser can be used for multiple responses to the same request."""
        parser = ResponseParser(registers_frame)
        first = parser.parse(_response(bytearray.fromhex("03 04 00 01 00 02")))
        second = parser.parse(_response(bytearray.fromhex("03 04 00 03 00 04")))

        assert isinstance(first, Registers)
        assert isinstance(second, Registers)
        assert first.values == [1, 2]
        assert second.values == [3, 4]


class TestExceptionResponses:
    """Tests for Modbus exception responses."""

    def test_illegal_data_address(self, coils_frame: RequestFrame) -> None:
        """Test an exception response with exception code 2."""
        outcome = parse_response(coils_frame, _response(bytes([0x81, 0x02])))

        assert isinstance(outcome, Fault)
        assert outcome.function_code == 0x01
        assert outcome.exception_code == 0x02
        assert outcome.kind is ExceptionCode.ILLEGAL_DATA_ADDRESS
        assert isinstance(outcome.error, IllegalDataAddressError)

    @pytest.mark.parametrize("exception_code", list(ExceptionCode))
    def test_known_exception_codes(self, registers_frame: RequestFrame, exception_code: ExceptionCode) -> None:
        """Test that every exception code of the table is recognized."""
        outcome = parse_response(registers_frame, _response(bytes([0x83, exception_code])))

        assert isinstance(outcome, Fault)
        assert outcome.kind is exception_code
        assert outcome.error.error_code == exception_code
        assert type(outcome.error) is not UnknownModbusResponseError

    @pytest.mark.parametrize("exception_code", [0x00, 0x09, 0x0C, 0xFF])
    def test_unknown_exception_code(self, registers_frame: RequestFrame, exception_code: int) -> None:
        """Test that unknown exception codes are reported, not dropped."""
        outcome = parse_response(registers_frame, _response(bytes([0x83, exception_code])))

        assert isinstance(outcome, Fault)
        assert outcome.kind is None
        assert isinstance(outcome.error, UnknownModbusResponseError)
        assert outcome.error.error_code == exception_code
        assert outcome.error.function_code == 0x03

    def test_exception_response_without_code(self, registers_frame: RequestFrame) -> None:
        """Test an exception response that was cut off after the function code."""
        outcome = parse_response(registers_frame, _response(bytes([0x83])))

        assert isinstance(outcome, ProtocolFailure)
        assert isinstance(outcome.error, MalformedResponseError)


class TestProtocolFailures:
    """Tests for responses that do not match the request."""

    def test_transaction_mismatch(self, coils_frame: RequestFrame) -> None:
        """Test that a response for another transaction is reported."""
        response = _response(bytes([0x01, 0x01, 0xFF]), transaction_id=2)
        outcome = parse_response(coils_frame, response)

        assert isinstance(outcome, ProtocolFailure)
        assert isinstance(outcome.error, TransactionMismatchError)
        assert outcome.error.expected == 1
        assert outcome.error.received == 2
        assert outcome.error.response_bytes == response

    def test_transaction_mismatch_checked_first(self, coils_frame: RequestFrame) -> None:
        """Test that the transaction ID is checked before anything else in the header."""
        response = _response(bytes([0x05, 0x01, 0xFF]), transaction_id=9, protocol_id=1, unit_id=7)
        outcome = parse_response(coils_frame, response)

        assert isinstance(outcome, ProtocolFailure)
        assert isinstance(outcome.error, TransactionMismatchError)

    def test_invalid_protocol_id(self, coils_frame: RequestFrame) -> None:
        """Test that a protocol ID other than 0 is rejected."""
        outcome = parse_response(coils_frame, _response(bytes([0x01, 0x01, 0xFF]), protocol_id=1))

        assert isinstance(outcome, ProtocolFailure)
        assert isinstance(outcome.error, MalformedResponseError)
        assert "protocol ID" in str(outcome.error)

    def test_unit_id_mismatch(self, coils_frame: RequestFrame) -> None:
        """Test that a response from another unit is rejected."""
        outcome = parse_response(coils_frame, _response(bytes([0x01, 0x01, 0xFF]), unit_id=2))

        assert isinstance(outcome, ProtocolFailure)
        assert isinstance(outcome.error, HeaderMismatchError)
        assert str(outcome.error) == "Unit ID mismatch: expected 0x01, received 0x02"

    @pytest.mark.parametrize("function_code", [0x02, 0x03, 0x82, 0x00, 0xFF])
    def test_unrecognized_function_code(self, coils_frame: RequestFrame, function_code: int) -> None:
        """Test that a function code that is neither the request's nor its exception variant is reported."""
        outcome = parse_response(coils_frame, _response(bytes([function_code, 0x01, 0xFF])))

        assert isinstance(outcome, ProtocolFailure)
        assert isinstance(outcome.error, FunctionCodeError)
        assert str(outcome.error) == f"Invalid function code: expected 0x01, received {function_code:#04x}"

    def test_byte_count_mismatch(self, registers_frame: RequestFrame) -> None:
        """Test that the byte count is checked against the requested quantity."""
        outcome = parse_response(registers_frame, _response(bytearray.fromhex("03 06 00 01 00 02 00 03")))

        assert isinstance(outcome, ProtocolFailure)
        assert isinstance(outcome.error, MalformedResponseError)
        assert str(outcome.error) == "Invalid byte count: expected 4, got 6"

    def test_declared_length_mismatch(self, registers_frame: RequestFrame) -> None:
        """Test that the MBAP length must match the bytes present."""
        outcome = parse_response(registers_frame, _response(bytearray.fromhex("03 04 00 01 00 02"), length=9))

        assert isinstance(outcome, ProtocolFailure)
        assert isinstance(outcome.error, MalformedResponseError)
        assert "header declares 9 bytes" in str(outcome.error)

    def test_truncated_data(self, registers_frame: RequestFrame) -> None:
        """Test that missing register data is reported."""
        outcome = parse_response(registers_frame, _response(bytearray.fromhex("03 04 00 01")))

        assert isinstance(outcome, ProtocolFailure)
        assert isinstance(outcome.error, MalformedResponseError)
        assert str(outcome.error) == "Invalid response data length: expected 4, got 2"

    @pytest.mark.parametrize("length", [0, 1, 7])
    def test_response_too_short(self, coils_frame: RequestFrame, length: int) -> None:
        """Test that a response without function code is reported."""
        outcome = parse_response(coils_frame, _response(bytes([0x01, 0x01, 0xFF]))[:length])

        assert isinstance(outcome, ProtocolFailure)
        assert isinstance(outcome.error, MalformedResponseError)

    def test_response_without_byte_count(self, coils_frame: RequestFrame) -> None:
        """Test a successful function code without byte count."""
        outcome = parse_response(coils_frame, _response(bytes([0x01])))

        assert isinstance(outcome, ProtocolFailure)
        assert isinstance(outcome.error, MalformedResponseError)

    def test_failures_are_all_invalid_response_errors(self, coils_frame: RequestFrame) -> None:
        """Test that every protocol failure carries an InvalidResponseError."""
        for response in (
            _response(bytes([0x01, 0x01, 0xFF]), transaction_id=3),
            _response(bytes([0x07, 0x01, 0xFF])),
            _response(bytes([0x01, 0x02, 0xFF, 0xFF])),
        ):
            outcome = parse_response(coils_frame, response)
            assert isinstance(outcome, ProtocolFailure)
            assert isinstance(outcome.error, InvalidResponseError)


class TestUnwrap:
    """Tests for unwrap."""

    def test_unwrap_registers(self, registers_frame: RequestFrame) -> None:
        """Test that a successful outcome returns the response frame."""
        response_frame = unwrap(parse_response(registers_frame, _response(bytearray.fromhex("03 04 00 0A 01 2C"))))
        assert response_frame.registers == [10, 300]

    def test_unwrap_fault(self, registers_frame: RequestFrame) -> None:
        """Test that a fault raises the matching ModbusResponseError."""
        with pytest.raises(IllegalDataAddressError) as exc_info:
            unwrap(parse_response(registers_frame, _response(bytes([0x83, 0x02]))))

        assert isinstance(exc_info.value, ModbusResponseError)
        assert exc_info.value.function_code == 0x03

    def test_unwrap_protocol_failure(self, registers_frame: RequestFrame) -> None:
        """Test that a protocol failure raises the carried error."""
        with pytest.raises(TransactionMismatchError):
            unwrap(parse_response(registers_frame, _response(bytearray.fromhex("03 04 00 0A 01 2C"), transaction_id=8)))


class TestRemainingResponseLength:
    """Tests for remaining_response_length."""

    def test_successful_response(self, registers_frame: RequestFrame) -> None:
        """Test the remaining length of a successful response."""
        header = struct.pack(">HHHB", 1, 0, 7, 1)
        assert remaining_response_length(registers_frame, header) == 6

    def test_exception_response(self, registers_frame: RequestFrame) -> None:
        """Test that the shorter exception response is accepted."""
        header = struct.pack(">HHHB", 1, 0, 3, 1)
        assert remaining_response_length(registers_frame, header) == 2

    def test_length_exceeds_expected_response(self, registers_frame: RequestFrame) -> None:
        """Test that a response longer than predicted is rejected before reading it."""
        header = struct.pack(">HHHB", 1, 0, 8, 1)
        with pytest.raises(MalformedResponseError, match="exceeds the expected response length of 13 bytes"):
            remaining_response_length(registers_frame, header)

    @pytest.mark.parametrize("length", [0, 1, 2])
    def test_length_too_short(self, registers_frame: RequestFrame, length: int) -> None:
        """Test that a declared length without room for a PDU is rejected."""
        header = struct.pack(">HHHB", 1, 0, length, 1)
        with pytest.raises(MalformedResponseError, match="too short"):
            remaining_response_length(registers_frame, header)

    def test_incomplete_header(self, registers_frame: RequestFrame) -> None:
        """Test that a header must be exactly 7 bytes."""
        with pytest.raises(MalformedResponseError, match="Expected a 7-byte MBAP header"):
            remaining_response_length(registers_frame, b"\x00\x01\x00")
