"""Tests for smallmodbus/exceptions.py ."""

import pytest
from smallmodbus.const import ExceptionCode
from smallmodbus.exceptions import (
    GatewayTargetDeviceFailedToRespondError,
    IllegalFunctionError,
    InvalidResponseError,
    ModbusConnectionError,
    ModbusResponseError,
    OutOfRangeError,
    RequestConstructionError,
    SmallModbusError,
    TransactionMismatchError,
    UnknownModbusResponseError,
    UnsupportedFunctionError,
    error_code_to_exception_map,
    exception_for_code,
    register_custom_exception,
)


def test_modbus_response_error() -> None:
    """Test Modbus response error handling."""

    class TestError(ModbusResponseError):
        error_code = 0xAB

    test_error = TestError(0xAB, 0x02)
    assert test_error.error_code == 0xAB
    assert test_error.function_code == 0x02

    with pytest.raises(AssertionError):
        TestError(0x01, 0x02)


def test_register_custom_exception() -> None:
    """Test registering custom Modbus exceptions."""

    class CustomError(ModbusResponseError):
        error_code = 0xFE

    register_custom_exception(CustomError)
    try:
        assert error_code_to_exception_map[0xFE] is CustomError
        assert isinstance(exception_for_code(0xFE, 0x03), CustomError)
        # Registering again should raise ValueError
        with pytest.raises(ValueError, match=r".* already registered."):
            register_custom_exception(CustomError)
    finally:
        del error_code_to_exception_map[0xFE]


def test_unknown_modbus_response_error() -> None:
    """Test UnknownModbusResponseError for unknown error codes."""
    unknown_error = UnknownModbusResponseError(0xFF, 0x03)
    assert unknown_error.error_code == 0xFF
    assert unknown_error.function_code == 0x03
    assert str(unknown_error) == "Unknown Modbus Exception 0xff for function code 0x03"


def test_exception_table_is_complete() -> None:
    """Test that every exception code of the table has its own class."""
    assert set(ExceptionCode).issubset(error_code_to_exception_map)
    for code in ExceptionCode:
        error = exception_for_code(code, 0x01)
        assert error.error_code == code
        assert not isinstance(error, UnknownModbusResponseError)


def test_exception_for_code() -> None:
    """Test creating exceptions from exception codes."""
    assert isinstance(exception_for_code(0x01, 0x04), IllegalFunctionError)
    assert isinstance(exception_for_code(0x0B, 0x04), GatewayTargetDeviceFailedToRespondError)

    unknown = exception_for_code(0x09, 0x04)
    assert isinstance(unknown, UnknownModbusResponseError)
    assert unknown.error_code == 0x09


def test_exception_message_contains_description() -> None:
    """Test that the message of a known exception code explains the code."""
    error = exception_for_code(0x02, 0x01)

    assert error.description.startswith("Illegal Data Address: The data address received in the query")
    assert str(error) == f"Modbus Exception 0x02 for function code 0x01: {error.description}"


def test_every_exception_code_has_a_description() -> None:
    """Test that every class of the exception table carries its own description."""
    descriptions = {exception_for_code(code, 0x03).description for code in ExceptionCode}

    assert "" not in descriptions
    assert len(descriptions) == len(ExceptionCode)


def test_exception_message_without_description() -> None:
    """Test that a custom exception without description keeps the short message."""

    class VendorError(ModbusResponseError):
        error_code = 0xAC

    assert str(VendorError(0xAC, 0x04)) == "Modbus Exception 0xac for function code 0x04"


def test_unsupported_function_error() -> None:
    """Test the message and attributes of UnsupportedFunctionError."""
    error = UnsupportedFunctionError(0x10)
    assert error.function_code == 0x10
    assert str(error) == "Unsupported function code: 0x10"


def test_hierarchy() -> None:
    """Test the exception hierarchy."""
    assert issubclass(UnsupportedFunctionError, RequestConstructionError)
    assert issubclass(OutOfRangeError, RequestConstructionError)
    assert issubclass(RequestConstructionError, ValueError)
    for error_class in (RequestConstructionError, ModbusConnectionError, InvalidResponseError, ModbusResponseError):
        assert issubclass(error_class, SmallModbusError)
    assert issubclass(TransactionMismatchError, InvalidResponseError)


def test_transaction_mismatch_error() -> None:
    """Test the message and attributes of TransactionMismatchError."""
    error = TransactionMismatchError(1, 2, response_bytes=b"\x00\x02")
    assert error.expected == 1
    assert error.received == 2
    assert error.response_bytes == b"\x00\x02"
    assert str(error) == "Transaction ID mismatch: expected 0x0001, received 0x0002"


def test_modbus_connection_error_bytes_read() -> None:
    """Test that ModbusConnectionError keeps the bytes read so far."""
    assert ModbusConnectionError("lost").response_bytes == b""
    assert ModbusConnectionError("lost", bytes_read=b"\x00\x01").response_bytes == b"\x00\x01"
