"""Modbus TCP constants."""

from enum import IntEnum

MBAP_HEADER_LENGTH = 7
"""Transaction ID (2) + Protocol ID (2) + Length (2) + Unit ID (1)."""

MODBUS_TCP_PROTOCOL_ID = 0x0000

EXCEPTION_FLAG = 0x80
"""Set on the echoed function code of an exception response."""


class FunctionCode(IntEnum):
    """Supported read function codes."""

    READ_COILS = 0x01
    READ_DISCRETE_INPUTS = 0x02
    READ_HOLDING_REGISTERS = 0x03
    READ_INPUT_REGISTERS = 0x04


MAX_BIT_QUANTITY = 2000
MAX_WORD_QUANTITY = 125


class ExceptionCode(IntEnum):
    """Exception codes a server can return in an exception response."""

    ILLEGAL_FUNCTION = 0x01
    ILLEGAL_DATA_ADDRESS = 0x02
    ILLEGAL_DATA_VALUE = 0x03
    SERVER_DEVICE_FAILURE = 0x04
    ACKNOWLEDGE = 0x05
    SERVER_DEVICE_BUSY = 0x06
    NEGATIVE_ACKNOWLEDGE = 0x07
    MEMORY_PARITY_ERROR = 0x08
    GATEWAY_PATH_UNAVAILABLE = 0x0A
    GATEWAY_TARGET_DEVICE_FAILED_TO_RESPOND = 0x0B
