"""Exceptions."""

from typing import Any

from .const import ExceptionCode


class SmallModbusError(Exception):
    """Base exception class for the smallmodbus library."""


class RequestConstructionError(SmallModbusError, ValueError):
    """Invalid request parameters.

    Raised synchronously while a request is being built, before any byte is sent.
    """


class UnsupportedFunctionError(RequestConstructionError):
    """The function code is not one of the supported read function codes."""

    function_code: int

    def __init__(self, function_code: int) -> None:
        """Initialize UnsupportedFunctionError."""
        super().__init__(f"Unsupported function code: {function_code:#04x}")
        self.function_code = function_code


class OutOfRangeError(RequestConstructionError):
    """A request field is outside of its valid range."""


class ModbusConnectionError(SmallModbusError):
    """Connection error exception.

    Raised when unable to establish or maintain connection with Modbus device.
    """

    response_bytes: bytes
    """The bytes that were read before the connection error occurred. Can be empty."""

    def __init__(self, *args: Any, bytes_read: bytes | None = None, **kwargs: Any) -> None:
        """Initialize ModbusConnectionError."""
        super().__init__(*args, **kwargs)
        self.response_bytes = bytes_read or b""


class InvalidResponseError(SmallModbusError):
    """Invalid response error exception.

    Raised when received response format is incorrect or unexpected.
    """

    response_bytes: bytes

    def __init__(self, *args: Any, response_bytes: bytes, **kwargs: Any) -> None:
        """Initialize InvalidResponseError."""
        super().__init__(*args, **kwargs)
        self.response_bytes = response_bytes


class TransactionMismatchError(InvalidResponseError):
    """The transaction ID of the response does not match the request."""

    def __init__(self, expected: int, received: int, *, response_bytes: bytes) -> None:
        """Initialize TransactionMismatchError.

        Args:
            expected: Transaction ID of the request
            received: Transaction ID found in the response
            response_bytes: The offending response

        """
        super().__init__(
            f"Transaction ID mismatch: expected {expected:#06x}, received {received:#06x}",
            response_bytes=response_bytes,
        )
        self.expected = expected
        self.received = received


class FunctionCodeError(InvalidResponseError):
    """Function code error exception.

    Raised when the function code in the response is neither the request function code
    nor its exception variant.
    """


class HeaderMismatchError(InvalidResponseError):
    """Header mismatch error exception.

    Raised when the header of the received response does not match the request.
    """


class MalformedResponseError(InvalidResponseError):
    """The response length fields are inconsistent with the request or with each other."""


class ModbusResponseError(SmallModbusError):
    """Base class for all Modbus exception response."""

    error_code: int
    description: str = ""
    """Human readable explanation of the exception code, appended to the message when set."""

    def __init__(self, error_code: int, function_code: int) -> None:
        """Initialize ModbusResponseError.

        Args:
            error_code: Error code from the Modbus exception response
            function_code: Function code of the request that caused the exception

        """
        msg = f"Modbus Exception {error_code:#04x} for function code {function_code:#04x}"
        if self.description:
            msg = f"{msg}: {self.description}"
        super().__init__(msg)
        assert self.error_code == error_code
        self.function_code = function_code


class IllegalFunctionError(ModbusResponseError):
    """The function code received in the request is not an allowable action for the server."""

    error_code = ExceptionCode.ILLEGAL_FUNCTION
    description = (
        "Illegal Function: The function code received in the query "
        "is not an allowable action for the server."
    )


class IllegalDataAddressError(ModbusResponseError):
    """The data address received in the request is not an allowable address for the server."""

    error_code = ExceptionCode.ILLEGAL_DATA_ADDRESS
    description = (
        "Illegal Data Address: The data address received in the query "
        "is not an allowable address for the server."
    )


class IllegalDataValueError(ModbusResponseError):
    """The value contained in the request data field is not an allowable value for the server."""

    error_code = ExceptionCode.ILLEGAL_DATA_VALUE
    description = (
        "Illegal Data Value: A value contained in the query data field "
        "is not an allowable value for the server."
    )


class ServerDeviceFailureError(ModbusResponseError):
    """An unrecoverable error occurred."""

    error_code = ExceptionCode.SERVER_DEVICE_FAILURE
    description = (
        "Server Device Failure: An unrecoverable error occurred "
        "while the server was attempting to perform the requested action."
    )


class AcknowledgeError(ModbusResponseError):
    """Acknowledge error.

    The server has accepted the requests and it processing it,
    but a long duration of time will be required to do so.
    """

    error_code = ExceptionCode.ACKNOWLEDGE
    description = (
        "Acknowledge: The server has accepted the request and is processing it, "
        "but a long duration of time will be required to do so."
    )


class ServerDeviceBusyError(ModbusResponseError):
    """The server is engaged in a long-duration program command."""

    error_code = ExceptionCode.SERVER_DEVICE_BUSY
    description = (
        "Server Device Busy: The server is engaged in processing "
        "a long-duration program command."
    )


class NegativeAcknowledgeError(ModbusResponseError):
    """The server cannot perform the program function received in the request."""

    error_code = ExceptionCode.NEGATIVE_ACKNOWLEDGE
    description = (
        "Negative Acknowledge: The server cannot perform "
        "the program function received in the query."
    )


class MemoryParityError(ModbusResponseError):
    """The server attempted to read record file, but detected a parity error in memory."""

    error_code = ExceptionCode.MEMORY_PARITY_ERROR
    description = (
        "Memory Parity Error: The server attempted to read extended memory or record file, "
        "but detected a parity error in memory."
    )


class GatewayPathUnavailableError(ModbusResponseError):
    """The gateway is probably misconfigured or overloaded."""

    error_code = ExceptionCode.GATEWAY_PATH_UNAVAILABLE
    description = (
        "Gateway Path Unavailable: The gateway was unable to allocate an internal communication path "
        "from the input port to the output port for processing the request."
    )


class GatewayTargetDeviceFailedToRespondError(ModbusResponseError):
    """Didn't get a response from target device."""

    error_code = ExceptionCode.GATEWAY_TARGET_DEVICE_FAILED_TO_RESPOND
    description = (
        "Gateway Target Device Failed to Respond: "
        "No response was obtained from the target device."
    )


class UnknownModbusResponseError(ModbusResponseError):
    """Unknown Modbus exception response."""

    def __init__(self, error_code: int, function_code: int) -> None:
        """Initialize UnknownModbusResponseError.

        Args:
            error_code: Error code from the Modbus exception response
            function_code: Function code of the request that caused the exception

        """
        # skip the error_code assertion of the parent class
        SmallModbusError.__init__(
            self,
            f"Unknown Modbus Exception {error_code:#04x} for function code {function_code:#04x}",
        )
        self.function_code = function_code
        self.error_code = error_code


error_code_to_exception_map: dict[int, type[ModbusResponseError]] = {
    IllegalFunctionError.error_code: IllegalFunctionError,
    IllegalDataAddressError.error_code: IllegalDataAddressError,
    IllegalDataValueError.error_code: IllegalDataValueError,
    ServerDeviceFailureError.error_code: ServerDeviceFailureError,
    AcknowledgeError.error_code: AcknowledgeError,
    ServerDeviceBusyError.error_code: ServerDeviceBusyError,
    NegativeAcknowledgeError.error_code: NegativeAcknowledgeError,
    MemoryParityError.error_code: MemoryParityError,
    GatewayPathUnavailableError.error_code: GatewayPathUnavailableError,
    GatewayTargetDeviceFailedToRespondError.error_code: GatewayTargetDeviceFailedToRespondError,
}


def exception_for_code(error_code: int, function_code: int) -> ModbusResponseError:
    """Create the exception matching a Modbus exception code.

    Args:
        error_code: Exception code from the response
        function_code: Function code of the request that caused the exception

    Returns:
        An instance of the registered class, or UnknownModbusResponseError.

    """
    error_class = error_code_to_exception_map.get(error_code, UnknownModbusResponseError)
    return error_class(error_code, function_code)


def register_custom_exception(err_cls: type[ModbusResponseError]) -> None:
    """Register a custom Modbus exception class.

    Args:
        err_cls: Custom exception class to register

    """
    if err_cls.error_code in error_code_to_exception_map:
        msg = f"Error code {err_cls.error_code} is already registered."
        raise ValueError(msg)

    error_code_to_exception_map[err_cls.error_code] = err_cls
