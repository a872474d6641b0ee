"""Protocol Data Units of the supported read functions."""

from typing import Any

from smallmodbus.const import FunctionCode
from smallmodbus.exceptions import UnsupportedFunctionError

from .base import BaseReadPDU
from .coils import ReadCoilsPDU
from .discrete_inputs import ReadDiscreteInputsPDU
from .holding_registers import ReadHoldingRegistersPDU, ReadInputRegistersPDU

function_code_to_pdu_map: dict[FunctionCode, type[BaseReadPDU[Any]]] = {
    FunctionCode.READ_COILS: ReadCoilsPDU,
    FunctionCode.READ_DISCRETE_INPUTS: ReadDiscreteInputsPDU,
    FunctionCode.READ_HOLDING_REGISTERS: ReadHoldingRegistersPDU,
    FunctionCode.READ_INPUT_REGISTERS: ReadInputRegistersPDU,
}


def get_pdu_class(function_code: int) -> type[BaseReadPDU[Any]]:
    """Get the PDU class for a function code.

    Args:
        function_code: The function code of the request

    Returns:
        The PDU class handling this function code

    Raises:
        UnsupportedFunctionError: If the function code is not one of the read function codes

    """
    try:
        return function_code_to_pdu_map[FunctionCode(function_code)]
    except ValueError as e:
        raise UnsupportedFunctionError(function_code) from e


__all__ = [
    "BaseReadPDU",
    "ReadCoilsPDU",
    "ReadDiscreteInputsPDU",
    "ReadHoldingRegistersPDU",
    "ReadInputRegistersPDU",
    "function_code_to_pdu_map",
    "get_pdu_class",
]
