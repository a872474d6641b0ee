"""Read Discrete Inputs PDU Module."""

from smallmodbus.const import FunctionCode

from .coils import ReadCoilsPDU


class ReadDiscreteInputsPDU(ReadCoilsPDU):
    """Read Discrete Inputs PDU."""

    function_code = FunctionCode.READ_DISCRETE_INPUTS
