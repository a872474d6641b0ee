"""Vendor exception code example."""

from smallmodbus.exceptions import ModbusResponseError, register_custom_exception


class InverterLockedError(ModbusResponseError):
    """The inverter refuses register access until a login is performed."""

    error_code = 0x80


register_custom_exception(InverterLockedError)
