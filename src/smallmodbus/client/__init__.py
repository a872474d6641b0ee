"""Modbus clients."""

from .async_client import AsyncModbusClient
from .sync_client import ModbusClient

__all__ = ["AsyncModbusClient", "ModbusClient"]
