"""Hex dump of the frames sent and received by the transports."""

import logging
from typing import Literal

from smallmodbus.const import MBAP_HEADER_LENGTH

raw_traffic_logger = logging.getLogger("smallmodbus.raw_traffic")

ERROR_MARKER = "[!]"


def log_raw_traffic(
    transport_name: str,
    direction: Literal["sent", "recv"],
    data: bytes,
    *,
    is_error: bool = False,
) -> None:
    """Log a raw Modbus TCP frame at debug level.

    Frames rejected by the transport or the parser are marked with `[!]`.
    """
    if not raw_traffic_logger.isEnabledFor(logging.DEBUG):
        return

    raw_traffic_logger.debug(
        "%6s %s: %s%s",
        transport_name,
        direction,
        format_frame(data),
        f" {ERROR_MARKER}" if is_error else "",
    )


def format_frame(data: bytes) -> str:
    """Format a frame as upper-case hex, with the MBAP header separated from the PDU."""
    if len(data) <= MBAP_HEADER_LENGTH:
        return data.hex(" ").upper()
    return f"{data[:MBAP_HEADER_LENGTH].hex(' ').upper()} | {data[MBAP_HEADER_LENGTH:].hex(' ').upper()}"
