"""Async TCP Transport Layer Implementation.

Implements async Modbus TCP protocol transport based on asyncio streams, including MBAP header processing.
"""

import asyncio
import logging
from typing import Any

from smallmodbus.const import MBAP_HEADER_LENGTH
from smallmodbus.exceptions import MalformedResponseError, ModbusConnectionError
from smallmodbus.frame import RequestFrame
from smallmodbus.parser import ResponseFrame, remaining_response_length

from .async_base import AsyncBaseTransport
from .tcp import check_connection_parameters, handle_response, log_raw_traffic

logger = logging.getLogger(__name__)


class AsyncTcpTransport(AsyncBaseTransport):
    """Async Modbus TCP Transport Layer Implementation.

    Handles async Modbus TCP communication based on asyncio, including:
    - Async TCP connection management
    - MBAP header construction and parsing
    - One request/response exchange at a time
    - Async error handling and timeout management
    """

    _reader: asyncio.StreamReader | None = None
    _writer: asyncio.StreamWriter | None = None

    def __init__(
        self,
        host: str,
        port: int = 502,
        *,
        timeout: float = 10.0,
        connect_timeout: float = 10.0,
        **connection_kwargs: Any,
    ) -> None:
        """Initialize async TCP transport layer.

        Args:
            host: Target host IP address or domain name
            port: Target port, default 502 (Modbus TCP standard port)
            timeout: Timeout in seconds for reading a response, default 10.0s
            connect_timeout: Timeout for establishing connection, default 10.0s
            connection_kwargs: Additional connection parameters passed to `asyncio.open_connection`
                               (e.g., SSL context)

        Raises:
            ValueError: When parameters are invalid

        """
        check_connection_parameters(port, timeout, connect_timeout)

        self.host = host
        self.port = port
        self.timeout = timeout
        self.connect_timeout = connect_timeout
        self.connection_kwargs = connection_kwargs
        self._exchange_lock = asyncio.Lock()

    async def open(self) -> None:
        """Async establish TCP connection."""
        if self.is_open():
            logger.debug("Async TCP connection already open: %s:%d", self.host, self.port)
            return

        try:
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port, **self.connection_kwargs),
                timeout=self.connect_timeout,
            )
        except TimeoutError:
            logger.warning("Async TCP connection timeout: %s:%d", self.host, self.port, exc_info=True)
            raise
        except Exception as e:
            logger.exception("Async TCP connection error: %s:%d", self.host, self.port)
            raise ModbusConnectionError from e

        logger.info("Async TCP connection established: %s:%d", self.host, self.port)

    async def close(self) -> None:
        """Close TCP connection."""
        writer = self._writer
        if writer is None or writer.is_closing():
            logger.debug("Async TCP connection already closed: %s:%d", self.host, self.port)
            return

        self._reader = self._writer = None
        try:
            writer.close()
            await writer.wait_closed()
            logger.info("Async TCP connection closed: %s:%d", self.host, self.port)
        except Exception as e:  # noqa: BLE001
            logger.debug("Error during async connection close: %s", e)

    def is_open(self) -> bool:
        """Check if TCP connection is open."""
        return self._writer is not None and not self._writer.is_closing()

    async def send_and_receive(self, frame: RequestFrame) -> ResponseFrame:
        """Async send a request frame and receive the response.

        1. Encode the request (MBAP header + PDU) and send it
        2. Receive the response MBAP header
        3. Receive the rest of the response, as announced by the header
        4. Validate and decode the response
        """
        async with self._exchange_lock:
            if not self.is_open() or self._reader is None or self._writer is None:
                msg = "Transport is not connected."
                raise ModbusConnectionError(msg)
            reader, writer = self._reader, self._writer

            request = frame.encode()
            try:
                writer.write(request)
                await writer.drain()
            except ConnectionError as e:
                await self._abort()
                msg = "Error while sending request."
                raise ModbusConnectionError(msg) from e
            log_raw_traffic("sent", request)

            header = await self._read_exactly(reader, MBAP_HEADER_LENGTH)
            try:
                remaining = remaining_response_length(frame, header)
            except MalformedResponseError:
                log_raw_traffic("recv", header, is_error=True)
                # the end of the frame is unknown: the stream can not be used anymore
                await self._abort()
                raise

            response = header + await self._read_exactly(reader, remaining, already_read=header)

        return handle_response(frame, response)

    async def _read_exactly(self, reader: asyncio.StreamReader, size: int, *, already_read: bytes = b"") -> bytes:
        try:
            return await asyncio.wait_for(reader.readexactly(size), timeout=self.timeout)
        except TimeoutError as e:
            await self._abort()
            msg = f"Response timeout after {self.timeout} seconds"
            raise TimeoutError(msg) from e
        except asyncio.IncompleteReadError as e:
            await self._abort()
            msg = "Connection closed by remote host before the response was complete."
            raise ModbusConnectionError(msg, bytes_read=already_read + e.partial) from e
        except ConnectionError as e:
            await self._abort()
            msg = "Error while receiving response."
            raise ModbusConnectionError(msg, bytes_read=already_read) from e

    async def _abort(self) -> None:
        logger.warning("Closing async TCP connection %s:%d after a communication error.", self.host, self.port)
        await self.close()


__all__ = ["AsyncTcpTransport"]
