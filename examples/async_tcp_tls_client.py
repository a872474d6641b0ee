"""Example of an asynchronous TCP Modbus client over an SSL connection using smallmodbus."""

import asyncio
import ssl

from smallmodbus import create_async_tcp_client
from smallmodbus.exceptions import InvalidResponseError, ModbusConnectionError, ModbusResponseError


async def example_tls_client() -> None:
    """Read registers from a Modbus server behind a TLS endpoint."""
    host = "127.0.0.1"
    port = 802  # Modbus/TCP Security

    # Any additional parameter is passed to `asyncio.open_connection`, here a custom SSLContext
    ssl_context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    ssl_context.load_default_certs(purpose=ssl.Purpose.SERVER_AUTH)
    ssl_context.check_hostname = True
    ssl_context.verify_mode = ssl.CERT_REQUIRED

    try:
        async with create_async_tcp_client(host, port, unit_id=1, ssl=ssl_context) as client:
            print("Input registers 0-9: ", await client.read_input_registers(start_address=0, quantity=10))
    except ModbusResponseError as e:
        print(f"The server responded with error code {e.error_code:#04x} for function {e.function_code:#04x}")
    except InvalidResponseError as e:
        print(f"Received invalid response: {e}")
    except ModbusConnectionError as e:
        print(f"A connection error occurred: {e}")


if __name__ == "__main__":
    asyncio.run(example_tls_client())
