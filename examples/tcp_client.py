"""Example of a blocking TCP Modbus client using smallmodbus."""

from smallmodbus import create_tcp_client
from smallmodbus.exceptions import InvalidResponseError, ModbusConnectionError, ModbusResponseError


def example_tcp_client() -> None:
    """Read 8 coils and print their status, one per line."""
    # Replace with your Modbus server's IP and port
    host = "127.0.0.4"
    port = 502

    unit_id = 1  # Modbus unit ID of the target device

    # A timeout of 1 second for establishing the connection and for every response
    client = create_tcp_client(host, port, unit_id=unit_id, timeout=1.0, connect_timeout=1.0)

    try:
        client.connect()
        coils = client.read_coils(start_address=0, quantity=8, transaction_id=123)
        for coil in coils:
            print(coil)
    except ModbusResponseError as e:
        print(f"The server responded with error code {e.error_code:#04x} for function {e.function_code:#04x}")
    except InvalidResponseError as e:
        print(f"Received invalid response: {e}")
    except ModbusConnectionError as e:
        print(f"A connection error occurred: {e}")
    except TimeoutError as e:
        print(f"Timeout: {e}")
    finally:
        client.disconnect()


if __name__ == "__main__":
    example_tcp_client()
