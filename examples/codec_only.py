"""Example of using the smallmodbus codec with your own socket handling."""

import socket

from smallmodbus import Fault, ProtocolFailure, Registers, RequestFrameBuilder, parse_response


def read_input_registers(host: str, port: int = 502) -> None:
    """Read 4 input registers, without the transport and client layers."""
    frame = (
        RequestFrameBuilder()
        .transaction_id(42)
        .unit_id(1)
        .function_code(0x04)
        .start_address(0)
        .quantity(4)
        .finalize()
    )

    with socket.create_connection((host, port), timeout=2.0) as sock:
        sock.sendall(frame.encode())

        # a successful response has exactly this size: read until it is complete or the server stops sending
        response = bytearray()
        while len(response) < frame.expected_response_length:
            chunk = sock.recv(frame.expected_response_length - len(response))
            if not chunk:
                break
            response.extend(chunk)

    match parse_response(frame, bytes(response)):
        case Registers(frame=response_frame):
            print("Input registers 0-3:", response_frame.registers)
        case Fault() as fault:
            print(f"Server fault: {fault.kind!r} (code {fault.exception_code:#04x})")
        case ProtocolFailure(error=error):
            print(f"Invalid response: {error}")


if __name__ == "__main__":
    read_input_registers("127.0.0.1")
