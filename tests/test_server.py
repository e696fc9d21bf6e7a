import logging
import socket

import pytest

from paquetes.protocol import OpCode, Package, encode_frame, message_package
from paquetes.server import (
    receive_buffer,
    receive_message,
    receive_operation,
    receive_package,
    serve,
    start_server,
    wait_client,
)


@pytest.fixture
def pair():
    left, right = socket.socketpair()
    yield left, right
    left.close()
    right.close()


def test_receive_operation_reads_code(pair):
    left, right = pair
    left.sendall(message_package("hola").serialize())
    assert receive_operation(right) == OpCode.MESSAGE


def test_receive_operation_on_disconnect(pair):
    left, right = pair
    left.close()
    assert receive_operation(right) is None
    assert right.fileno() == -1


def test_receive_buffer_returns_payload(pair):
    left, right = pair
    left.sendall(encode_frame(OpCode.PACKAGE, b"payload")[4:])
    assert receive_buffer(right) == b"payload"


def test_receive_buffer_truncated(pair):
    left, right = pair
    left.sendall(encode_frame(OpCode.PACKAGE, b"payload")[4:-2])
    left.close()
    with pytest.raises(ConnectionError):
        receive_buffer(right)


def test_receive_message_logs_text(pair, caplog):
    left, right = pair
    logger = logging.getLogger("test-receive-message")
    left.sendall(message_package("hola").serialize())
    assert receive_operation(right) == OpCode.MESSAGE
    with caplog.at_level(logging.INFO, logger=logger.name):
        assert receive_message(right, logger) == "hola"
    assert "Me llego el mensaje hola" in caplog.text


def test_receive_package_values(pair):
    left, right = pair
    package = Package()
    for value in ("uno", "dos", "tres"):
        package.add(value)
    left.sendall(package.serialize())
    assert receive_operation(right) == OpCode.PACKAGE
    assert receive_package(right) == ["uno", "dos", "tres"]


def test_serve_handles_all_operations(pair, caplog):
    left, right = pair
    logger = logging.getLogger("test-serve")
    package = Package()
    package.add("valor1")
    package.add("valor2")
    left.sendall(message_package("hola").serialize())
    left.sendall(package.serialize())
    left.sendall((7).to_bytes(4, "little"))
    left.close()
    with caplog.at_level(logging.INFO, logger=logger.name):
        assert serve(right, logger) == 1
    text = caplog.text
    assert "Me llego el mensaje hola" in text
    assert "valor1" in text and "valor2" in text
    assert "Operacion desconocida" in text
    assert "el cliente se desconecto" in text


def test_start_server_and_wait_client(caplog):
    logger = logging.getLogger("test-accept")
    with start_server("127.0.0.1", 0) as server:
        port = server.getsockname()[1]
        with socket.create_connection(("127.0.0.1", port)) as client:
            with caplog.at_level(logging.INFO, logger=logger.name):
                accepted = wait_client(server, logger)
            with accepted:
                client.sendall(message_package("x").serialize())
                assert receive_operation(accepted) == OpCode.MESSAGE
                assert receive_message(accepted, logger) == "x"
    assert "Se conecto un cliente!" in caplog.text


def test_start_server_port_in_use():
    with start_server("127.0.0.1", 0) as first:
        port = first.getsockname()[1]
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
            with pytest.raises(OSError):
                blocker.bind(("127.0.0.1", port))
                blocker.listen()
                start_server("127.0.0.1", port)