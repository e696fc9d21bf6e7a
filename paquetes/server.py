"""Server: accepts one client and logs the messages and packages it sends."""

from __future__ import annotations

import argparse
import logging
import socket

from .protocol import INT_SIZE, OpCode, parse_values

PORT = 4444
DEFAULT_LOG = "log.log"
_FORMAT = "[%(levelname)s] %(asctime)s %(name)s/(%(process)d): %(message)s"


def _create_logger(path) -> logging.Logger:
    logger = logging.getLogger("Servidor")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    formatter = logging.Formatter(_FORMAT)
    for handler in (logging.FileHandler(path, encoding="utf-8"), logging.StreamHandler()):
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    data = bytearray()
    while len(data) < size:
        chunk = sock.recv(size - len(data))
        if not chunk:
            raise ConnectionError("connection closed mid-frame")
        data += chunk
    return bytes(data)


def _c_string(data: bytes) -> str:
    return data.partition(b"\0")[0].decode("utf-8", errors="replace")


def start_server(host=None, port=PORT) -> socket.socket:
    """Bind a listening TCP socket; raises OSError if no address can be bound."""
    infos = socket.getaddrinfo(
        host, port, socket.AF_INET, socket.SOCK_STREAM, 0, socket.AI_PASSIVE
    )
    for family, sock_type, proto, _, address in infos:
        try:
            sock = socket.socket(family, sock_type, proto)
        except OSError:
            continue
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(address)
        except OSError:
            sock.close()
            continue
        sock.listen(socket.SOMAXCONN)
        return sock
    raise OSError("No se pudo bindear el socket")


def wait_client(server_sock: socket.socket, logger: logging.Logger) -> socket.socket:
    """Accept one client connection."""
    client, _ = server_sock.accept()
    logger.info("Se conecto un cliente!")
    return client


def receive_operation(sock: socket.socket) -> int | None:
    """Read the next operation code; None (and the socket closed) on disconnect."""
    try:
        data = _recv_exact(sock, INT_SIZE)
    except (ConnectionError, OSError):
        sock.close()
        return None
    return int.from_bytes(data, "little", signed=True)


def receive_buffer(sock: socket.socket) -> bytes:
    """Read a size-prefixed payload."""
    size = int.from_bytes(_recv_exact(sock, INT_SIZE), "little", signed=True)
    if size < 0:
        raise ValueError(f"invalid payload size {size}")
    return _recv_exact(sock, size)


def receive_message(sock: socket.socket, logger: logging.Logger) -> str:
    """Read a text message, log it and return it."""
    text = _c_string(receive_buffer(sock))
    logger.info("Me llego el mensaje %s", text)
    return text


def receive_package(sock: socket.socket) -> list[str]:
    """Read a package and return its values as text."""
    return [_c_string(value) for value in parse_values(receive_buffer(sock))]


def serve(client_sock: socket.socket, logger: logging.Logger) -> int:
    """Handle operations until the client disconnects; returns the exit status."""
    while True:
        op_code = receive_operation(client_sock)
        if op_code is None:
            logger.error("el cliente se desconecto. Terminando servidor")
            return 1
        if op_code == OpCode.MESSAGE:
            receive_message(client_sock, logger)
        elif op_code == OpCode.PACKAGE:
            values = receive_package(client_sock)
            logger.info("Me llegaron los siguientes valores:\n")
            for value in values:
                logger.info("%s", value)
        else:
            logger.warning("Operacion desconocida. No quieras meter la pata")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="paquetes-server")
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--log", default=DEFAULT_LOG)
    args = parser.parse_args(argv)

    logger = _create_logger(args.log)
    try:
        server_sock = start_server(None, args.port)
    except OSError:
        logger.error("No se pudo bindear el socket")
        return 1
    with server_sock:
        logger.debug("Listo para escuchar a mi cliente")
        logger.info("Servidor listo para recibir al cliente")
        try:
            client = wait_client(server_sock, logger)
        except OSError:
            logger.error("Fallo al aceptar cliente")
            return 1
        with client:
            return serve(client, logger)


if __name__ == "__main__":
    raise SystemExit(main())