"""Client: logs console input, then sends a message and a package to the server."""

from __future__ import annotations

import argparse
import logging
import socket
from collections.abc import Iterable, Iterator

from .config import load_config
from .protocol import Package, message_package

DEFAULT_CONFIG = "cliente.config"
DEFAULT_LOG = "tp0.log"
_FORMAT = "[%(levelname)s] %(asctime)s %(name)s/(%(process)d): %(message)s"


def create_logger(path) -> logging.Logger:
    """Create the client logger, writing to a file and to the console."""
    logger = logging.getLogger("CLIENT")
    _close_logger(logger)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    formatter = logging.Formatter(_FORMAT)
    for handler in (logging.FileHandler(path, encoding="utf-8"), logging.StreamHandler()):
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def _close_logger(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _console_lines() -> Iterator[str]:
    while True:
        try:
            yield input("> ")
        except EOFError:
            return


def _until_blank(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        if line == "":
            return
        yield line


def read_console(logger: logging.Logger, lines: Iterable[str]) -> list[str]:
    """Log each line up to the first empty one; return the lines logged."""
    read = []
    for line in _until_blank(lines):
        logger.info("%s", line)
        read.append(line)
    logger.info("Finalizando lectura de consola")
    return read


def build_package(lines: Iterable[str]) -> Package:
    """Build a package from the lines up to the first empty one."""
    package = Package()
    for line in _until_blank(lines):
        package.add(line)
    return package


def connect(ip: str, port) -> socket.socket:
    """Open a TCP connection to the server."""
    infos = socket.getaddrinfo(
        ip, port, socket.AF_INET, socket.SOCK_STREAM, 0, socket.AI_PASSIVE
    )
    family, sock_type, proto, _, address = infos[0]
    sock = socket.socket(family, sock_type, proto)
    try:
        sock.connect(address)
    except OSError:
        sock.close()
        raise
    return sock


def send_message(sock: socket.socket, message: str) -> None:
    """Send a text message frame."""
    sock.sendall(message_package(message).serialize())


def send_package(sock: socket.socket, package: Package) -> None:
    """Send a package frame."""
    sock.sendall(package.serialize())


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="paquetes-client")
    parser.add_argument("--config", default=DEFAULT_CONFIG)
    parser.add_argument("--log", default=DEFAULT_LOG)
    args = parser.parse_args(argv)

    logger = create_logger(args.log)
    try:
        logger.info("Hola! Soy un log")
        try:
            config = load_config(args.config)
        except OSError:
            print("No se pudo crear la configuración")
            return 1

        ip = config.get("IP")
        port = config.get("PUERTO")
        value = config.get("CLAVE")
        if value is not None:
            logger.info("Valor de CLAVE: %s", value)
        else:
            logger.error("No se pudo obtener el valor de CLAVE")

        lines = _console_lines()
        read_console(logger, lines)

        if ip is None or port is None:
            logger.error("Faltan IP o PUERTO en la configuración")
            return 1
        try:
            sock = connect(ip, port)
        except OSError as exc:
            logger.error("No se pudo conectar: %s", exc)
            return 1
        with sock:
            if value is not None:
                send_message(sock, value)
            send_package(sock, build_package(lines))
        return 0
    finally:
        _close_logger(logger)


if __name__ == "__main__":
    raise SystemExit(main())