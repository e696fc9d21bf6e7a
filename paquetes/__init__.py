"""TCP client and server exchanging messages and packages over a length-prefixed protocol."""

__version__ = "0.1.0"