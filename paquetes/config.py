"""Reading of key=value configuration files."""

from __future__ import annotations

import os


def parse_config(text: str) -> dict[str, str]:
    """Parse key=value lines, skipping blanks and '#' comments."""
    config: dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        config[key.strip()] = value.strip()
    return config


def load_config(path: str | os.PathLike[str]) -> dict[str, str]:
    """Read and parse a configuration file; raises OSError if it cannot be read."""
    with open(path, encoding="utf-8") as handle:
        return parse_config(handle.read())