import pytest

from paquetes.config import load_config, parse_config


def test_parse_config_reads_pairs_and_skips_comments():
    text = "# comment\nIP=127.0.0.1\n\nPUERTO=4444\nCLAVE=hola\n"
    assert parse_config(text) == {"IP": "127.0.0.1", "PUERTO": "4444", "CLAVE": "hola"}


def test_parse_config_splits_on_first_equals():
    assert parse_config("CLAVE=a=b") == {"CLAVE": "a=b"}


def test_parse_config_ignores_lines_without_equals():
    assert parse_config("garbage\nIP=x") == {"IP": "x"}


def test_load_config_from_file(tmp_path):
    path = tmp_path / "cliente.config"
    path.write_text("IP=127.0.0.1\nPUERTO=4444\n", encoding="utf-8")
    assert load_config(path) == {"IP": "127.0.0.1", "PUERTO": "4444"}


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.config")