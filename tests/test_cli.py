import pytest

from tinyfish.cli import build_parser, main, parse_config
from tinyfish.cipher.feistel import CipherMode
from tinyfish.config import load_settings


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    for name in ("TINYFISH_SUBSTITUTION", "TINYFISH_VERBOSE"):
        monkeypatch.delenv(name, raising=False)
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


def test_parse_encrypt_verbose(tmp_path):
    cfg = parse_config(["-e", "-v", "in.txt", "k.key", "out.bin"])
    assert cfg.mode is CipherMode.ENCRYPT
    assert cfg.verbose is True
    assert cfg.substitution is False
    assert str(cfg.key_path) == "k.key"


def test_parse_decrypt_defaults():
    cfg = parse_config(["-d", "in", "key", "out"])
    assert cfg.mode is CipherMode.DECRYPT
    assert cfg.verbose is False


def test_env_enables_substitution(monkeypatch):
    monkeypatch.setenv("TINYFISH_SUBSTITUTION", "yes")
    load_settings.cache_clear()
    assert parse_config(["-e", "in", "key", "out"]).substitution is True


@pytest.mark.parametrize("argv", [
    [],
    ["-e", "in", "key"],
    ["-e", "-d", "in", "key", "out"],
    ["-x", "in", "key", "out"],
    ["in", "key", "out"],
])
def test_bad_arguments_exit_with_usage(argv):
    with pytest.raises(SystemExit) as info:
        build_parser().parse_args(argv)
    assert info.value.code == 2


def test_main_roundtrip(tmp_path):
    src = tmp_path / "plain.txt"
    src.write_bytes(b"hello, tinyfish!")
    key = tmp_path / "k.key"
    assert main(["-e", str(src), str(key), str(tmp_path / "c.bin")]) == 0
    assert main(["-d", str(tmp_path / "c.bin"), str(key), str(tmp_path / "p.txt")]) == 0
    assert (tmp_path / "p.txt").read_bytes() == b"hello, tinyfish!"


def test_main_reports_existing_output(tmp_path, capsys):
    src = tmp_path / "plain.txt"
    src.write_bytes(b"x")
    out = tmp_path / "c.bin"
    out.write_bytes(b"old")
    assert main(["-e", str(src), str(tmp_path / "k.key"), str(out)]) == 1
    assert "already exists" in capsys.readouterr().err


def test_main_reports_bad_key(tmp_path, capsys):
    src = tmp_path / "plain.txt"
    src.write_bytes(b"x")
    key = tmp_path / "k.key"
    key.write_bytes(b"tooshort")
    assert main(["-e", str(src), str(key), str(tmp_path / "c.bin")]) == 1
    assert "key size must be 16 bytes" in capsys.readouterr().err


def test_main_rejects_empty_path(tmp_path, capsys):
    assert main(["-e", "", "k", "o"]) == 1
    assert "Incorrect command-line arguments" in capsys.readouterr().err
