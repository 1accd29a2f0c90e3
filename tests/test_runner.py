import pytest

from tinyfish.cipher.engine import TinyfishCipher
from tinyfish.cipher.feistel import CipherMode
from tinyfish.config import RunConfig
from tinyfish.errors import CipherIOError, KeyFileError, KeyLengthError, OutputExistsError
from tinyfish.keystore import load_key, load_or_create_key
from tinyfish.runner import run


def _config(tmp_path, mode, src, out, key="secret.key", **kw):
    return RunConfig(
        mode=mode,
        input_path=tmp_path / src,
        key_path=tmp_path / key,
        output_path=tmp_path / out,
        **kw,
    )


def test_missing_key_is_generated_and_stored(tmp_path):
    key_path = tmp_path / "new.key"
    km = load_or_create_key(key_path)
    assert key_path.read_bytes() == km.raw_key
    assert len(km.raw_key) == 16
    assert load_or_create_key(key_path) == km


def test_key_file_wrong_size(tmp_path):
    key_path = tmp_path / "bad.key"
    key_path.write_bytes(b"0123456789abcdef!")
    with pytest.raises(KeyLengthError) as info:
        load_key(key_path)
    assert info.value.actual == 17


def test_key_path_is_directory(tmp_path):
    with pytest.raises(KeyFileError):
        load_or_create_key(tmp_path)


def test_encrypt_then_decrypt_files(tmp_path):
    (tmp_path / "plain.txt").write_bytes(b"The quick brown fox")
    summary = run(_config(tmp_path, CipherMode.ENCRYPT, "plain.txt", "cipher.bin"))
    assert summary.blocks == 3
    assert summary.bytes_written == 24
    assert (tmp_path / "secret.key").exists()

    ct = (tmp_path / "cipher.bin").read_bytes()
    assert len(ct) == 24
    key = (tmp_path / "secret.key").read_bytes()
    assert ct[:8] == TinyfishCipher().encrypt_block(b"The quic", key)

    run(_config(tmp_path, CipherMode.DECRYPT, "cipher.bin", "plain.out"))
    assert (tmp_path / "plain.out").read_bytes() == b"The quick brown fox" + bytes(5)


def test_substitution_run_roundtrip(tmp_path):
    (tmp_path / "plain.txt").write_bytes(b"12345678")
    run(_config(tmp_path, CipherMode.ENCRYPT, "plain.txt", "c.bin", substitution=True))
    run(_config(tmp_path, CipherMode.DECRYPT, "c.bin", "p.out", substitution=True))
    assert (tmp_path / "p.out").read_bytes() == b"12345678"


def test_empty_input_gives_empty_output(tmp_path):
    (tmp_path / "empty").write_bytes(b"")
    summary = run(_config(tmp_path, CipherMode.ENCRYPT, "empty", "out"))
    assert summary.blocks == 0
    assert (tmp_path / "out").read_bytes() == b""


def test_refuses_to_overwrite_output(tmp_path):
    (tmp_path / "plain.txt").write_bytes(b"data")
    (tmp_path / "cipher.bin").write_bytes(b"keep me")
    with pytest.raises(OutputExistsError):
        run(_config(tmp_path, CipherMode.ENCRYPT, "plain.txt", "cipher.bin"))
    assert (tmp_path / "cipher.bin").read_bytes() == b"keep me"


def test_missing_input(tmp_path):
    with pytest.raises(CipherIOError):
        run(_config(tmp_path, CipherMode.ENCRYPT, "nope.txt", "cipher.bin"))
    assert not (tmp_path / "cipher.bin").exists()


def test_bad_key_leaves_no_output(tmp_path):
    (tmp_path / "plain.txt").write_bytes(b"data")
    (tmp_path / "secret.key").write_bytes(b"short")
    with pytest.raises(KeyLengthError):
        run(_config(tmp_path, CipherMode.ENCRYPT, "plain.txt", "cipher.bin"))
    assert not (tmp_path / "cipher.bin").exists()
