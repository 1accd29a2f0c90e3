import json

import numpy as np
import pytest

from tinyfish.cipher.engine import BlockCipher, build_cipher
from tinyfish.cipher.spec import CipherSpec
from tinyfish.evaluation import (
    EvaluationReport,
    RoundtripResult,
    analyze_sbox,
    compute_sac,
    ddt_max,
    lat_max_abs,
    mix_avalanche,
    run_roundtrip_tests,
)
from tinyfish.evaluation.report import REPORT_JSON, SUMMARY_TXT

PRESENT_SBOX = [0xC, 0x5, 0x6, 0xB, 0x9, 0x0, 0xA, 0xD, 0x3, 0xE, 0xF, 0x8, 0x4, 0x7, 0x1, 0x2]


class _ForgetfulCipher(BlockCipher):
    """Encrypts correctly, decrypts to zeros."""

    def __init__(self):
        self._inner = build_cipher()

    def encrypt_block(self, plaintext_block, key):
        return self._inner.encrypt_block(plaintext_block, key)

    def decrypt_block(self, ciphertext_block, key):
        return bytes(8)


def test_identity_table_is_worst_case():
    identity = list(range(16))
    assert ddt_max(identity) == 16
    assert lat_max_abs(identity) == 16


def test_present_sbox_profile():
    assert ddt_max(PRESENT_SBOX) == 4
    assert lat_max_abs(PRESENT_SBOX) == 8
    result = analyze_sbox(PRESENT_SBOX, table_id="present")
    assert result.differential_uniformity == "good"
    assert result.linearity == "good"


def test_analyze_ftable():
    result = analyze_sbox()
    assert result.size == 256
    assert result.bijective
    assert 2 <= result.ddt_max <= 256
    assert 0 < result.lat_max_abs <= 256
    assert result.table_id in result.summary()


def test_constant_table_is_not_bijective():
    result = analyze_sbox([7] * 16, table_id="constant")
    assert not result.bijective
    assert result.ddt_max == 16
    assert result.differential_uniformity == "poor"
    assert "NOT bijective" in result.summary()


@pytest.mark.parametrize("table", [list(range(10)), [0] * 15 + [16]])
def test_analyze_rejects_malformed_tables(table):
    with pytest.raises(ValueError):
        analyze_sbox(table)


def test_sac_plaintext_matrix_shape():
    result = compute_sac(input_type="plaintext", trials=4, seed=3)
    assert result.flip_probability.shape == (64, 64)
    assert result.num_input_bits == 64
    assert ((result.flip_probability >= 0.0) & (result.flip_probability <= 1.0)).all()
    # Encryption is a permutation, so every flipped plaintext bit changes
    # at least one ciphertext bit in every trial.
    assert (result.flip_probability.sum(axis=1) >= 1.0 - 1e-9).all()


def test_sac_key_bits_fold_in_pairs():
    # Key bytes i and i+8 are XORed into the same key word, so flipping
    # bit b or bit b+64 gives the same ciphertext.
    result = compute_sac(input_type="key", trials=3, seed=11)
    assert result.flip_probability.shape == (128, 64)
    assert np.array_equal(result.flip_probability[:64], result.flip_probability[64:])


def test_sac_is_seeded():
    a = compute_sac(CipherSpec(substitution=True), trials=2, seed=5)
    b = compute_sac(CipherSpec(substitution=True), trials=2, seed=5)
    assert a.substitution
    assert np.array_equal(a.flip_probability, b.flip_probability)


def test_sac_reports_progress_per_trial():
    seen = []
    compute_sac(trials=3, seed=1, progress_callback=lambda i, n: seen.append((i, n)))
    assert seen == [(0, 3), (1, 3), (2, 3)]


@pytest.mark.parametrize("kwargs", [{"input_type": "nonce"}, {"trials": 0}])
def test_sac_rejects_bad_arguments(kwargs):
    with pytest.raises(ValueError):
        compute_sac(**kwargs)


def test_sac_to_dict_is_json_ready():
    data = compute_sac(trials=2, seed=9).to_dict()
    decoded = json.loads(json.dumps(data))
    assert decoded["num_input_bits"] == 64
    assert len(decoded["per_input_bit"]) == 64
    assert decoded["passes_sac"] in (True, False)


def test_roundtrip_covers_block_and_stream_paths():
    result = run_roundtrip_tests(num_vectors=20, stream_vectors=30, seed=7)
    assert result.total_vectors == 50
    assert result.is_perfect
    assert "20 block, 30 stream" in result.summary()


def test_roundtrip_records_failures_up_to_cap():
    result = run_roundtrip_tests(
        num_vectors=12, stream_vectors=0, seed=2, max_failures_recorded=5,
        cipher=_ForgetfulCipher(),
    )
    assert result.failed == 12
    assert len(result.failures) == 5
    assert all(f.path == "block" and f.recovered_hex == "00" * 8 for f in result.failures)
    assert result.summary().startswith("[FAIL]")


def test_report_saves_json_and_summary(tmp_path):
    report = EvaluationReport(
        roundtrip=run_roundtrip_tests(num_vectors=20, seed=1),
        mix=mix_avalanche(samples=50),
        sbox=analyze_sbox(PRESENT_SBOX, table_id="present"),
    )
    run_dir = report.save(tmp_path / "runs")
    assert run_dir.parent == tmp_path / "runs"
    assert run_dir.name.endswith("_tinyfish")

    data = json.loads((run_dir / REPORT_JSON).read_text(encoding="utf-8"))
    assert data["problems"] == []
    assert data["mix"]["passes"] is True
    assert data["roundtrip"]["passed"] == 22
    assert (run_dir / SUMMARY_TXT).read_text(encoding="utf-8").endswith("Problems: none")


def test_report_lists_problems():
    report = EvaluationReport(
        substitution=True,
        roundtrip=RoundtripResult(substitution=True, seed=0, block_vectors=4, stream_vectors=0, failed=2),
        sbox=analyze_sbox([0] * 16, table_id="zeros"),
    )
    assert report.label == "tinyfish+sbox"
    assert report.problems() == ["roundtrip: 2 failing vectors", "zeros is not a permutation"]
