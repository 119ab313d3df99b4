"""Tests for loading registration codes from the bundled list or files."""

from __future__ import annotations

from waitlist.seeds.codes import LATE_CODES, STANDARD_CODES, load_pools, read_codes_file


def test_bundled_codes_are_unique():
    assert STANDARD_CODES
    assert len(set(STANDARD_CODES)) == len(STANDARD_CODES)
    assert not set(STANDARD_CODES) & set(LATE_CODES)


def test_read_codes_file_skips_blanks_and_comments(tmp_path):
    path = tmp_path / "codes.txt"
    path.write_text("# standard pool\nA1\n\n  A2  \n   # note\n", encoding="utf-8")

    assert read_codes_file(path) == ["A1", "A2"]


def test_load_pools_prefers_files(tmp_path):
    late = tmp_path / "late.txt"
    late.write_text("L1\nL2\n", encoding="utf-8")

    standard, late_codes = load_pools(None, late)

    assert standard == list(STANDARD_CODES)
    assert late_codes == ["L1", "L2"]
