"""Tests for the import/export codec."""

import json

import pytest

from problems.errors import ImportParseError
from problems.transfer import EXPORT_FILENAME, decode_problems, encode_problems


class TestEncode:
    def test_pretty_printed(self, sample_problems):
        payload = encode_problems(sample_problems)
        assert payload.startswith(b'[\n  {\n    "id": "p1"')

    def test_compact(self, sample_problems):
        assert b"\n" not in encode_problems(sample_problems, indent=None)

    def test_keeps_non_ascii(self, problem_factory):
        payload = encode_problems([problem_factory(name="Sắp xếp")])
        assert "Sắp xếp" in payload.decode("utf-8")

    def test_empty(self):
        assert encode_problems([]) == b"[]"

    def test_filename(self):
        assert EXPORT_FILENAME == "algo-rewind.json"


class TestDecode:
    def test_round_trip_preserves_order(self, sample_problems):
        assert decode_problems(encode_problems(sample_problems)) == sample_problems

    def test_export_import_export_byte_identical(self, sample_problems):
        first = encode_problems(sample_problems)
        assert encode_problems(decode_problems(first)) == first

    def test_accepts_text_and_bom(self, sample_problems):
        text = encode_problems(sample_problems).decode("utf-8")
        assert decode_problems(text) == sample_problems
        assert decode_problems(b"\xef\xbb\xbf" + text.encode("utf-8")) == sample_problems

    def test_browser_export_with_numeric_ids(self):
        payload = json.dumps(
            [
                {
                    "id": 1718409600000,
                    "name": "Two Sum",
                    "url": "",
                    "tags": ["array"],
                    "memo": "",
                    "level": "GOOD",
                    "created_at": "2024-06-15",
                    "next_review_at": "2024-06-22",
                }
            ]
        )
        (p,) = decode_problems(payload)
        assert p.id == "1718409600000"
        assert p.url is None

    @pytest.mark.parametrize(
        "payload",
        [
            b"not json",
            b'{"id": "p1"}',
            b'[{"id": "p1"}]',
            b"\xff\xfe",
        ],
    )
    def test_rejects_malformed(self, payload):
        with pytest.raises(ImportParseError):
            decode_problems(payload)

    def test_rejects_lone_surrogate_escape(self):
        payload = (
            b'[{"id": "x", "name": "\\ud800", "url": null, "tags": [], "memo": "",'
            b' "level": "GOOD", "created_at": "2024-06-15", "next_review_at": "2024-06-22"}]'
        )
        with pytest.raises(ImportParseError, match="0.name"):
            decode_problems(payload)

    def test_rejects_duplicate_ids(self, problem_factory):
        payload = encode_problems([problem_factory(id="x"), problem_factory(id="x", name="Other")])
        with pytest.raises(ImportParseError, match="Duplicate"):
            decode_problems(payload)

    def test_error_names_bad_record(self, sample_problems):
        records = json.loads(encode_problems(sample_problems))
        records[2]["level"] = "PERFECT"
        with pytest.raises(ImportParseError, match="2.level"):
            decode_problems(json.dumps(records))
