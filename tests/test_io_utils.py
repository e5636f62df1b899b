"""
Unit tests for wastebank_impact/io_utils.py

All files are written under pytest's tmp_path.
"""
import json

import pytest

from wastebank_impact.io_utils import RecordFileError, build_meta, load_records, write_summary


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestLoadRecords:

    def test_bare_list(self, tmp_path):
        path = _write(tmp_path / "records.json", [{"id": "a"}, {"id": "b"}])
        assert [r["id"] for r in load_records(path)] == ["a", "b"]

    @pytest.mark.parametrize("key", ["records", "pickups", "requests"])
    def test_wrapped_list(self, tmp_path, key):
        path = _write(tmp_path / "records.json", {key: [{"id": "a"}], "exportedAt": "x"})
        assert load_records(path) == [{"id": "a"}]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RecordFileError, match="invalid JSON"):
            load_records(path)

    def test_wrong_shape(self, tmp_path):
        path = _write(tmp_path / "records.json", {"items": []})
        with pytest.raises(RecordFileError, match="expected a list"):
            load_records(path)

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'[{"id": "caf\xe9"}]')
        with pytest.raises(RecordFileError, match="not UTF-8"):
            load_records(path)

    def test_unreadable_path(self, tmp_path):
        # a directory cannot be opened as a file
        with pytest.raises(RecordFileError, match="cannot read"):
            load_records(tmp_path)

    def test_error_is_a_value_error(self):
        assert issubclass(RecordFileError, ValueError)


class TestWriteSummary:

    def test_writes_meta_and_summary(self, tmp_path):
        meta = build_meta(
            source_file="exports/pickups.json",
            role="government",
            timeframe="all",
            record_count=3,
            error_count=1,
        )
        path = write_summary(tmp_path / "nested" / "out", {"total_weight": 12.5}, meta)

        assert path.name == "summary.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["summary"] == {"total_weight": 12.5}
        assert data["meta"]["role"] == "government"
        assert data["meta"]["record_count"] == 3
        assert data["meta"]["error_count"] == 1
        assert "created_at" in data["meta"]
