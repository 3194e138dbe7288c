"""
Tests for catalog loading.
"""
import json

import pytest
from pydantic import ValidationError

from suggestion_module.catalog import CatalogEntry, JsonCatalogLoader
from suggestion_module.config import DEFAULT_CATALOG_PATH
from suggestion_module.exceptions import CatalogUnavailable


def write_catalog(path, records):
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


class TestBundledCatalog:
    def test_loads_sample_catalog(self):
        entries = JsonCatalogLoader(DEFAULT_CATALOG_PATH).load()
        assert len(entries) == 26
        assert entries[0] == CatalogEntry(description="Paracetamol tablet 500 mg", code="PRK-10001")

    def test_sample_codes_are_unique(self):
        entries = JsonCatalogLoader(DEFAULT_CATALOG_PATH).load()
        codes = [e.code for e in entries]
        assert len(codes) == len(set(codes))


class TestRecordFormats:
    def test_prk_field_names(self, tmp_path):
        path = write_catalog(tmp_path / "c.json", [{"prk_description": "Naproxen tablet 250 mg", "prk_code": "N01"}])
        entries = JsonCatalogLoader(path).load()
        assert entries == (CatalogEntry(description="Naproxen tablet 250 mg", code="N01"),)

    def test_generic_field_names(self, tmp_path):
        path = write_catalog(tmp_path / "c.json", [{"description": "Paracetamol 500 mg", "code": "P01"}])
        entries = JsonCatalogLoader(path).load()
        assert entries[0].description == "Paracetamol 500 mg"
        assert entries[0].code == "P01"

    def test_keeps_catalog_order(self, tmp_path):
        records = [{"description": f"Drug {i}", "code": f"D{i}"} for i in range(5)]
        entries = JsonCatalogLoader(write_catalog(tmp_path / "c.json", records)).load()
        assert [e.code for e in entries] == ["D0", "D1", "D2", "D3", "D4"]

    def test_duplicate_codes_are_tolerated(self, tmp_path):
        records = [{"description": "A", "code": "X"}, {"description": "B", "code": "X"}]
        entries = JsonCatalogLoader(write_catalog(tmp_path / "c.json", records)).load()
        assert len(entries) == 2

    def test_empty_catalog(self, tmp_path):
        assert JsonCatalogLoader(write_catalog(tmp_path / "c.json", [])).load() == ()

    def test_entries_are_immutable(self):
        entry = CatalogEntry(description="Naproxen tablet 250 mg", code="N01")
        with pytest.raises(ValidationError):
            entry.code = "N02"


class TestCatalogUnavailable:
    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogUnavailable, match="not found"):
            JsonCatalogLoader(tmp_path / "missing.json").load()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "c.json"
        path.write_text("[{\"description\": ", encoding="utf-8")
        with pytest.raises(CatalogUnavailable, match="not valid JSON"):
            JsonCatalogLoader(path).load()

    def test_invalid_encoding(self, tmp_path):
        path = tmp_path / "c.json"
        path.write_bytes(b'[{"description": "Parac\xe9tamol", "code": "P01"}]')
        with pytest.raises(CatalogUnavailable, match="UTF-8"):
            JsonCatalogLoader(path).load()

    def test_not_an_array(self, tmp_path):
        path = write_catalog(tmp_path / "c.json", {"items": []})
        with pytest.raises(CatalogUnavailable, match="JSON array"):
            JsonCatalogLoader(path).load()

    def test_missing_code(self, tmp_path):
        path = write_catalog(tmp_path / "c.json", [{"description": "A", "code": "X"}, {"description": "B"}])
        with pytest.raises(CatalogUnavailable, match="#1"):
            JsonCatalogLoader(path).load()

    def test_blank_description(self, tmp_path):
        path = write_catalog(tmp_path / "c.json", [{"description": "   ", "code": "X"}])
        with pytest.raises(CatalogUnavailable):
            JsonCatalogLoader(path).load()

    def test_record_not_an_object(self, tmp_path):
        path = write_catalog(tmp_path / "c.json", ["Naproxen"])
        with pytest.raises(CatalogUnavailable):
            JsonCatalogLoader(path).load()
