"""Tests for catalog configuration."""

from __future__ import annotations

import json

import pytest

from quiesce.catalog import DEFAULT_CATALOG, Catalog, load_catalog
from quiesce.config import ConfigurationError


def test_default_catalog_when_no_path():
    catalog = load_catalog(None)

    assert catalog is DEFAULT_CATALOG
    assert catalog.high_latency_service in catalog.services
    assert catalog.processes[0] == "Creative Cloud"


def test_loads_json_catalog_preserving_order(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"services": ["B", "A"], "processes": ["Z", " Y "], "high_latency_service": "A"}))

    catalog = load_catalog(path)

    assert catalog == Catalog(services=("B", "A"), processes=("Z", "Y"), high_latency_service="A")


def test_high_latency_service_is_optional(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"services": ["A"], "processes": []}))

    assert load_catalog(path).high_latency_service is None


def test_missing_file_is_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError, match="Failed to load catalog"):
        load_catalog(tmp_path / "absent.json")


def test_invalid_json_is_configuration_error(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text("[")

    with pytest.raises(ConfigurationError, match="Invalid JSON"):
        load_catalog(path)


def test_missing_section_is_configuration_error(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"services": ["A"]}))

    with pytest.raises(ConfigurationError, match="processes is missing"):
        load_catalog(path)


@pytest.mark.parametrize("bad", [["A", 3], "A", ["A", ""]])
def test_entries_must_be_non_empty_strings(tmp_path, bad):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"services": bad, "processes": []}))

    with pytest.raises(ConfigurationError, match="services has invalid format"):
        load_catalog(path)


def test_duplicate_entries_are_rejected():
    with pytest.raises(ConfigurationError, match="unique"):
        Catalog(services=("A", "A"), processes=())


def test_high_latency_service_must_be_in_catalog():
    with pytest.raises(ConfigurationError, match="high_latency_service"):
        Catalog(services=("A",), processes=(), high_latency_service="B")