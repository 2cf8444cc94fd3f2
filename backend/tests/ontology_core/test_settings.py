"""Tests for configuration loading."""

from __future__ import annotations

import pytest

from ontology_core.config import load_settings

_ENV_VARS = (
    "ONTOLOGY_TENANT_ID",
    "ONTOLOGY_BASE_NAMESPACE_TEMPLATE",
    "GRAPH_READ_TIMEOUT_SECONDS",
    "PROPERTY_KEY_MAP_JSON",
    "EDGE_LABEL_MAP_JSON",
    "PUBLISH_MIN_CONFIDENCE",
    "PUBLISH_MAX_COMPLEXITY",
    "PUBLISH_MAX_DEPTH",
    "PROPOSE_MIN_CONFIDENCE",
    "PROPOSE_MAX_COMPLEXITY",
    "PROPOSE_MAX_DEPTH",
    "LOG_LEVEL",
    "LOG_JSON",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ONTOLOGY_DEFAULT_PACKAGE", "default")
    monkeypatch.setenv("ONTOLOGY_DEFAULT_CHANNEL", "dev")


def test_load_settings_defaults() -> None:
    settings = load_settings()

    assert settings.default_package == "default"
    assert settings.default_channel == "dev"
    assert settings.default_tenant_id is None
    assert settings.base_namespace_template == (
        "https://ontology.example.org/{tenant}/{package}/{channel}#"
    )
    assert settings.graph_read_timeout_seconds == 10.0
    assert settings.property_key_map == {}
    assert settings.publish_gates.min_confidence_for_publish == 0.85
    assert settings.publish_gates.max_depth_for_proposal == 9
    assert settings.log_level == "INFO"
    assert settings.log_json is False


def test_load_settings_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ONTOLOGY_TENANT_ID", " acme ")
    monkeypatch.setenv("GRAPH_READ_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("PROPERTY_KEY_MAP_JSON", '{"ldm:orderStatus": "status"}')
    monkeypatch.setenv("EDGE_LABEL_MAP_JSON", '{"ldm:placedBy": "PLACED_BY"}')
    monkeypatch.setenv("PUBLISH_MAX_COMPLEXITY", "3")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_JSON", "true")

    settings = load_settings()

    assert settings.default_tenant_id == "acme"
    assert settings.graph_read_timeout_seconds == 2.5
    assert settings.property_key_map == {"ldm:orderStatus": "status"}
    assert settings.edge_label_map == {"ldm:placedBy": "PLACED_BY"}
    assert settings.publish_gates.max_complexity_for_publish == 3
    assert settings.log_level == "DEBUG"
    assert settings.log_json is True


def test_invalid_json_map_names_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PROPERTY_KEY_MAP_JSON", "{not json")

    with pytest.raises(ValueError, match="PROPERTY_KEY_MAP_JSON must be valid JSON"):
        load_settings()


def test_json_map_must_be_object(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EDGE_LABEL_MAP_JSON", '["a", "b"]')

    with pytest.raises(ValueError, match="EDGE_LABEL_MAP_JSON must be a JSON object"):
        load_settings()


def test_invalid_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GRAPH_READ_TIMEOUT_SECONDS", "soon")

    with pytest.raises(ValueError, match="GRAPH_READ_TIMEOUT_SECONDS"):
        load_settings()


def test_timeout_can_be_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GRAPH_READ_TIMEOUT_SECONDS", "0")

    assert load_settings().graph_read_timeout_seconds == 0.0


def test_invalid_gate_integer(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PROPOSE_MAX_DEPTH", "deep")

    with pytest.raises(ValueError, match="PROPOSE_MAX_DEPTH must be a valid integer"):
        load_settings()


def test_confidence_out_of_range(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PUBLISH_MIN_CONFIDENCE", "1.5")

    with pytest.raises(ValueError, match="PUBLISH_MIN_CONFIDENCE must be between"):
        load_settings()


def test_blank_default_channel(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ONTOLOGY_DEFAULT_CHANNEL", "  ")

    with pytest.raises(ValueError, match="ONTOLOGY_DEFAULT_CHANNEL"):
        load_settings()
