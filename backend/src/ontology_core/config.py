"""Configuration management for the ontology core."""

import json
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
import structlog

from .jsonld import DEFAULT_NAMESPACE_TEMPLATE
from .preconditions import DEFAULT_GRAPH_READ_TIMEOUT_SECONDS
from .publishing import PublishGateConfig

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Settings:
    """Settings loaded from environment variables.

    ``default_tenant_id`` only seeds CLI arguments; the core itself always
    takes an explicit scope.
    """

    default_package: str
    default_channel: str
    default_tenant_id: Optional[str]
    base_namespace_template: str
    graph_read_timeout_seconds: float
    property_key_map: dict[str, str] = field(default_factory=dict)
    edge_label_map: dict[str, str] = field(default_factory=dict)
    publish_gates: PublishGateConfig = field(default_factory=PublishGateConfig)
    log_level: str = "INFO"
    log_json: bool = False


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_json_map(name: str) -> dict[str, str]:
    raw = os.getenv(name, "")
    if not raw.strip():
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(
            f"{name} must be valid JSON (e.g. {{\"ldm:status\": \"status\"}})."
        ) from exc
    if not isinstance(parsed, dict):
        raise ValueError(f"{name} must be a JSON object.")
    return {str(key): str(value) for key, value in parsed.items()}


def _parse_float(name: str, default: str) -> float:
    try:
        return float(os.getenv(name, default))
    except ValueError as exc:
        raise ValueError(f"{name} must be a valid number. Check your .env file.") from exc


def _parse_int(name: str, default: str) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError as exc:
        raise ValueError(f"{name} must be a valid integer. Check your .env file.") from exc


def load_settings() -> Settings:
    """
    Load settings from environment variables.

    Returns:
        Settings instance with all configuration values

    Raises:
        ValueError: If a variable holds an unparsable or out-of-range value
    """
    load_dotenv()

    default_package = os.getenv("ONTOLOGY_DEFAULT_PACKAGE", "default").strip()
    default_channel = os.getenv("ONTOLOGY_DEFAULT_CHANNEL", "dev").strip()
    if not default_package or not default_channel:
        raise ValueError(
            "ONTOLOGY_DEFAULT_PACKAGE and ONTOLOGY_DEFAULT_CHANNEL must not be blank."
        )
    default_tenant_id = os.getenv("ONTOLOGY_TENANT_ID", "").strip() or None

    base_namespace_template = os.getenv(
        "ONTOLOGY_BASE_NAMESPACE_TEMPLATE", DEFAULT_NAMESPACE_TEMPLATE
    )

    graph_read_timeout_seconds = _parse_float(
        "GRAPH_READ_TIMEOUT_SECONDS", str(DEFAULT_GRAPH_READ_TIMEOUT_SECONDS)
    )
    if graph_read_timeout_seconds <= 0:
        logger.warning("graph_read_timeout_disabled", value=graph_read_timeout_seconds)

    defaults = PublishGateConfig()
    publish_gates = PublishGateConfig(
        min_confidence_for_publish=_parse_float(
            "PUBLISH_MIN_CONFIDENCE", str(defaults.min_confidence_for_publish)
        ),
        max_complexity_for_publish=_parse_int(
            "PUBLISH_MAX_COMPLEXITY", str(defaults.max_complexity_for_publish)
        ),
        max_depth_for_publish=_parse_int(
            "PUBLISH_MAX_DEPTH", str(defaults.max_depth_for_publish)
        ),
        min_confidence_for_proposal=_parse_float(
            "PROPOSE_MIN_CONFIDENCE", str(defaults.min_confidence_for_proposal)
        ),
        max_complexity_for_proposal=_parse_int(
            "PROPOSE_MAX_COMPLEXITY", str(defaults.max_complexity_for_proposal)
        ),
        max_depth_for_proposal=_parse_int(
            "PROPOSE_MAX_DEPTH", str(defaults.max_depth_for_proposal)
        ),
    )
    for name, value in (
        ("PUBLISH_MIN_CONFIDENCE", publish_gates.min_confidence_for_publish),
        ("PROPOSE_MIN_CONFIDENCE", publish_gates.min_confidence_for_proposal),
    ):
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"{name} must be between 0.0 and 1.0.")

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()

    return Settings(
        default_package=default_package,
        default_channel=default_channel,
        default_tenant_id=default_tenant_id,
        base_namespace_template=base_namespace_template,
        graph_read_timeout_seconds=graph_read_timeout_seconds,
        property_key_map=_parse_json_map("PROPERTY_KEY_MAP_JSON"),
        edge_label_map=_parse_json_map("EDGE_LABEL_MAP_JSON"),
        publish_gates=publish_gates,
        log_level=log_level,
        log_json=_parse_bool(os.getenv("LOG_JSON", "false")),
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once
    from environment variables.

    Returns:
        Cached Settings instance
    """
    return load_settings()
