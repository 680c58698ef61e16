"""YAML config loader with built-in defaults injection."""

import logging
from pathlib import Path

import yaml

from airwx.config.defaults import DEFAULT_STATIONS, DEFAULT_TAF_OVERRIDES
from airwx.config.schema import AppConfig

logger = logging.getLogger(__name__)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate config from a YAML file.

    A missing file yields the defaults. If no stations are specified,
    injects DEFAULT_STATIONS; if no overrides are given, injects
    DEFAULT_TAF_OVERRIDES.
    """
    raw: dict = {}
    if path is not None:
        path = Path(path)
        if path.exists():
            with open(path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            logger.info("Config %s not found, using defaults", path)

    if not raw.get("stations"):
        raw["stations"] = [s.model_dump() for s in DEFAULT_STATIONS]
    if "taf_overrides" not in raw or raw["taf_overrides"] is None:
        raw["taf_overrides"] = dict(DEFAULT_TAF_OVERRIDES)

    return AppConfig(**raw)
