"""Shared test fixtures."""

import json
import sqlite3
from pathlib import Path

import pytest
import yaml

from airwx.config.loader import load_config
from airwx.config.schema import AppConfig
from airwx.storage.database import connect, run_migrations

FIXTURE_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def tmp_conn(tmp_path: Path) -> sqlite3.Connection:
    """Migrated temporary state database."""
    conn = connect(tmp_path / "state.db")
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def default_config() -> AppConfig:
    """Config with built-in stations and overrides."""
    return load_config(None)


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "server": {"port": 8181},
        "dashboard": {"ifr_lookahead_hours": 4},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def metar_sample() -> list[dict]:
    with open(FIXTURE_DIR / "metar_sample.json") as f:
        return json.load(f)


@pytest.fixture
def taf_sample() -> list[dict]:
    with open(FIXTURE_DIR / "taf_sample.json") as f:
        return json.load(f)


@pytest.fixture
def asos_csv() -> str:
    return (FIXTURE_DIR / "asos_sample.csv").read_text()
