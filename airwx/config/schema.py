"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field, field_validator


class StationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    id: str
    name: str = ""


class ServerConfig(BaseModel):
    model_config = {"extra": "forbid"}

    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)
    cache_ttl_seconds: int = Field(default=600, ge=1)
    user_agent: str = "airwx/0.1.0 (contact: ops@example.com)"
    request_timeout: float = Field(default=30.0, gt=0.0)
    max_retries: int = Field(default=2, ge=0)
    retry_base_delay: float = Field(default=2.0, ge=0.0)
    awc_base_url: str = "https://aviationweather.gov"
    iem_base_url: str = "https://mesonet.agron.iastate.edu"
    asos_history_hours: int = Field(default=24, ge=1, le=168)


class DashboardConfig(BaseModel):
    model_config = {"extra": "forbid"}

    server_url: str = "http://127.0.0.1:8080"
    data_ttl_seconds: int = Field(default=600, ge=1)
    timeline_hours: int = Field(default=24, ge=1, le=48)
    ifr_lookahead_hours: int = Field(default=6, ge=1, le=48)
    asos_network: str = "NJ_ASOS"
    age_fresh_minutes: int = Field(default=30, ge=0)
    age_stale_minutes: int = Field(default=90, ge=0)
    request_timeout: float = Field(default=30.0, gt=0.0)


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    server: ServerConfig = ServerConfig()
    dashboard: DashboardConfig = DashboardConfig()
    stations: list[StationConfig] = []
    taf_overrides: dict[str, str] = {}

    @field_validator("taf_overrides")
    @classmethod
    def _normalize_overrides(cls, v: dict[str, str]) -> dict[str, str]:
        return {
            k.strip().upper(): t.strip().upper()
            for k, t in v.items()
            if k.strip() and t.strip()
        }
