"""Configuration models and loading."""

import json
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.exceptions import ConfigurationError

CONFIG_DIR = Path.home() / ".config" / "berg-relay"
CONFIG_FILE = CONFIG_DIR / "config.json"

ENV_PREFIX = "BERG_RELAY_"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ProxySettings(_Frozen):
    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=1, le=65535)


class UpstreamSettings(_Frozen):
    base_url: str = "https://library.m0unt41n.ch"
    request_timeout_ms: int = Field(default=10_000, gt=0)

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def timeout_seconds(self) -> float:
        return self.request_timeout_ms / 1000


class LimitSettings(_Frozen):
    max_connections: int = 100
    max_keepalive_connections: int = 20
    keep_alive_timeout: int = 5


class CorsSettings(_Frozen):
    allow_origin: str = "*"


class RouteSettings(_Frozen):
    """A local path and the upstream path it relays to."""

    local_path: str
    upstream_path: str


def _default_routes() -> list[RouteSettings]:
    return [
        RouteSettings(local_path="/api/scoreboard/players", upstream_path="/api/v1/scoreboard/players"),
        RouteSettings(local_path="/api/ctf", upstream_path="/api/v1/ctf"),
        RouteSettings(local_path="/api/players", upstream_path="/api/v1/players"),
    ]


class Config(_Frozen):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    limits: LimitSettings = Field(default_factory=LimitSettings)
    cors: CorsSettings = Field(default_factory=CorsSettings)
    routes: tuple[RouteSettings, ...] = Field(default_factory=lambda: tuple(_default_routes()))


def load_config(environ: dict[str, str] | None = None) -> Config:
    """Load configuration from JSON file, then apply environment overrides."""
    config = _load_file()
    return apply_env_overrides(config, os.environ if environ is None else environ)


def apply_env_overrides(config: Config, environ) -> Config:
    """Return a copy of ``config`` with ``BERG_RELAY_*`` variables applied."""
    data = config.model_dump()

    port = environ.get(f"{ENV_PREFIX}PORT") or environ.get("PORT")
    if port:
        data["proxy"]["port"] = port
    host = environ.get(f"{ENV_PREFIX}HOST")
    if host:
        data["proxy"]["host"] = host
    base_url = environ.get(f"{ENV_PREFIX}UPSTREAM_BASE")
    if base_url:
        data["upstream"]["base_url"] = base_url
    timeout_ms = environ.get(f"{ENV_PREFIX}REQUEST_TIMEOUT_MS")
    if timeout_ms:
        data["upstream"]["request_timeout_ms"] = timeout_ms

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid environment override: {e}") from e


def _load_file() -> Config:
    if not CONFIG_FILE.exists():
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        default = Config()
        CONFIG_FILE.write_text(default.model_dump_json(indent=2))
        return default

    try:
        data = json.loads(CONFIG_FILE.read_text())
        return Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and recreate default
        backup = CONFIG_FILE.with_suffix(".json.bak")
        CONFIG_FILE.rename(backup)
        default = Config()
        CONFIG_FILE.write_text(default.model_dump_json(indent=2))
        return default
