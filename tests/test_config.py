import json

import pytest
from pydantic import ValidationError

from core import config as config_module
from core.config import Config, RouteSettings, UpstreamSettings, apply_env_overrides, load_config
from core.exceptions import ConfigurationError
from core.request_types import RouteEntry
from core.router import RouteMapping


def _urls(mapping: RouteMapping) -> dict[str, str]:
    return {entry.local_path: entry.upstream_url for entry in mapping}


def test_defaults_match_original_relay():
    config = Config()
    mapping = RouteMapping.from_config(config)

    assert config.proxy.port == 3000
    assert config.upstream.request_timeout_ms == 10_000
    assert config.upstream.timeout_seconds == 10.0
    assert [(e.local_path, e.upstream_url) for e in mapping] == [
        ("/api/scoreboard/players", "https://library.m0unt41n.ch/api/v1/scoreboard/players"),
        ("/api/ctf", "https://library.m0unt41n.ch/api/v1/ctf"),
        ("/api/players", "https://library.m0unt41n.ch/api/v1/players"),
    ]


def test_env_overrides_apply():
    config = apply_env_overrides(
        Config(),
        {
            "BERG_RELAY_PORT": "8081",
            "BERG_RELAY_UPSTREAM_BASE": "http://localhost:9000/",
            "BERG_RELAY_REQUEST_TIMEOUT_MS": "2500",
        },
    )

    assert config.proxy.port == 8081
    assert config.upstream.base_url == "http://localhost:9000"
    assert config.upstream.timeout_seconds == 2.5
    assert _urls(RouteMapping.from_config(config))["/api/ctf"] == "http://localhost:9000/api/v1/ctf"


def test_plain_port_env_is_honoured():
    assert apply_env_overrides(Config(), {"PORT": "4000"}).proxy.port == 4000


@pytest.mark.parametrize(
    "environ",
    [
        {"BERG_RELAY_PORT": "not-a-port"},
        {"BERG_RELAY_PORT": "70000"},
        {"BERG_RELAY_REQUEST_TIMEOUT_MS": "0"},
    ],
)
def test_invalid_env_raises_configuration_error(environ):
    with pytest.raises(ConfigurationError):
        apply_env_overrides(Config(), environ)


def test_config_is_frozen():
    config = Config()
    with pytest.raises(ValidationError):
        config.proxy.port = 1


def test_load_config_writes_default_file(tmp_path, monkeypatch):
    monkeypatch.setattr(config_module, "CONFIG_DIR", tmp_path)
    monkeypatch.setattr(config_module, "CONFIG_FILE", tmp_path / "config.json")

    config = load_config(environ={})

    assert config == Config()
    assert json.loads((tmp_path / "config.json").read_text())["proxy"]["port"] == 3000


def test_load_config_reads_routes_from_file(tmp_path, monkeypatch):
    config_file = tmp_path / "config.json"
    config_file.write_text(
        json.dumps(
            {
                "upstream": {"base_url": "https://berg.example"},
                "routes": [{"local_path": "/api/metadata", "upstream_path": "/api/metadata"}],
            }
        )
    )
    monkeypatch.setattr(config_module, "CONFIG_DIR", tmp_path)
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_file)

    mapping = RouteMapping.from_config(load_config(environ={}))

    assert len(mapping) == 1
    assert _urls(mapping)["/api/metadata"] == "https://berg.example/api/metadata"


def test_corrupt_config_is_backed_up(tmp_path, monkeypatch):
    config_file = tmp_path / "config.json"
    config_file.write_text("{not json")
    monkeypatch.setattr(config_module, "CONFIG_DIR", tmp_path)
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_file)

    config = load_config(environ={})

    assert config == Config()
    assert (tmp_path / "config.json.bak").read_text() == "{not json"


def test_route_mapping_rejects_duplicate_local_paths():
    config = Config(
        routes=(
            RouteSettings(local_path="/api/ctf", upstream_path="/api/v1/ctf"),
            RouteSettings(local_path="/api/ctf", upstream_path="/api/v2/ctf"),
        )
    )
    with pytest.raises(ConfigurationError, match="Duplicate"):
        RouteMapping.from_config(config)


@pytest.mark.parametrize(
    "entry",
    [
        RouteEntry("/api/ctf", "/api/v1/ctf"),
        RouteEntry("/api/ctf", "ftp://upstream.test/api/v1/ctf"),
        RouteEntry("api/ctf", "https://upstream.test/api/v1/ctf"),
    ],
)
def test_route_mapping_rejects_invalid_entries(entry):
    with pytest.raises(ConfigurationError):
        RouteMapping([entry])


def test_relative_upstream_base_is_rejected():
    config = Config(upstream=UpstreamSettings(base_url="library.m0unt41n.ch"))
    with pytest.raises(ConfigurationError, match="absolute"):
        RouteMapping.from_config(config)
