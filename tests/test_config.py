"""Unit tests for configuration loading."""

from pathlib import Path

import pytest

import relayarr.config as config_module
from relayarr.config import (
    ArrType,
    ConfigError,
    RelayarrConfig,
    init_config,
    load_config,
)

FULL_CONFIG = """
global:
  loglevel: debug
  definitions_dirs:
    - /etc/relayarr/definitions
  strict_definitions: true
  notification_urls:
    - "json://localhost"
  push_attempts: 3
arrs:
  - name: radarr-4k
    type: radarr
    host: http://radarr:7878
    api_key: APIKEY
    download_client: qBittorrent
    indexers:
      - polishtracker
  - name: readarr
    type: readarr
    host: http://readarr:8787
    api_key: OTHERKEY
    basic_auth: true
    username: admin
    password: secret
    max_in_flight: 2
indexers:
  - identifier: polishtracker
    settings:
      rsskey: ABC123
  - identifier: other
    enabled: false
"""


class TestLoadConfig:
    """Tests for load_config."""

    def test_full_config(self) -> None:
        """Should parse every section."""
        config = load_config(FULL_CONFIG)

        assert config.global_config.loglevel == "debug"
        assert config.global_config.definitions_dirs == ["/etc/relayarr/definitions"]
        assert config.global_config.include_bundled_definitions is True
        assert config.global_config.strict_definitions is True
        assert config.global_config.push_attempts == 3

        radarr, readarr = config.arrs
        assert radarr.type == ArrType.RADARR
        assert radarr.indexers == ["polishtracker"]
        assert radarr.timeout == 120.0
        assert readarr.basic_auth is True
        assert readarr.max_in_flight == 2

        assert [i.identifier for i in config.enabled_indexers] == ["polishtracker"]
        assert config.indexers[0].settings == {"rsskey": "ABC123"}

    def test_empty_document(self) -> None:
        """Should fall back to defaults for an empty document."""
        config = load_config("")

        assert config == RelayarrConfig()
        assert config.global_config.push_attempts == 1

    def test_populate_by_name(self) -> None:
        """Should accept the field name as well as the global alias."""
        config = RelayarrConfig(global_config={"loglevel": "warning"})

        assert config.global_config.loglevel == "warning"

    @pytest.mark.parametrize(
        "content,message",
        [
            ("arrs: [unclosed", "Invalid YAML"),
            ("- a\n- b\n", "must be a mapping"),
            ("global:\n  push_attempts: 0\n", "push_attempts"),
            (
                "arrs:\n  - {name: a, type: plex, host: h, api_key: k}\n",
                "type",
            ),
        ],
    )
    def test_invalid(self, content: str, message: str) -> None:
        """Should raise ConfigError for invalid documents."""
        with pytest.raises(ConfigError, match=message):
            load_config(content)

    def test_duplicate_arr_names(self) -> None:
        """Should refuse two arrs with the same name."""
        content = """
arrs:
  - {name: radarr, type: radarr, host: http://a, api_key: k}
  - {name: radarr, type: radarr, host: http://b, api_key: k}
"""
        with pytest.raises(ConfigError, match="arr names must be unique"):
            load_config(content)

    def test_duplicate_indexers(self) -> None:
        """Should refuse an indexer listed twice."""
        content = """
indexers:
  - identifier: polishtracker
  - identifier: polishtracker
"""
        with pytest.raises(ConfigError, match="indexer identifiers must be unique"):
            load_config(content)

    def test_basic_auth_requires_username(self) -> None:
        """Should refuse basic auth without a username."""
        content = """
arrs:
  - {name: sonarr, type: sonarr, host: http://s, api_key: k, basic_auth: true}
"""
        with pytest.raises(ConfigError, match="basic_auth requires a username"):
            load_config(content)


class TestInitConfig:
    """Tests for init_config."""

    @pytest.fixture(autouse=True)
    def reset_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(config_module, "cfg", RelayarrConfig())

    def test_sets_global(self, tmp_path: Path) -> None:
        """Should load the file into the global configuration."""
        path = tmp_path / "config.yml"
        path.write_text(FULL_CONFIG, encoding="utf-8")

        loaded = init_config(path)

        assert config_module.cfg is loaded
        assert len(config_module.cfg.arrs) == 2

    def test_missing_file(self, tmp_path: Path) -> None:
        """Should raise ConfigError for an unreadable file."""
        with pytest.raises(ConfigError, match="Cannot read config file"):
            init_config(tmp_path / "missing.yml")
