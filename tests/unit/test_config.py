"""
Tests for CrawlConfig loading - YAML, environment overrides, validation.
"""

import pytest

from cdp_topology.config import CrawlConfig, get_settings_from_env, load_yaml_config
from cdp_topology.exceptions import ConfigError


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "crawl.yaml"
    path.write_text(
        "community: lab-ro\n"
        "timeout: 5\n"
        "max_concurrent: 4\n"
        "max_depth: 3\n"
        "ignore:\n"
        "  - oob-sw01\n"
        "  - oob-sw02\n"
    )
    return path


class TestLoadYaml:

    def test_mapping(self, config_file):
        data = load_yaml_config(config_file)
        assert data['community'] == "lab-ro"
        assert data['ignore'] == ["oob-sw01", "oob-sw02"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_yaml_config(path) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_yaml_config(tmp_path / "missing.yaml")

    @pytest.mark.parametrize("content", ["community: [unclosed\n", "- a\n- b\n"])
    def test_invalid_content(self, tmp_path, content):
        path = tmp_path / "bad.yaml"
        path.write_text(content)
        with pytest.raises(ConfigError):
            load_yaml_config(path)


class TestCrawlConfig:

    def test_defaults(self):
        config = CrawlConfig()
        assert config.community == "public"
        assert config.port == 161
        assert config.max_depth is None
        assert config.ignore == []

    def test_from_yaml(self, config_file):
        config = CrawlConfig.from_yaml(config_file, environ={})
        assert config.community == "lab-ro"
        assert config.timeout == 5.0
        assert config.max_concurrent == 4
        assert config.max_depth == 3
        assert config.ignore == ["oob-sw01", "oob-sw02"]

    def test_env_overrides_yaml(self, config_file):
        environ = {
            "CDP_TOPOLOGY_COMMUNITY": "from-env",
            "CDP_TOPOLOGY_MAX_DEPTH": "1",
        }
        config = CrawlConfig.from_yaml(config_file, environ=environ)
        assert config.community == "from-env"
        assert config.max_depth == 1
        assert config.max_concurrent == 4

    def test_from_env(self):
        config = CrawlConfig.from_env({
            "CDP_TOPOLOGY_PORT": "1161",
            "CDP_TOPOLOGY_DEVICE_TIMEOUT": "12.5",
            "UNRELATED": "x",
        })
        assert config.port == 1161
        assert config.device_timeout == 12.5

    def test_empty_env_values_ignored(self):
        assert get_settings_from_env({"CDP_TOPOLOGY_COMMUNITY": ""}) == {}

    @pytest.mark.parametrize("data", [
        {"port": "not-a-port"},
        {"port": 70000},
        {"timeout": 0},
        {"retries": -1},
        {"max_concurrent": 0},
        {"max_depth": -1},
        {"community": ""},
        {"ignore": "oob-sw01"},
        {"snmp_version": 3},
    ])
    def test_invalid_values(self, data):
        with pytest.raises(ConfigError):
            CrawlConfig.from_dict(data)

    def test_null_ignore_is_empty(self):
        assert CrawlConfig.from_dict({"ignore": None}).ignore == []

    def test_to_dict_redacts_community(self):
        config = CrawlConfig(community="s3cret")
        assert config.to_dict()['community'] == "********"
        assert config.to_dict(redact=False)['community'] == "s3cret"
