"""
CDP Topology - Crawl Configuration.

Settings for SNMP access and crawl behaviour, loaded from a YAML file
and overlaid with environment variables.

Example YAML:
    community: public
    timeout: 3
    retries: 1
    max_concurrent: 10
    device_timeout: 30
    max_depth: 4
    ignore:
      - oob-sw01.example.net

Environment:
    CDP_TOPOLOGY_COMMUNITY      community string (keeps secrets out of files)
    CDP_TOPOLOGY_PORT           SNMP port
    CDP_TOPOLOGY_TIMEOUT        per-request timeout, seconds
    CDP_TOPOLOGY_RETRIES        per-request retries
    CDP_TOPOLOGY_BULK_SIZE      OIDs per GETBULK request
    CDP_TOPOLOGY_MAX_CONCURRENT concurrent device queries
    CDP_TOPOLOGY_DEVICE_TIMEOUT per-device timeout, seconds
    CDP_TOPOLOGY_MAX_DEPTH      maximum crawl depth
"""

import logging
import os
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "CDP_TOPOLOGY_"

# field name -> converter for environment / YAML values
_CONVERTERS = {
    'community': str,
    'port': int,
    'timeout': float,
    'retries': int,
    'bulk_size': int,
    'max_concurrent': int,
    'device_timeout': float,
    'max_depth': int,
}


def get_settings_from_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Collect CDP_TOPOLOGY_* variables that are set, keyed by field name."""
    environ = os.environ if environ is None else environ
    settings = {}
    for name in _CONVERTERS:
        value = environ.get(ENV_PREFIX + name.upper())
        if value:
            settings[name] = value
    return settings


def load_yaml_config(yaml_path: Union[str, Path]) -> Dict[str, Any]:
    """Read a YAML config file; an empty file yields {}."""
    try:
        with open(yaml_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML parsing error in {yaml_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {yaml_path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {yaml_path} must contain a mapping")
    return data


@dataclass
class CrawlConfig:
    """
    SNMP and crawl settings.

    community is reused for every neighbor the crawl connects to.
    max_depth None means unlimited.
    """
    community: str = "public"
    port: int = 161
    timeout: float = 3.0
    retries: int = 1
    bulk_size: int = 25
    max_concurrent: int = 10
    device_timeout: float = 60.0
    max_depth: Optional[int] = None
    ignore: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if not self.community:
            raise ConfigError("community must not be empty")
        if not 0 < self.port < 65536:
            raise ConfigError(f"port out of range: {self.port}")
        if self.timeout <= 0 or self.device_timeout <= 0:
            raise ConfigError("timeouts must be positive")
        if self.retries < 0:
            raise ConfigError("retries must not be negative")
        if self.bulk_size < 1 or self.max_concurrent < 1:
            raise ConfigError("bulk_size and max_concurrent must be at least 1")
        if self.max_depth is not None and self.max_depth < 0:
            raise ConfigError("max_depth must not be negative")
        if isinstance(self.ignore, str):
            raise ConfigError("ignore must be a list of device ids")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'CrawlConfig':
        """Build from a mapping, converting scalar types and rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key == 'ignore':
                if value is None:
                    value = []
                if isinstance(value, str) or not isinstance(value, (list, tuple, set)):
                    raise ConfigError("ignore must be a list of device ids")
                kwargs[key] = [str(v) for v in value]
            elif value is None:
                kwargs[key] = None
            else:
                try:
                    kwargs[key] = _CONVERTERS[key](value)
                except (TypeError, ValueError):
                    raise ConfigError(f"Invalid value for {key}: {value!r}")
        return cls(**kwargs)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'CrawlConfig':
        """Build from CDP_TOPOLOGY_* environment variables over defaults."""
        return cls.from_dict(get_settings_from_env(environ))

    @classmethod
    def from_yaml(
        cls,
        yaml_path: Union[str, Path],
        environ: Optional[Mapping[str, str]] = None,
    ) -> 'CrawlConfig':
        """Load a YAML file, then apply environment overrides."""
        config_dict = load_yaml_config(yaml_path)
        env_settings = get_settings_from_env(environ)
        if env_settings:
            logger.debug("Environment overrides: %s", ", ".join(sorted(env_settings)))
        config_dict.update(env_settings)
        return cls.from_dict(config_dict)

    def to_dict(self, redact: bool = True) -> Dict[str, Any]:
        data = asdict(self)
        if redact:
            data['community'] = '********'
        return data
