"""
Configuration management for the TSS credential resolver.

Handles locating the SDK installation folder and loading resolver.yaml from
it, providing default values for all settings.

The installation folder holds the tss executable, the one-time
qualifier.properties, the secretmap.properties mapping table and the SDK's
credentials.config marker. It is resolved from an explicit argument, then
the TSS_LOCATION environment variable, then a fixed default.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


logger = logging.getLogger(__name__)

TSS_ENV_VAR = "TSS_LOCATION"
CONFIG_ENV_VAR = "TSS_RESOLVER_CONFIG"

# Default paths
if os.name == "nt":
    DEFAULT_INSTALL_DIR = Path("C:/TSS")
    DEFAULT_EXECUTABLE = "tss.exe"
else:
    DEFAULT_INSTALL_DIR = Path("/opt/tss")
    DEFAULT_EXECUTABLE = "tss"

DEFAULT_CONFIG_NAME = "resolver.yaml"
DEFAULT_QUALIFIER_FILE = "qualifier.properties"
DEFAULT_MAPPING_FILE = "secretmap.properties"
DEFAULT_MARKER_FILE = "credentials.config"


@dataclass
class ExecutionConfig:
    """Settings for each tss invocation."""

    timeout: int = 60


@dataclass
class CacheConfig:
    """Fallback cache policy when qualifier.properties omits one."""

    strategy: str = "Never"
    age: int = 0


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "INFO"
    file: Optional[Path] = None


@dataclass
class Config:
    """Main configuration container."""

    install_dir: Path = DEFAULT_INSTALL_DIR
    config_file: Optional[Path] = None

    executable: str = DEFAULT_EXECUTABLE
    qualifier_file: str = DEFAULT_QUALIFIER_FILE
    mapping_file: str = DEFAULT_MAPPING_FILE
    marker_file: str = DEFAULT_MARKER_FILE

    execution: ExecutionConfig = field(default_factory=ExecutionConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def executable_path(self) -> Path:
        return self.install_dir / self.executable

    @property
    def qualifier_path(self) -> Path:
        return self.install_dir / self.qualifier_file

    @property
    def mapping_path(self) -> Path:
        return self.install_dir / self.mapping_file

    @property
    def marker_path(self) -> Path:
        return self.install_dir / self.marker_file

    @classmethod
    def load(
        cls,
        install_dir: Optional[Path] = None,
        config_path: Optional[Path] = None,
    ) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            install_dir: SDK folder. If None, uses TSS_LOCATION or the default.
            config_path: Path to config file. If None, uses TSS_RESOLVER_CONFIG
                         or resolver.yaml inside the SDK folder.

        Returns:
            Config instance with values from file merged with defaults.

        Raises:
            ValueError: If the config file is not valid YAML.
        """
        config = cls()
        config.install_dir = resolve_install_dir(install_dir)

        if config_path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            config_path = Path(env_path) if env_path else config.install_dir / DEFAULT_CONFIG_NAME
        config.config_file = Path(config_path)

        # If config file doesn't exist, return defaults
        if not config.config_file.exists():
            logger.debug(f"No resolver config at {config.config_file}, using defaults")
            return config

        try:
            with open(config.config_file) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid config YAML: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Invalid config YAML: expected a mapping in {config.config_file}")

        for name in ("executable", "qualifier_file", "mapping_file", "marker_file"):
            if data.get(name):
                setattr(config, name, str(data[name]))

        if "execution" in data:
            exec_data = data["execution"] or {}
            config.execution = ExecutionConfig(
                timeout=int(exec_data.get("timeout", 60)),
            )

        if "cache" in data:
            cache_data = data["cache"] or {}
            config.cache = CacheConfig(
                strategy=str(cache_data.get("strategy", "Never")),
                age=int(cache_data.get("age", 0)),
            )

        if "logging" in data:
            log_data = data["logging"] or {}
            log_file = log_data.get("file")
            config.logging = LoggingConfig(
                level=str(log_data.get("level", "INFO")).upper(),
                file=Path(log_file).expanduser() if log_file else None,
            )

        return config


def resolve_install_dir(install_dir: Optional[Path] = None) -> Path:
    """
    Get the SDK installation folder.

    An explicit path wins, then the TSS_LOCATION environment variable,
    then the platform default.
    """
    if install_dir is not None:
        return Path(install_dir).expanduser()

    env_dir = os.environ.get(TSS_ENV_VAR)
    if env_dir:
        return Path(env_dir).expanduser()

    return DEFAULT_INSTALL_DIR
