"""
SDK Initializer - one-time registration of the tss client on this host.

Path: tssresolver/sdk/initializer.py

The tss client must be registered with Secret Server once per machine
(init) and given a cache policy (cache). The client records its
registration in credentials.config; while that marker exists nothing is
done here.

After a successful setup qualifier.properties is deleted so the
onboarding key is not left readable on disk.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from tssresolver.core.properties import load_properties
from tssresolver.errors import ExecutionError, InitializationError
from tssresolver.sdk.client import VaultClient


logger = logging.getLogger(__name__)

PROP_URL = "datasource.secretServerUrl"
PROP_RULE = "datasource.secretServerRule"
PROP_KEY = "datasource.secretServerKey"
PROP_CACHE_STRATEGY = "datasource.secretServerCacheStrat"
PROP_CACHE_AGE = "datasource.secretServerCacheAge"


@dataclass
class InitSettings:
    """One-time SDK connection settings from qualifier.properties."""

    url: Optional[str] = None
    rule: Optional[str] = None
    key: Optional[str] = None  # onboarding key, optional
    cache_strategy: Optional[str] = None
    cache_age: Optional[str] = None

    @classmethod
    def from_properties(cls, props: Dict[str, str]) -> "InitSettings":
        return cls(
            url=props.get(PROP_URL) or None,
            rule=props.get(PROP_RULE) or None,
            key=props.get(PROP_KEY) or None,
            cache_strategy=props.get(PROP_CACHE_STRATEGY) or None,
            cache_age=props.get(PROP_CACHE_AGE) or None,
        )

    def init_args(self) -> List[str]:
        args = ["init", "--url", self.url, "-r", self.rule]
        if self.key:
            args += ["-k", self.key]
        return args

    def cache_args(self) -> List[str]:
        return ["cache", "--strategy", self.cache_strategy, "--age", str(self.cache_age)]

    def __repr__(self) -> str:
        # Never show the onboarding key
        return (
            f"InitSettings(url={self.url!r}, rule={self.rule!r}, "
            f"key={'set' if self.key else 'unset'}, "
            f"cache_strategy={self.cache_strategy!r}, cache_age={self.cache_age!r})"
        )


class SdkInitializer:
    """
    Registers the tss client with Secret Server if it has not been yet.

    Usage:
        initializer = SdkInitializer(client, install_dir)
        initializer.ensure_initialized()   # safe on every resolution
    """

    def __init__(
        self,
        client: VaultClient,
        install_dir: Path,
        qualifier_file: str = "qualifier.properties",
        marker_file: str = "credentials.config",
        default_cache_strategy: str = "Never",
        default_cache_age: int = 0,
    ):
        """
        Initialize the initializer.

        Args:
            client: Runner for tss commands.
            install_dir: SDK folder holding the qualifier and marker files.
            qualifier_file: One-time settings file name.
            marker_file: File the tss client writes once registered.
            default_cache_strategy: Used when the qualifier file has none.
            default_cache_age: Minutes, used when the qualifier file has none.
        """
        self.client = client
        self.install_dir = Path(install_dir)
        self.qualifier_path = self.install_dir / qualifier_file
        self.marker_path = self.install_dir / marker_file
        self.default_cache_strategy = default_cache_strategy
        self.default_cache_age = default_cache_age

    def is_initialized(self) -> bool:
        """Check whether the tss client is already registered on this host."""
        return self.marker_path.exists()

    def load_settings(self) -> InitSettings:
        """Read qualifier.properties, filling cache defaults."""
        settings = InitSettings.from_properties(load_properties(self.qualifier_path))
        if settings.cache_strategy is None:
            settings.cache_strategy = self.default_cache_strategy
        if settings.cache_age is None:
            settings.cache_age = str(self.default_cache_age)
        return settings

    def ensure_initialized(self, force: bool = False) -> bool:
        """
        Run init and cache setup unless the marker file exists.

        Args:
            force: Ignore the marker and initialize anyway.

        Returns:
            True if setup ran, False if it was already done.

        Raises:
            InitializationError: Settings incomplete or a tss command failed.
        """
        if not force and self.is_initialized():
            logger.debug(f"SDK already initialized ({self.marker_path} present)")
            return False

        logger.info("SDK not configured, initializing")
        settings = self.load_settings()
        logger.debug(f"Loaded {settings!r}")

        missing = [
            name for name, value in ((PROP_URL, settings.url), (PROP_RULE, settings.rule))
            if not value
        ]
        if missing:
            raise InitializationError(
                f"Cannot initialize SDK: {', '.join(missing)} missing from {self.qualifier_path}"
            )

        try:
            output = self.client.run(settings.init_args(), check=True)
            logger.debug(f"init output: {output.strip()}")
            output = self.client.run(settings.cache_args(), check=True)
            logger.debug(f"cache output: {output.strip()}")
        except ExecutionError as e:
            logger.error(f"Error initializing SDK: {e}")
            raise InitializationError(f"Error initializing SDK: {e}") from e

        logger.info("Finished initializing SDK")

        if not self.is_initialized():
            logger.warning(
                f"SDK initialization reported success but {self.marker_path.name} was not created"
            )

        self._remove_qualifier_file()
        return True

    def _remove_qualifier_file(self):
        """Delete the one-time settings file holding the onboarding key."""
        if not self.qualifier_path.is_file():
            return
        try:
            self.qualifier_path.unlink()
            logger.info(f"Removed {self.qualifier_path}")
        except OSError as e:
            logger.error(f"Error deleting file at: {self.qualifier_path.resolve()}: {e}")
