"""
Credential Resolver - entry point called by the orchestration platform.

The platform passes {"id": <secret id>, "type": <credential type>} and
expects a map back with exactly the eight keys user, pswd, pkey,
passphrase, authprotocol, authkey, privprotocol and privkey. Keys that
could not be resolved are present with a value of None.

This is the only place where pipeline failures are turned into an
empty result instead of an exception.
"""

import logging
from pathlib import Path
from typing import Dict, Mapping, Optional

from tssresolver import __version__
from tssresolver.core.config import Config
from tssresolver.errors import ContractViolation
from tssresolver.resolver.fetcher import SecretFetcher, validate_secret_id
from tssresolver.resolver.models import (
    ResolvedCredential,
    VAL_AUTHKEY,
    VAL_AUTHPROTO,
    VAL_PASSPHRASE,
    VAL_PKEY,
    VAL_PRIVKEY,
    VAL_PRIVPROTO,
    VAL_PSWD,
    VAL_USER,
)
from tssresolver.sdk.client import TssCliClient
from tssresolver.sdk.initializer import SdkInitializer


logger = logging.getLogger(__name__)

ARG_ID = "id"
ARG_TYPE = "type"


class CredentialResolver:
    """
    Resolves a Secret Server secret into the platform's credential fields.

    Usage:
        resolver = CredentialResolver()
        result = resolver.resolve({"id": "42", "type": "ssh"})
        # {"user": "CORP\\alice", "pswd": "...", "pkey": None, ...}

    By default configuration is re-read and a fresh tss client is built for
    every call. Pass a fetcher to drive the pipeline with another client.
    """

    ARG_ID = ARG_ID
    ARG_TYPE = ARG_TYPE
    VAL_USER = VAL_USER
    VAL_PSWD = VAL_PSWD
    VAL_PKEY = VAL_PKEY
    VAL_PASSPHRASE = VAL_PASSPHRASE
    VAL_AUTHPROTO = VAL_AUTHPROTO
    VAL_AUTHKEY = VAL_AUTHKEY
    VAL_PRIVPROTO = VAL_PRIVPROTO
    VAL_PRIVKEY = VAL_PRIVKEY

    def __init__(
        self,
        install_dir: Optional[Path] = None,
        config_path: Optional[Path] = None,
        fetcher: Optional[SecretFetcher] = None,
    ):
        """
        Initialize resolver.

        Args:
            install_dir: SDK folder. If None, uses TSS_LOCATION or the default.
            config_path: resolver.yaml override.
            fetcher: Pre-built fetcher; skips per-call construction.
        """
        self.install_dir = install_dir
        self.config_path = config_path
        self._fetcher = fetcher

    def build_fetcher(self, config: Config) -> SecretFetcher:
        """Wire client, initializer and fetcher from configuration."""
        client = TssCliClient(
            config.install_dir,
            executable=config.executable,
            timeout=config.execution.timeout,
        )
        initializer = SdkInitializer(
            client,
            config.install_dir,
            qualifier_file=config.qualifier_file,
            marker_file=config.marker_file,
            default_cache_strategy=config.cache.strategy,
            default_cache_age=config.cache.age,
        )
        return SecretFetcher(client, initializer, config.mapping_path)

    def resolve_credential(self, args: Mapping) -> ResolvedCredential:
        """
        Resolve without the failure boundary.

        Raises:
            ContractViolation: Missing or malformed id/type.
            ResolverError: Any pipeline failure.
        """
        if args is None:
            raise ContractViolation("No arguments supplied")

        secret_id = validate_secret_id(args.get(ARG_ID))

        credential_type = args.get(ARG_TYPE)
        if not isinstance(credential_type, str) or not credential_type.strip():
            raise ContractViolation(f"Credential type must be a non-empty string, got {credential_type!r}")
        credential_type = credential_type.strip()

        fetcher = self._fetcher
        if fetcher is None:
            config = Config.load(self.install_dir, self.config_path)
            logger.info(f"Using tss SDK in folder: {config.install_dir}")
            fetcher = self.build_fetcher(config)

        mapped = fetcher.fetch(secret_id, credential_type)
        credential = ResolvedCredential.from_mapped(mapped, credential_type)
        logger.info(
            f"Resolved secret {secret_id}/{credential_type}: "
            f"{len(credential.resolved_fields)} of 8 fields"
        )
        return credential

    def resolve(self, args: Mapping) -> Dict[str, Optional[str]]:
        """
        Resolve a secret for the platform.

        Args:
            args: {"id": secret id, "type": credential type}.

        Returns:
            Dict with all eight canonical keys; None where unresolved.
            Never raises for pipeline failures.
        """
        try:
            return self.resolve_credential(args).to_dict()
        except ContractViolation as e:
            logger.error(f"Invalid resolve arguments: {e}")
        except Exception as e:
            logger.exception(f"Error resolving credential: {e}")
        return ResolvedCredential().to_dict()

    def get_version(self) -> str:
        """Version string reported to the platform."""
        return __version__
