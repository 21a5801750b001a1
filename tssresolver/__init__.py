"""
TSS Credential Resolver - Secret Server credentials for an orchestration platform.

Usage:
    from tssresolver import CredentialResolver

    resolver = CredentialResolver()
    result = resolver.resolve({"id": "42", "type": "ssh"})
"""

__version__ = "1.0.0"

from tssresolver.core.config import Config
from tssresolver.errors import (
    ResolverError,
    ExecutionError,
    InitializationError,
    ContractViolation,
)
from tssresolver.sdk.client import VaultClient, TssCliClient
from tssresolver.sdk.initializer import SdkInitializer
from tssresolver.resolver.facade import CredentialResolver
from tssresolver.resolver.fetcher import SecretFetcher
from tssresolver.resolver.models import ResolvedCredential

__all__ = [
    # Version
    "__version__",
    # Config
    "Config",
    # Errors
    "ResolverError",
    "ExecutionError",
    "InitializationError",
    "ContractViolation",
    # SDK
    "VaultClient",
    "TssCliClient",
    "SdkInitializer",
    # Resolver
    "CredentialResolver",
    "SecretFetcher",
    "ResolvedCredential",
]
