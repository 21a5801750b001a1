"""Secret fetching, field mapping and the platform facade."""

from tssresolver.resolver.models import ResolvedCredential, SecretResponse, ResponseKind
from tssresolver.resolver.mapping import FieldMapping
from tssresolver.resolver.fetcher import SecretFetcher
from tssresolver.resolver.facade import CredentialResolver

__all__ = [
    "ResolvedCredential",
    "SecretResponse",
    "ResponseKind",
    "FieldMapping",
    "SecretFetcher",
    "CredentialResolver",
]
