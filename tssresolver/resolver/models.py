"""
Credential data models.

Dataclasses for the responses and credentials that flow through
one resolution.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, Optional


# Canonical field names expected by the orchestration platform
VAL_USER = "user"
VAL_PSWD = "pswd"
VAL_PKEY = "pkey"
VAL_PASSPHRASE = "passphrase"
VAL_AUTHPROTO = "authprotocol"
VAL_AUTHKEY = "authkey"
VAL_PRIVPROTO = "privprotocol"
VAL_PRIVKEY = "privkey"

CANONICAL_FIELDS = (
    VAL_USER,
    VAL_PSWD,
    VAL_PKEY,
    VAL_PASSPHRASE,
    VAL_AUTHPROTO,
    VAL_AUTHKEY,
    VAL_PRIVPROTO,
    VAL_PRIVKEY,
)


@dataclass
class ResolvedCredential:
    """The eight platform fields for one secret. None means no value."""

    user: Optional[str] = None
    pswd: Optional[str] = None
    pkey: Optional[str] = None  # PEM string, in-memory only
    passphrase: Optional[str] = None
    authprotocol: Optional[str] = None  # SNMPv3: MD5, SHA
    authkey: Optional[str] = None
    privprotocol: Optional[str] = None  # SNMPv3: DES, AES
    privkey: Optional[str] = None

    @classmethod
    def from_mapped(cls, mapped: Dict[str, str], credential_type: str) -> "ResolvedCredential":
        """Pick the canonical fields out of a fetcher result keyed "<type>.<field>"."""
        prefix = f"{credential_type}."
        return cls(**{name: mapped.get(prefix + name) for name in CANONICAL_FIELDS})

    def to_dict(self) -> Dict[str, Optional[str]]:
        """All eight keys, always present."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @property
    def resolved_fields(self):
        """Names of fields that have a value."""
        return [name for name, value in self.to_dict().items() if value is not None]

    @property
    def has_key(self) -> bool:
        """Check if a private key is available."""
        return self.pkey is not None

    @property
    def has_password(self) -> bool:
        """Check if password is available."""
        return self.pswd is not None

    def __repr__(self) -> str:
        return f"ResolvedCredential(resolved={self.resolved_fields})"


class ResponseKind(Enum):
    """Shapes of the all-fields response from the SDK."""
    RECORD = "record"
    NOT_AUTHENTICATED = "not_authenticated"
    MALFORMED = "malformed"
    ERROR = "error"


@dataclass
class SecretResponse:
    """Classified all-fields response."""

    kind: ResponseKind
    fields: Dict[str, str] = field(default_factory=dict)  # slug -> value
    message: str = ""

    @property
    def is_record(self) -> bool:
        return self.kind == ResponseKind.RECORD

    def __repr__(self) -> str:
        if self.is_record:
            return f"SecretResponse(kind=record, fields={sorted(self.fields)})"
        return f"SecretResponse(kind={self.kind.value}, message={self.message!r})"

