"""
Field mapping table.

secretmap.properties associates "<type>.<canonicalField>" keys with the
Secret Server field name that holds the value for that credential type:

    ssh.user = Username
    ssh.pswd = Password
    ssh.pkey = Private Key
    windows.domain = Domain
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from tssresolver.core.properties import load_properties


logger = logging.getLogger(__name__)


def field_slug(field_name: str) -> str:
    """Normalize a field name the way the tss client names fields."""
    return field_name.lower().replace(" ", "-")


@dataclass
class FieldMapping:
    """Ordered, read-only view over the mapping table."""

    entries: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "FieldMapping":
        """Load the table from disk. A missing file gives an empty table."""
        entries = load_properties(path)
        logger.debug(f"Loaded {len(entries)} field mappings from {path}")
        return cls(entries=entries)

    def entries_for(self, credential_type: str) -> Iterator[Tuple[str, str, str]]:
        """
        Yield (key, canonical_field, vendor_field) for one credential type.

        Entries come back in file order. Only keys starting with
        "<credential_type>." match.
        """
        prefix = f"{credential_type}."
        for key, vendor_field in self.entries.items():
            if key.startswith(prefix):
                yield key, key[len(prefix):], vendor_field

    def vendor_field(self, credential_type: str, canonical_field: str) -> Optional[str]:
        return self.entries.get(f"{credential_type}.{canonical_field}") or None

    def types(self) -> List[str]:
        """Distinct credential types defined in the table."""
        seen = []
        for key in self.entries:
            credential_type = key.split(".", 1)[0]
            if "." in key and credential_type not in seen:
                seen.append(credential_type)
        return seen

    def __len__(self) -> int:
        return len(self.entries)
