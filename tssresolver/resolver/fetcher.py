"""
Secret Fetcher - pull a secret through the tss client and map its fields.

Path: tssresolver/resolver/fetcher.py

Usage:
    fetcher = SecretFetcher(client, initializer, mapping_path)
    mapped = fetcher.fetch(42, "ssh")
    # {"ssh.user": "admin", "ssh.pswd": "...", ...}

Fields that the mapping table or the secret do not provide are absent from
the result; absence is the only "no value" signal at this level.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from tssresolver.errors import ContractViolation, ExecutionError
from tssresolver.resolver.mapping import FieldMapping, field_slug
from tssresolver.resolver.models import ResponseKind, SecretResponse, VAL_USER
from tssresolver.sdk.client import VaultClient
from tssresolver.sdk.initializer import SdkInitializer


logger = logging.getLogger(__name__)

NOT_AUTHENTICATED_SENTINEL = "Secret Server credentials not present."
DISPLAY_PLACEHOLDER = "not valid for display"
DOMAIN_FIELD = "domain"


def parse_response(raw: str) -> SecretResponse:
    """
    Classify the output of `tss secret -s <id> -ad`.

    Returns:
        SecretResponse tagged RECORD (with decoded fields),
        NOT_AUTHENTICATED, MALFORMED or ERROR.
    """
    text = (raw or "").lstrip("\ufeff \t\r\n")

    if text.startswith(NOT_AUTHENTICATED_SENTINEL):
        return SecretResponse(ResponseKind.NOT_AUTHENTICATED, message=text.strip())

    if not text.startswith("{"):
        return SecretResponse(ResponseKind.ERROR, message=text.strip())

    try:
        decoded = json.loads(text)
    except ValueError as e:
        return SecretResponse(ResponseKind.MALFORMED, message=f"Invalid JSON: {e}")

    if not isinstance(decoded, dict):
        return SecretResponse(ResponseKind.MALFORMED, message="Expected a JSON object")

    return SecretResponse(ResponseKind.RECORD, fields=_stringify(decoded))


def _stringify(decoded: Dict[str, Any]) -> Dict[str, str]:
    fields = {}
    for name, value in decoded.items():
        if value is None:
            continue
        if isinstance(value, str):
            fields[str(name)] = value
        elif isinstance(value, bool):
            fields[str(name)] = "true" if value else "false"
        elif isinstance(value, (int, float)):
            fields[str(name)] = str(value)
        else:
            fields[str(name)] = json.dumps(value)
    return fields


def validate_secret_id(secret_id) -> int:
    """Accept a positive int or a string holding one."""
    if isinstance(secret_id, bool):
        raise ContractViolation(f"Secret id must be a positive integer, got {secret_id!r}")

    if isinstance(secret_id, str):
        text = secret_id.strip()
        if not (text.isascii() and text.isdigit()):
            raise ContractViolation(f"Secret id must be a positive integer, got {secret_id!r}")
        secret_id = int(text)

    if not isinstance(secret_id, int) or secret_id <= 0:
        raise ContractViolation(f"Secret id must be a positive integer, got {secret_id!r}")

    return secret_id


class SecretFetcher:
    """
    Fetches one secret and applies the type-keyed field mapping.

    The mapping table is read from disk on every fetch so edits take effect
    without a restart.
    """

    def __init__(
        self,
        client: VaultClient,
        initializer: SdkInitializer,
        mapping_path: Path,
    ):
        """
        Initialize fetcher.

        Args:
            client: Runner for tss commands.
            initializer: Ensures the tss client is registered before fetching.
            mapping_path: Path to secretmap.properties.
        """
        self.client = client
        self.initializer = initializer
        self.mapping_path = Path(mapping_path)

    def fetch(self, secret_id: int, credential_type: str) -> Dict[str, str]:
        """
        Retrieve a secret and map its fields for one credential type.

        Args:
            secret_id: Secret Server secret id (positive integer).
            credential_type: Mapping table prefix, e.g. "ssh" or "snmp".

        Returns:
            Values keyed "<credential_type>.<canonicalField>". Empty when the
            secret could not be read or the type has no mappings.

        Raises:
            ContractViolation: If secret_id is not a positive integer.
            InitializationError: If first-time SDK setup fails.
            ExecutionError: If the tss client cannot be run.
        """
        secret_id = validate_secret_id(secret_id)
        mapping = FieldMapping.load(self.mapping_path)

        self.initializer.ensure_initialized()

        raw = self.client.run(["secret", "-s", str(secret_id), "-ad"])
        response = parse_response(raw)

        if response.kind == ResponseKind.NOT_AUTHENTICATED:
            logger.error(
                f"Secret {secret_id}: tss client is not authenticated, "
                f"re-initialization required: {response.message}"
            )
            return {}

        if response.kind == ResponseKind.MALFORMED:
            logger.error(f"Secret {secret_id}: could not parse response: {response.message}")
            return {}

        if response.kind == ResponseKind.ERROR:
            logger.error(f"Secret {secret_id}: tss client error: {response.message}")
            return {}

        logger.info(f"Loading properties from secret {secret_id} for type '{credential_type}'")
        return self._map_fields(secret_id, credential_type, mapping, response.fields)

    def _map_fields(
        self,
        secret_id: int,
        credential_type: str,
        mapping: FieldMapping,
        record: Dict[str, str],
    ) -> Dict[str, str]:
        result = {}

        domain_value = None
        domain_field = mapping.vendor_field(credential_type, DOMAIN_FIELD)
        if domain_field:
            domain_value = record.get(field_slug(domain_field)) or None

        for key, canonical, vendor_field in mapping.entries_for(credential_type):
            slug = field_slug(vendor_field)
            if slug not in record:
                logger.debug(f"Secret {secret_id}: no field '{slug}' for {key}")
                continue

            value = record[slug]

            # An empty domain field leaves the bare username
            if VAL_USER in canonical and domain_value:
                value = f"{domain_value}\\{value}"
            elif DISPLAY_PLACEHOLDER in value.lower():
                # File fields need to be retrieved directly
                try:
                    value = self.client.run(
                        ["secret", "-s", str(secret_id), "-f", slug], check=True
                    )
                except ExecutionError as e:
                    logger.error(f"Secret {secret_id}: could not fetch file field '{slug}': {e}")
                    continue

            result[key] = value

        logger.debug(f"Secret {secret_id}: mapped {sorted(result)}")
        return result
