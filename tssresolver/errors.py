"""
Exception types for the resolver pipeline.

Only the CredentialResolver facade converts these into an empty result;
every other component raises them to its caller.
"""

from typing import Optional, Sequence


class ResolverError(Exception):
    """Base class for resolver failures."""


class ExecutionError(ResolverError):
    """The tss executable could not be run or did not finish cleanly."""

    def __init__(
        self,
        message: str,
        category=None,
        command: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        output: str = "",
    ):
        super().__init__(message)
        self.category = category
        self.command = list(command) if command else []
        self.returncode = returncode
        self.output = output


class InitializationError(ResolverError):
    """SDK init/cache setup failed or qualifier settings are incomplete."""


class ContractViolation(ResolverError, ValueError):
    """Caller supplied missing or malformed arguments."""
