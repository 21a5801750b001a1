"""tss SDK client - command runner and one-time initializer."""

from tssresolver.sdk.client import VaultClient, TssCliClient, ExecutionErrorCategory
from tssresolver.sdk.initializer import SdkInitializer, InitSettings

__all__ = [
    "VaultClient",
    "TssCliClient",
    "ExecutionErrorCategory",
    "SdkInitializer",
    "InitSettings",
]
