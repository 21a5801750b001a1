"""
Shared test fixtures.

FakeVaultClient stands in for the tss executable: responses are looked up
by the joined argument string and every call is recorded.
"""

import pytest

from tssresolver.errors import ExecutionError
from tssresolver.sdk.client import ExecutionErrorCategory, VaultClient


class FakeVaultClient(VaultClient):
    """Scripted VaultClient."""

    def __init__(self, responses=None, failures=None, marker_path=None):
        self.responses = dict(responses or {})
        self.failures = set(failures or ())
        self.marker_path = marker_path
        self.calls = []

    def run(self, args, check=False):
        command = " ".join(args)
        self.calls.append(command)
        if command in self.failures:
            raise ExecutionError(
                f"Error running command {command}",
                category=ExecutionErrorCategory.NON_ZERO_EXIT,
                command=args,
            )
        if args[0] == "init" and self.marker_path is not None:
            # The real client writes its credentials file on registration
            self.marker_path.write_text("registered")
        return self.responses.get(command, "")


@pytest.fixture
def install_dir(tmp_path):
    """SDK folder with the marker present (already initialized)."""
    sdk = tmp_path / "tss"
    sdk.mkdir()
    (sdk / "credentials.config").write_text("registered")
    return sdk


@pytest.fixture
def fresh_install_dir(tmp_path):
    """SDK folder that has never been initialized."""
    sdk = tmp_path / "tss-fresh"
    sdk.mkdir()
    (sdk / "qualifier.properties").write_text(
        "datasource.secretServerUrl=https://ss.example.com/SecretServer\n"
        "datasource.secretServerRule=mid-rule\n"
        "datasource.secretServerKey=onboard-key-123\n"
        "datasource.secretServerCacheStrat=CacheThenServer\n"
        "datasource.secretServerCacheAge=10\n"
    )
    return sdk


@pytest.fixture
def write_mapping():
    """Write secretmap.properties into an SDK folder."""
    def _write(sdk_dir, text):
        path = sdk_dir / "secretmap.properties"
        path.write_text(text)
        return path
    return _write

