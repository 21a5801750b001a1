"""
TSS SDK client - runs the Secret Server command line client.

Path: tssresolver/sdk/client.py

The tss executable is treated as an opaque tool: arguments go in, stdout
comes out. No output parsing happens here.

Every invocation is bounded by a timeout; on expiry the child process is
killed and ExecutionError is raised.
"""

import locale
import logging
import subprocess
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from tssresolver.errors import ExecutionError


# Module logger - configure at application level
logger = logging.getLogger(__name__)

# Arguments whose following value must never reach the logs
_SENSITIVE_FLAGS = {"-k", "--key"}


class ExecutionErrorCategory(Enum):
    """Categorized launch/wait failures for better diagnostics."""
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    TIMEOUT = "timeout"
    INTERRUPTED = "interrupted"
    NON_ZERO_EXIT = "non_zero_exit"
    DECODE_FAILURE = "decode_failure"
    LAUNCH_FAILURE = "launch_failure"


def categorize_execution_error(exception: Exception) -> ExecutionErrorCategory:
    """
    Categorize a subprocess exception for better error reporting.

    Args:
        exception: The caught exception.

    Returns:
        ExecutionErrorCategory indicating the type of failure.
    """
    if isinstance(exception, subprocess.TimeoutExpired):
        return ExecutionErrorCategory.TIMEOUT

    if isinstance(exception, subprocess.CalledProcessError):
        return ExecutionErrorCategory.NON_ZERO_EXIT

    if isinstance(exception, UnicodeDecodeError):
        return ExecutionErrorCategory.DECODE_FAILURE

    if isinstance(exception, (FileNotFoundError, NotADirectoryError)):
        return ExecutionErrorCategory.NOT_FOUND

    if isinstance(exception, PermissionError):
        return ExecutionErrorCategory.PERMISSION_DENIED

    if isinstance(exception, InterruptedError):
        return ExecutionErrorCategory.INTERRUPTED

    return ExecutionErrorCategory.LAUNCH_FAILURE


def redact_args(args: Sequence[str]) -> List[str]:
    """Copy of args with the values of sensitive flags masked."""
    redacted = []
    mask_next = False
    for arg in args:
        if mask_next:
            redacted.append("****")
            mask_next = False
            continue
        redacted.append(arg)
        if arg in _SENSITIVE_FLAGS:
            mask_next = True
    return redacted


class VaultClient(ABC):
    """
    Abstract command runner for the vault's SDK client.

    Implementations take tss arguments and return the text the client
    printed. Tests substitute a fake without spawning processes.
    """

    @abstractmethod
    def run(self, args: Sequence[str], check: bool = False) -> str:
        """
        Run one SDK command.

        Args:
            args: Command arguments, e.g. ["secret", "-s", "42", "-ad"].
            check: Raise ExecutionError if the client exits non-zero.

        Returns:
            Captured standard output.

        Raises:
            ExecutionError: If the client could not be run.
        """


class TssCliClient(VaultClient):
    """
    Runs the tss executable from the SDK installation folder.

    Usage:
        client = TssCliClient(Path("/opt/tss"), executable="tss", timeout=60)
        raw = client.run(["secret", "-s", "42", "-ad"])
    """

    def __init__(
        self,
        install_dir: Path,
        executable: str = "tss",
        timeout: Optional[float] = 60,
        encoding: Optional[str] = None,
    ):
        """
        Initialize client.

        Args:
            install_dir: Folder containing the executable; also the working
                         directory of every invocation.
            executable: File name of the client inside install_dir.
            timeout: Seconds before the process is killed. None disables it.
            encoding: Output encoding. None uses the locale's preferred encoding.
        """
        self.install_dir = Path(install_dir)
        self.executable = executable
        self.timeout = timeout
        self.encoding = encoding or locale.getpreferredencoding(False)

    @property
    def executable_path(self) -> Path:
        return self.install_dir / self.executable

    def run(self, args: Sequence[str], check: bool = False) -> str:
        command = [str(self.executable_path), *[str(a) for a in args]]
        shown = " ".join(redact_args(command))
        logger.debug(f"Running: {shown}")

        try:
            completed = subprocess.run(
                command,
                cwd=str(self.install_dir),
                stdin=subprocess.DEVNULL,
                capture_output=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as e:
            category = categorize_execution_error(e)
            if category == ExecutionErrorCategory.TIMEOUT:
                message = f"Command timed out after {self.timeout}s: {shown}"
            else:
                message = f"Error running command {shown}: {e}"
            logger.error(message)
            raise ExecutionError(message, category=category, command=redact_args(command)) from e

        try:
            stdout = (completed.stdout or b"").decode(self.encoding)
        except UnicodeDecodeError as e:
            message = f"Output of {shown} is not valid {self.encoding}: {e}"
            logger.error(message)
            raise ExecutionError(
                message,
                category=categorize_execution_error(e),
                command=redact_args(command),
                returncode=completed.returncode,
            ) from e

        # Same newline translation as text mode
        stdout = stdout.replace("\r\n", "\n").replace("\r", "\n")

        if completed.returncode != 0:
            stderr = (completed.stderr or b"").decode(self.encoding, errors="replace").strip()
            logger.warning(
                f"Command exited with code {completed.returncode}: {shown}"
                + (f" [stderr: {stderr}]" if stderr else "")
            )
            if check:
                raise ExecutionError(
                    f"Command exited with code {completed.returncode}: {shown}",
                    category=ExecutionErrorCategory.NON_ZERO_EXIT,
                    command=redact_args(command),
                    returncode=completed.returncode,
                    output=stdout,
                )

        logger.debug(f"Command finished ({len(stdout)} chars of output)")
        return stdout


def configure_logging(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
):
    """
    Configure logging for the resolver package.

    Attaches one handler to the "tssresolver" package logger, so every
    module logger in the package reports through it. Call once per handler:
    the CLI calls it for the console and again when resolver.yaml names a
    log file.

    Args:
        level: Logging level (default: INFO).
        format_string: Optional custom format string.
        handler: Optional custom handler (default: StreamHandler).

    Example:
        from tssresolver.sdk.client import configure_logging
        configure_logging(level=logging.DEBUG)
    """
    if format_string is None:
        format_string = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    if handler is None:
        handler = logging.StreamHandler()

    package_logger = logging.getLogger("tssresolver")
    handler.setFormatter(logging.Formatter(format_string))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
