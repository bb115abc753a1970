"""
Standard exit codes and error taxonomy for pluginpub commands.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
API_ERROR = 65           # GitHub API call failed
CONFIG_ERROR = 66        # Configuration or manifest error
NETWORK_ERROR = 68       # Network connection failed or timed out
AUTH_ERROR = 69          # Authentication/authorization failed
VCS_ERROR = 72           # A git command exited non-zero
REPLAY_ERROR = 73        # Replaying a commit failed
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for exceptions that are not CommandErrors
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'ConnectionError': NETWORK_ERROR,
    'TimeoutError': NETWORK_ERROR,
    'ValueError': GENERAL_ERROR,
    'JSONDecodeError': CONFIG_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, CommandError):
        return exc.exit_code
    return EXCEPTION_EXIT_CODES.get(exc.__class__.__name__, GENERAL_ERROR)


class CommandError(Exception):
    """
    Base of every error pluginpub raises on purpose.

    Carries the exit code the CLI terminates with.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class AuthError(CommandError):
    """Device flow failed, or a token could not be validated."""
    def __init__(self, message: str):
        super().__init__(message, AUTH_ERROR)


class RemoteAPIError(CommandError):
    """Raised when a GitHub API call returns a non-2xx response or fails in transit."""
    def __init__(self, message: str, status: Optional[int] = None,
                 server_message: Optional[str] = None):
        super().__init__(message, API_ERROR)
        self.status = status
        self.server_message = server_message

    @property
    def not_found(self) -> bool:
        return self.status == 404


class VCSCommandError(CommandError):
    """Raised when a git subprocess exits non-zero."""
    def __init__(self, command: str, returncode: int, output: str = "",
                 message: Optional[str] = None):
        text = message or f"Git command failed ({returncode}): {command}"
        if output:
            text = f"{text}\n{output}"
        super().__init__(text, VCS_ERROR)
        self.command = command
        self.returncode = returncode
        self.output = output


class SnapshotError(VCSCommandError):
    """Exporting a commit snapshot into a directory failed."""


class ReplayError(CommandError):
    """Wraps the failure of one replayed commit with its context."""
    def __init__(self, commit, cause: VCSCommandError):
        message = (
            f"Failed to replay commit {commit.short_hash} ({commit.subject}): "
            f"{cause}"
        )
        super().__init__(message, REPLAY_ERROR)
        self.commit = commit
        self.cause = cause


class ForkTimeoutError(CommandError, TimeoutError):
    """The fork never became visible within the allowed attempts."""
    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message, NETWORK_ERROR)
        self.attempts = attempts


class ManifestError(CommandError):
    """plugin.json is missing or unusable."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class OperationCancelled(CommandError):
    """A poll loop was cancelled between iterations."""
    def __init__(self, message: str = "Operation cancelled"):
        super().__init__(message, INTERRUPTED)
