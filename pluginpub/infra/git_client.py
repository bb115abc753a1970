"""
Git client infrastructure for pluginpub.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling (non-zero exit -> VCSCommandError)
- Isolated from business logic

Commands run through the shell, so every interpolated value is wrapped
in double quotes by `quote()`.
"""

import subprocess
from pathlib import Path
from typing import Iterable, List, Optional, Tuple
import logging

from ..exit_codes import VCSCommandError

logger = logging.getLogger(__name__)

REDACTED = "***"


def escape_double_quoted(value: str) -> str:
    """
    Escape text for use inside a double-quoted shell word.

    Backslash goes first so the escapes added for the other characters
    are not themselves doubled.
    """
    return (
        value
        .replace('\\', '\\\\')
        .replace('"', '\\"')
        .replace('`', '\\`')
        .replace('$', '\\$')
    )


def quote(value) -> str:
    """Wrap a value in double quotes with shell-special characters escaped."""
    return f'"{escape_double_quoted(str(value))}"'


class GitClient:
    """
    Abstraction over git commands.

    Example:
        client = GitClient()
        if client.is_git_repo("/path/to/repo"):
            output = client.log("/path/to/repo", "%H")
    """

    def __init__(self, timeout: int = 300, secrets: Optional[Iterable[str]] = None):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds (default: 300, clones can be slow)
            secrets: Strings to mask in logged commands and error text
        """
        self.timeout = timeout
        self._secrets: List[str] = [s for s in (secrets or []) if s]

    def add_secret(self, secret: str) -> None:
        """Mask `secret` in every command and output reported from now on."""
        if secret and secret not in self._secrets:
            self._secrets.append(secret)

    def redact(self, text: str) -> str:
        for secret in self._secrets:
            text = text.replace(secret, REDACTED)
        return text

    def _run(
        self,
        cmd: str,
        cwd: str,
        check: bool = True
    ) -> Tuple[str, int]:
        """
        Run a git command.

        Args:
            cmd: Command to run
            cwd: Working directory
            check: Raise VCSCommandError on non-zero exit

        Returns:
            Tuple of (stdout, returncode)
        """
        logger.debug(f"git: {self.redact(cmd)} (in {cwd})")
        try:
            result = subprocess.run(
                cmd,
                shell=True,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            raise VCSCommandError(
                self.redact(cmd), -1,
                message=f"Git command timed out after {self.timeout}s: {self.redact(cmd)}"
            )

        if check and result.returncode != 0:
            details = (result.stderr or result.stdout or "").strip()
            raise VCSCommandError(self.redact(cmd), result.returncode, self.redact(details))

        return (result.stdout or "").strip(), result.returncode

    def is_git_repo(self, path) -> bool:
        """Check if path is inside a git work tree."""
        if not Path(path).is_dir():
            return False
        _, code = self._run("git rev-parse --git-dir", cwd=str(path), check=False)
        return code == 0

    def has_commits(self, path) -> bool:
        """Check if the repository has at least one commit."""
        _, code = self._run("git rev-parse --verify --quiet HEAD", cwd=str(path), check=False)
        return code == 0

    def has_uncommitted_changes(self, path) -> bool:
        """Check if repo has uncommitted changes."""
        output, code = self._run("git status --porcelain", cwd=str(path), check=False)
        return code == 0 and bool(output)

    def log(self, path, fmt: str, reverse: bool = True) -> str:
        """
        Raw `git log` output with a custom format.

        Args:
            path: Path to git repository
            fmt: Value for --format (placeholders like %H, %aI)
            reverse: Oldest commit first

        Returns:
            Unparsed output
        """
        cmd = "git log"
        if reverse:
            cmd += " --reverse"
        cmd += f" --format={quote(fmt)}"
        output, _ = self._run(cmd, cwd=str(path))
        return output

    def archive(self, path, commit: str, output_file) -> None:
        """Write the tracked tree of `commit` to a tar file."""
        self._run(
            f"git archive --format=tar -o {quote(output_file)} {quote(commit)}",
            cwd=str(path)
        )

    def add(self, path, pathspec: str, force: bool = True) -> None:
        """
        Stage additions, modifications and deletions under pathspec.

        With force, files matched by a .gitignore are staged too; exported
        snapshots contain only tracked content, so nothing there is junk.
        """
        flags = "-A -f" if force else "-A"
        self._run(f"git add {flags} -- {quote(pathspec)}", cwd=str(path))

    def init(self, path, initial_branch: Optional[str] = None) -> None:
        cmd = "git init"
        if initial_branch:
            cmd += f" -b {quote(initial_branch)}"
        self._run(cmd, cwd=str(path))

    def has_staged_changes(self, path) -> bool:
        """
        Check whether the index differs from HEAD.

        `git diff --cached --quiet` exits 1 when there are differences
        and 0 when there are none; anything else is an error.
        """
        cmd = "git diff --cached --quiet"
        _, code = self._run(cmd, cwd=str(path), check=False)
        if code == 0:
            return False
        if code == 1:
            return True
        raise VCSCommandError(cmd, code)

    def commit(self, path, message: str, author: str, date: str) -> None:
        """Commit the index with an explicit author identity and author date."""
        cmd = (
            f"git commit --allow-empty-message"
            f" --author={quote(author)} --date={quote(date)} -m {quote(message)}"
        )
        self._run(cmd, cwd=str(path))

    def clone(
        self,
        url: str,
        dest,
        cwd,
        no_checkout: bool = False,
        filter_spec: Optional[str] = None
    ) -> None:
        """Clone `url` into `dest`."""
        cmd = "git clone"
        if no_checkout:
            cmd += " --no-checkout"
        if filter_spec:
            cmd += f" --filter={filter_spec}"
        cmd += f" {quote(url)} {quote(dest)}"
        self._run(cmd, cwd=str(cwd))

    def sparse_checkout_init(self, path, cone: bool = True) -> None:
        mode = "--cone" if cone else "--no-cone"
        self._run(f"git sparse-checkout init {mode}", cwd=str(path))

    def sparse_checkout_set(self, path, patterns: Iterable[str] = (), cone: bool = False) -> None:
        """Replace the sparse-checkout pattern list (may be empty)."""
        cmd = "git sparse-checkout set " + ("--cone" if cone else "--no-cone")
        for pattern in patterns:
            cmd += f" {quote(pattern)}"
        self._run(cmd, cwd=str(path))

    def sparse_checkout_add(self, path, *patterns: str) -> None:
        cmd = "git sparse-checkout add " + " ".join(quote(p) for p in patterns)
        self._run(cmd, cwd=str(path))

    def branch_exists(self, path, branch: str) -> bool:
        """Check for a local branch; a missing branch is not an error."""
        _, code = self._run(
            f"git rev-parse --verify --quiet {quote('refs/heads/' + branch)}",
            cwd=str(path),
            check=False
        )
        return code == 0

    def checkout(self, path, branch: str, create: bool = False) -> None:
        flag = " -b" if create else ""
        self._run(f"git checkout{flag} {quote(branch)}", cwd=str(path))

    def push(self, path, remote: str = "origin", branch: Optional[str] = None,
             force: bool = False) -> None:
        """Push a branch to a remote."""
        cmd = "git push"
        if force:
            cmd += " -f"
        cmd += f" {quote(remote)}"
        if branch:
            cmd += f" {quote(branch)}"
        self._run(cmd, cwd=str(path))
