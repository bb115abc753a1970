"""
Remote publishing for pluginpub.

Force-pushes a replay branch to the user's fork and makes sure exactly one
open pull request exists for it on the central repository.
"""

import logging
from pathlib import Path
from typing import Optional

from .. import render
from ..domain.github import GitHubFork, PullRequestRef
from ..domain.plugin import branch_name
from ..exit_codes import ForkTimeoutError
from ..infra.git_client import GitClient
from ..infra.github_client import GitHubClient
from ..polling import CancelToken, Sleeper, pause

logger = logging.getLogger(__name__)

DEFAULT_FORK_POLL_ATTEMPTS = 10
DEFAULT_FORK_POLL_DELAY = 2


class RemotePublisher:
    """
    Pushes replay branches and reconciles their pull requests.

    Example:
        publisher = RemotePublisher(github, work_dir, username="octocat")
        pr = publisher.publish("clipboard", title="Add clipboard", body="...")
        print(pr.html_url)
    """

    def __init__(
        self,
        github: GitHubClient,
        work_dir,
        username: str,
        git: Optional[GitClient] = None,
        base_branch: str = "main",
        fork_poll_attempts: int = DEFAULT_FORK_POLL_ATTEMPTS,
        fork_poll_delay: float = DEFAULT_FORK_POLL_DELAY,
        sleep: Optional[Sleeper] = None,
        cancel: Optional[CancelToken] = None
    ):
        """
        Initialize RemotePublisher.

        Args:
            github: API client authenticated as username
            work_dir: Root of the sparse clone whose origin is the fork
            username: Login of the fork owner
            git: GitClient instance (creates new if None)
            base_branch: Branch pull requests target
            fork_poll_attempts: Probes before giving up on a new fork
            fork_poll_delay: Seconds to wait before each probe
            sleep: Replacement for time.sleep between probes
            cancel: Token checked between probes
        """
        self.github = github
        self.work_dir = Path(work_dir).expanduser()
        self.username = username
        self.git = git or GitClient()
        self.base_branch = base_branch
        self.fork_poll_attempts = fork_poll_attempts
        self.fork_poll_delay = fork_poll_delay
        self.sleep = sleep
        self.cancel = cancel

    def push(self, plugin_name: str) -> str:
        """Force-push the replay branch; republishing rewrites its tip."""
        branch = branch_name(plugin_name)
        render.info(f"Pushing {branch} to your fork...")
        self.git.push(self.work_dir, remote="origin", branch=branch, force=True)
        render.success("Push complete")
        return branch

    def ensure_fork(self) -> GitHubFork:
        """The user's fork, created (and waited for) if missing."""
        fork = self.github.get_fork(self.username)
        if fork:
            logger.debug(f"Found fork {fork.full_name}")
            return fork

        render.info(f"No fork of {self.github.central_full_name} yet, creating one...")
        self.github.create_fork()
        return self.wait_for_fork()

    def wait_for_fork(self, max_attempts: Optional[int] = None) -> GitHubFork:
        """
        Poll until the fork is visible.

        Fork creation completes asynchronously on GitHub's side; a missing
        fork on an intermediate probe is expected.

        Raises:
            ForkTimeoutError: Still missing after max_attempts probes
        """
        attempts = max_attempts if max_attempts is not None else self.fork_poll_attempts

        for attempt in range(1, attempts + 1):
            pause(self.fork_poll_delay, sleep=self.sleep, cancel=self.cancel)

            fork = self.github.get_fork(self.username)
            if fork:
                render.success(f"Fork ready: {fork.full_name}")
                return fork

            logger.info(f"Waiting for fork... ({attempt}/{attempts})")

        raise ForkTimeoutError(
            f"Fork of {self.github.central_full_name} did not appear after "
            f"{attempts} attempts, please retry later",
            attempts=attempts,
        )

    def head_ref(self, plugin_name: str) -> str:
        return f"{self.username}:{branch_name(plugin_name)}"

    def reconcile_pull_request(self, plugin_name: str, title: str, body: str) -> PullRequestRef:
        """
        Reuse the open pull request for the branch, or open one.

        At most one open pull request exists per head ref, so its URL stays
        stable across republishes.
        """
        head = self.head_ref(plugin_name)

        existing = self.github.find_open_pull_request(head)
        if existing:
            render.warning("Pull request already open; its commits were updated by the push")
            return existing

        render.info("Creating pull request...")
        pr = self.github.create_pull_request(head, title, body, base=self.base_branch)
        render.success("Pull request created")
        return pr

    def publish(self, plugin_name: str, title: str, body: str = "") -> PullRequestRef:
        """Push the replay branch, make sure the fork exists, reconcile the PR."""
        self.push(plugin_name)
        self.ensure_fork()
        return self.reconcile_pull_request(plugin_name, title, body)
