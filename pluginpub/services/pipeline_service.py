"""
The `publish` workflow end to end.

    source repo checks -> token -> user -> fork -> sparse clone -> branch
    -> history -> replay -> push -> pull request

Every step runs to completion before the next begins. Any failure
propagates; commits already replayed stay in the local clone.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .. import render
from ..config import load_config
from ..domain.github import GitHubFork, GitHubUser, PullRequestRef
from ..domain.plugin import PluginManifest
from ..domain.replay import ReplaySummary
from ..exit_codes import CommandError
from ..infra.git_client import GitClient
from ..infra.github_client import GitHubClient
from ..polling import CancelToken, Sleeper
from .auth_service import AuthSessionManager
from .history_service import CommitHistoryReader
from .publish_service import RemotePublisher
from .replay_service import ReplayOrchestrator
from .sparse_checkout_service import SparseCheckoutManager

logger = logging.getLogger(__name__)


@dataclass
class PublishResult:
    """Everything a publish produced."""
    manifest: PluginManifest
    user: GitHubUser
    fork: GitHubFork
    branch: str
    replay: ReplaySummary
    pull_request: PullRequestRef

    def to_dict(self) -> Dict[str, Any]:
        return {
            'plugin': self.manifest.name,
            'user': self.user.login,
            'fork': self.fork.full_name,
            'branch': self.branch,
            'replay': self.replay.to_dict(),
            'pull_request': self.pull_request.to_dict(),
        }


def pull_request_title(manifest: PluginManifest) -> str:
    return f"Publish plugin: {manifest.plugin_name} v{manifest.version}"


def pull_request_body(manifest: PluginManifest, summary: ReplaySummary) -> str:
    lines = [f"## {manifest.plugin_name}", ""]
    if manifest.description:
        lines += [manifest.description, ""]
    lines += [
        f"- Name: `{manifest.name}`",
        f"- Version: {manifest.version}",
    ]
    if manifest.author:
        lines.append(f"- Author: {manifest.author}")
    lines.append(f"- Commits replayed: {summary.committed}")
    return "\n".join(lines)


class PublishPipeline:
    """
    Publishes the plugin in a local repository to the central repository.

    Example:
        pipeline = PublishPipeline()
        result = pipeline.run("/path/to/my-plugin")
        print(result.pull_request.html_url)
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        git: Optional[GitClient] = None,
        auth: Optional[AuthSessionManager] = None,
        github_factory: Optional[Callable[[str], GitHubClient]] = None,
        sleep: Optional[Sleeper] = None,
        cancel: Optional[CancelToken] = None
    ):
        self.config = config or load_config()
        self.git = git or GitClient()
        self.auth = auth or AuthSessionManager(self.config, sleep=sleep, cancel=cancel)
        self.github_factory = github_factory or (
            lambda token: GitHubClient.from_config(token, self.config)
        )
        self.sleep = sleep
        self.cancel = cancel

    @property
    def work_dir(self) -> Path:
        return Path(self.config['paths']['work_dir']).expanduser()

    def check_source(self, source_repo) -> PluginManifest:
        """Validate the source repository and read its manifest."""
        source = Path(source_repo)
        if not self.git.is_git_repo(source):
            raise CommandError(f"{source} is not a git repository; run `git init` and commit first")
        if not self.git.has_commits(source):
            raise CommandError(f"{source} has no commits; commit your plugin first")
        if self.git.has_uncommitted_changes(source):
            render.warning("Uncommitted changes are not published, only committed history is")
        return PluginManifest.load(source)

    def run(self, source_repo) -> PublishResult:
        source = Path(source_repo).expanduser().resolve()
        manifest = self.check_source(source)
        github_config = self.config.get('github', {})
        base_branch = github_config.get('base_branch', 'main')

        token = self.auth.ensure_token()
        github = self.github_factory(token.access_token)
        user = self.auth.user or github.get_current_user()
        render.info(f"Publishing {manifest.plugin_name} as {user.login}")

        publisher = RemotePublisher(
            github,
            self.work_dir,
            username=user.login,
            git=self.git,
            base_branch=base_branch,
            fork_poll_attempts=github_config.get('fork_poll_attempts', 10),
            fork_poll_delay=github_config.get('fork_poll_delay', 2),
            sleep=self.sleep,
            cancel=self.cancel,
        )
        fork = publisher.ensure_fork()

        checkout = SparseCheckoutManager(self.work_dir, git=self.git, base_branch=base_branch)
        render.info("Preparing local clone of your fork...")
        checkout.ensure_clone(fork.clone_url, user.login, token.access_token)
        branch = checkout.ensure_branch(manifest.name)

        commits = CommitHistoryReader(self.git).read_history(source)
        render.info(f"Replaying {len(commits)} commits...")
        orchestrator = ReplayOrchestrator(
            self.work_dir,
            git=self.git,
            progress=render.render_replay_progress,
        )
        summary = orchestrator.replay(commits, manifest.name, source)

        pr = publisher.publish(
            manifest.name,
            title=pull_request_title(manifest),
            body=pull_request_body(manifest, summary),
        )

        return PublishResult(
            manifest=manifest,
            user=user,
            fork=fork,
            branch=branch,
            replay=summary,
            pull_request=pr,
        )
