"""
Commit replay engine for pluginpub.

Reproduces a plugin's source history inside the plugin's subtree of the
sparse clone, one commit at a time and strictly oldest first:

1. clear plugins/<name>/
2. export the commit's snapshot into it
3. stage the subtree (deletions included)
4. skip if nothing changed against the last commit
5. commit with the original author and author date
"""

import logging
import shutil
from pathlib import Path
from typing import Callable, Optional, Sequence

from ..domain.commit import CommitDescriptor
from ..domain.plugin import plugin_subdir
from ..domain.replay import ReplayStatus, ReplayStep, ReplaySummary
from ..exit_codes import ReplayError, VCSCommandError
from ..infra.git_client import GitClient
from .snapshot_service import SnapshotExporter

logger = logging.getLogger(__name__)

# Some git versions report an empty commit as a failure instead of a no-op.
# Matching the text is a compatibility fallback; has_staged_changes() decides first.
NOTHING_TO_COMMIT_MARKERS = (
    'nothing to commit',
    'no changes added to commit',
    'nothing added to commit',
)

ProgressCallback = Callable[[int, int, CommitDescriptor], None]


def is_nothing_to_commit(error: VCSCommandError) -> bool:
    text = f"{error.output}\n{error}".lower()
    return any(marker in text for marker in NOTHING_TO_COMMIT_MARKERS)


def clear_directory(path: Path) -> None:
    """Remove every entry inside path, keeping path itself."""
    if not path.is_dir():
        return
    for entry in path.iterdir():
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()


class ReplayOrchestrator:
    """
    Drives the per-commit replay loop against a sparse clone.

    Example:
        orchestrator = ReplayOrchestrator(work_dir)
        summary = orchestrator.replay(commits, "clipboard", "/path/to/plugin")
        print(f"{summary.committed} commits replayed")
    """

    def __init__(
        self,
        work_dir,
        git: Optional[GitClient] = None,
        exporter: Optional[SnapshotExporter] = None,
        progress: Optional[ProgressCallback] = None
    ):
        """
        Initialize ReplayOrchestrator.

        Args:
            work_dir: Root of the sparse clone (branch already checked out)
            git: GitClient instance (creates new if None)
            exporter: SnapshotExporter instance (shares git if None)
            progress: Called with (index, total, commit) before each commit
        """
        self.work_dir = Path(work_dir).expanduser()
        self.git = git or GitClient()
        self.exporter = exporter or SnapshotExporter(self.git)
        self.progress = progress

    def replay(
        self,
        commits: Sequence[CommitDescriptor],
        plugin_name: str,
        source_repo
    ) -> ReplaySummary:
        """
        Replay commits onto the current branch of the clone.

        Commits made before a failure stay committed; nothing is rolled back.

        Raises:
            ReplayError: A git step failed for a reason other than
                "nothing to commit"
        """
        subdir = plugin_subdir(plugin_name)
        plugin_dir = self.work_dir / subdir
        summary = ReplaySummary(plugin_name=plugin_name)
        total = len(commits)

        logger.info(f"Replaying {total} commits into {subdir}")

        for index, commit in enumerate(commits, 1):
            if self.progress:
                self.progress(index, total, commit)

            try:
                clear_directory(plugin_dir)
                self.exporter.export_snapshot(commit.hash, plugin_dir, source_repo)
                self.git.add(self.work_dir, subdir)

                if not self.git.has_staged_changes(self.work_dir):
                    logger.info(f"Skipping {commit.short_hash}: no changes in {subdir}")
                    summary.add_step(ReplayStep(commit, ReplayStatus.SKIPPED, "no changes"))
                    continue

                self.git.commit(self.work_dir, commit.message, commit.author, commit.date)

            except VCSCommandError as e:
                if is_nothing_to_commit(e):
                    logger.info(f"Skipping {commit.short_hash}: nothing to commit")
                    summary.add_step(ReplayStep(commit, ReplayStatus.SKIPPED, "nothing to commit"))
                    continue
                raise ReplayError(commit, e) from e

            summary.add_step(ReplayStep(commit, ReplayStatus.COMMITTED))

        logger.info(
            f"Replay finished: {summary.committed} committed, {summary.skipped} skipped"
        )
        return summary
