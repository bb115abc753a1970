"""
Commit history reading for pluginpub.

An empty history is a valid outcome (nothing to replay), so VCS failures
are logged and turned into an empty list rather than raised.
"""

import logging
from typing import List, Optional

from ..domain.commit import CommitDescriptor
from ..exit_codes import VCSCommandError
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "<<<COMMIT_SEP>>>"
RECORD_TERMINATOR = "<<<COMMIT_END>>>"
FIELD_COUNT = 4

LOG_FORMAT = FIELD_SEPARATOR.join(["%H", "%an <%ae>", "%aI", "%B"]) + RECORD_TERMINATOR


def parse_log_output(output: str) -> List[CommitDescriptor]:
    """
    Parse `git log` output produced with LOG_FORMAT.

    Records that do not split into exactly four fields are dropped.
    """
    commits = []
    for record in output.split(RECORD_TERMINATOR):
        if not record.strip():
            continue

        parts = record.split(FIELD_SEPARATOR)
        if len(parts) != FIELD_COUNT:
            logger.debug(f"Dropping malformed log record: {record[:80]!r}")
            continue

        commit_hash, author, date, message = parts
        commit_hash = commit_hash.strip()
        if not commit_hash:
            continue

        commits.append(CommitDescriptor(
            hash=commit_hash,
            author=author.strip(),
            date=date.strip(),
            message=message.strip(),
        ))

    return commits


class CommitHistoryReader:
    """
    Reads a repository's history, oldest commit first.

    Example:
        reader = CommitHistoryReader()
        for commit in reader.read_history("/path/to/plugin"):
            print(commit.hash, commit.subject)
    """

    def __init__(self, git: Optional[GitClient] = None):
        self.git = git or GitClient()

    def read_history(self, repo_path) -> List[CommitDescriptor]:
        """
        Ordered commit descriptors of repo_path's current branch.

        Returns:
            List oldest to newest; empty if the path is not a repository,
            has no commits, or git fails
        """
        try:
            output = self.git.log(repo_path, LOG_FORMAT, reverse=True)
        except (VCSCommandError, OSError) as e:
            logger.warning(f"Could not read commit history of {repo_path}: {e}")
            return []

        return parse_log_output(output)
