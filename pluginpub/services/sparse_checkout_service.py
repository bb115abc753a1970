"""
Sparse-checkout clone management for pluginpub.

Keeps one narrow local clone of the user's fork. Only the subtree of the
plugin being published is ever materialized.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional
from urllib.parse import quote as url_quote

from ..domain.plugin import PLUGINS_ROOT, branch_name, sparse_pattern
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)


def authenticated_url(url: str, username: str, token: str) -> str:
    """Embed credentials in an https clone URL. Other URLs are returned unchanged."""
    if not url.startswith('https://') or not token:
        return url
    credentials = f"{url_quote(username, safe='')}:{url_quote(token, safe='')}"
    return url.replace('https://', f'https://{credentials}@', 1)


class SparseCheckoutManager:
    """
    Provisions the sparse clone and the per-plugin replay branch.

    Example:
        manager = SparseCheckoutManager("~/.config/pluginpub/ZTools-plugins")
        manager.ensure_clone(fork.clone_url, "octocat", token)
        manager.ensure_branch("clipboard")
    """

    def __init__(self, work_dir, git: Optional[GitClient] = None, base_branch: str = "main"):
        """
        Initialize SparseCheckoutManager.

        Args:
            work_dir: Where the clone lives; replaced on every ensure_clone
            git: GitClient instance (creates new if None)
            base_branch: Branch new replay branches start from
        """
        self.work_dir = Path(work_dir).expanduser()
        self.git = git or GitClient()
        self.base_branch = base_branch

    def ensure_clone(self, fork_url: str, username: str, token: str) -> Path:
        """
        Recreate the clone from scratch.

        Any existing clone is deleted first. The new clone is blob-filtered
        and checked out with an empty non-cone sparse set, so no plugin
        files exist until ensure_branch adds a pattern.
        """
        parent = self.work_dir.parent
        parent.mkdir(parents=True, exist_ok=True)

        if self.work_dir.exists():
            logger.info(f"Removing previous clone at {self.work_dir}")
            shutil.rmtree(self.work_dir)

        self.git.add_secret(token)
        url = authenticated_url(fork_url, username, token)

        logger.info(f"Cloning {fork_url} into {self.work_dir}")
        self.git.clone(url, self.work_dir, cwd=parent, no_checkout=True, filter_spec="blob:none")

        self.git.sparse_checkout_init(self.work_dir, cone=True)
        self.git.sparse_checkout_set(self.work_dir, [], cone=False)
        self.git.checkout(self.work_dir, self.base_branch)

        return self.work_dir

    def ensure_branch(self, plugin_name: str) -> str:
        """
        Scope the checkout to the plugin and switch to its replay branch.

        The branch is created from the base branch when it does not exist
        locally, and reused otherwise.

        Returns:
            Branch name
        """
        branch = branch_name(plugin_name)

        self.git.sparse_checkout_add(self.work_dir, sparse_pattern(plugin_name))
        (self.work_dir / PLUGINS_ROOT).mkdir(parents=True, exist_ok=True)

        if self.git.branch_exists(self.work_dir, branch):
            logger.info(f"Branch {branch} exists, switching to it")
            self.git.checkout(self.work_dir, branch)
        else:
            logger.info(f"Creating branch {branch} from {self.base_branch}")
            self.git.checkout(self.work_dir, branch, create=True)

        return branch
