"""
Domain layer for pluginpub.

Contains plain domain objects with no I/O beyond reading a manifest:
- CommitDescriptor: One source commit to replay
- AccessToken: Persisted OAuth bearer token
- GitHubUser, GitHubFork, PullRequestRef: Decoded API responses
- PluginManifest: plugin.json of the source repository
- ReplaySummary: Per-commit outcome of a replay
"""

from .commit import CommitDescriptor
from .token import AccessToken
from .github import GitHubUser, GitHubFork, PullRequestRef
from .plugin import PluginManifest, branch_name, plugin_subdir, sparse_pattern
from .replay import ReplayStatus, ReplayStep, ReplaySummary

__all__ = [
    'CommitDescriptor',
    'AccessToken',
    'GitHubUser',
    'GitHubFork',
    'PullRequestRef',
    'PluginManifest',
    'branch_name',
    'plugin_subdir',
    'sparse_pattern',
    'ReplayStatus',
    'ReplayStep',
    'ReplaySummary',
]
