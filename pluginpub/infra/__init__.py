"""
Infrastructure layer for pluginpub.

Contains abstractions for external systems:
- GitClient: Git command execution
- GitHubClient: GitHub REST API access
- DeviceFlowClient: OAuth device authorization endpoints
- ConfigStore: Persisted CLI state (access token)

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient
from .github_client import GitHubClient
from .oauth_client import DeviceFlowClient
from .config_store import ConfigStore

__all__ = [
    'GitClient',
    'GitHubClient',
    'DeviceFlowClient',
    'ConfigStore',
]
