"""
pluginpub - Publish a plugin's commit history to a shared plugins repository.

Replays every commit of a local plugin repository into plugins/<name>/ on
branch plugin/<name> of the user's fork, keeping each commit's author and
date, force-pushes the branch and opens (or reuses) a pull request.

Quick Start:
    from pluginpub import PublishPipeline

    result = PublishPipeline().run("~/code/my-plugin")
    print(result.pull_request.html_url)

Building blocks:
    from pluginpub import CommitHistoryReader, ReplayOrchestrator

    commits = CommitHistoryReader().read_history("~/code/my-plugin")
    summary = ReplayOrchestrator(work_dir).replay(commits, "my-plugin", "~/code/my-plugin")

Domain Objects:
    CommitDescriptor - One source commit (hash, author, date, message)
    AccessToken - Persisted OAuth token
    PluginManifest - plugin.json of the source repository
    ReplaySummary - What happened to each replayed commit
"""

__version__ = "0.3.0"

from .domain import (
    CommitDescriptor,
    AccessToken,
    PluginManifest,
    PullRequestRef,
    ReplaySummary,
)

from .services import (
    AuthSessionManager,
    CommitHistoryReader,
    SnapshotExporter,
    SparseCheckoutManager,
    ReplayOrchestrator,
    RemotePublisher,
    PublishPipeline,
)

from .exit_codes import (
    CommandError,
    AuthError,
    RemoteAPIError,
    VCSCommandError,
    ReplayError,
    ForkTimeoutError,
)

from .config import load_config

__all__ = [
    "__version__",
    # Domain objects
    "CommitDescriptor",
    "AccessToken",
    "PluginManifest",
    "PullRequestRef",
    "ReplaySummary",
    # Services
    "AuthSessionManager",
    "CommitHistoryReader",
    "SnapshotExporter",
    "SparseCheckoutManager",
    "ReplayOrchestrator",
    "RemotePublisher",
    "PublishPipeline",
    # Errors
    "CommandError",
    "AuthError",
    "RemoteAPIError",
    "VCSCommandError",
    "ReplayError",
    "ForkTimeoutError",
    # Configuration
    "load_config",
]
