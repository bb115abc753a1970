"""
Service layer for pluginpub.

Contains the publishing logic that orchestrates domain objects and infrastructure:
- AuthSessionManager: Device-flow login and token validation
- CommitHistoryReader: Source history, oldest first
- SnapshotExporter: One commit's tree into a directory
- SparseCheckoutManager: Narrow clone of the fork and replay branches
- ReplayOrchestrator: Per-commit replay loop
- RemotePublisher: Force-push, fork and pull request reconciliation
- PublishPipeline: The whole `publish` command

Services are the primary API for commands to use.
"""

from .auth_service import AuthSessionManager
from .history_service import CommitHistoryReader
from .snapshot_service import SnapshotExporter
from .sparse_checkout_service import SparseCheckoutManager
from .replay_service import ReplayOrchestrator
from .publish_service import RemotePublisher
from .pipeline_service import PublishPipeline, PublishResult

__all__ = [
    'AuthSessionManager',
    'CommitHistoryReader',
    'SnapshotExporter',
    'SparseCheckoutManager',
    'ReplayOrchestrator',
    'RemotePublisher',
    'PublishPipeline',
    'PublishResult',
]
