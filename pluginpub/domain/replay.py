"""
Replay result domain objects for pluginpub.

Records what happened to each source commit during a replay so the
CLI can report it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .commit import CommitDescriptor


class ReplayStatus(Enum):
    """Outcome of replaying one commit."""
    COMMITTED = "committed"
    SKIPPED = "skipped"


@dataclass
class ReplayStep:
    """What happened to a single source commit."""
    commit: CommitDescriptor
    status: ReplayStatus
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'hash': self.commit.hash,
            'subject': self.commit.subject,
            'status': self.status.value,
        }
        if self.reason:
            result['reason'] = self.reason
        return result


@dataclass
class ReplaySummary:
    """
    Summary of a replay of one plugin's history.

    Commits already made stay committed locally even when a later
    commit aborts the replay.
    """
    plugin_name: str
    total: int = 0
    committed: int = 0
    skipped: int = 0
    steps: List[ReplayStep] = field(default_factory=list)

    def add_step(self, step: ReplayStep) -> None:
        """Record a step and update counts."""
        self.steps.append(step)
        self.total += 1

        if step.status == ReplayStatus.COMMITTED:
            self.committed += 1
        elif step.status == ReplayStatus.SKIPPED:
            self.skipped += 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'plugin': self.plugin_name,
            'total': self.total,
            'committed': self.committed,
            'skipped': self.skipped,
        }
