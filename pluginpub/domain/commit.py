"""
Commit domain object for pluginpub.

A CommitDescriptor is one entry of the source repository's history as read
by CommitHistoryReader. Sequences of descriptors are ordered oldest first.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class CommitDescriptor:
    """One source commit to replay."""
    hash: str
    author: str    # "Name <email>"
    date: str      # Strict ISO-8601 author date, original offset kept
    message: str   # Subject plus body

    @property
    def subject(self) -> str:
        """First line of the message."""
        return self.message.split('\n', 1)[0]

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'hash': self.hash,
            'author': self.author,
            'date': self.date,
            'message': self.message,
        }
