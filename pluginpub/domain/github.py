"""
GitHub domain objects for pluginpub.

Decoded from REST API responses at the client boundary so that services
work with typed values rather than raw dicts.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class GitHubUser:
    """The authenticated user."""
    login: str
    name: Optional[str] = None
    email: Optional[str] = None
    html_url: str = ""

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'GitHubUser':
        """Create from GitHub API response."""
        return cls(
            login=data.get('login', ''),
            name=data.get('name'),
            email=data.get('email'),
            html_url=data.get('html_url', ''),
        )


@dataclass
class GitHubFork:
    """The user's fork of the central repository."""
    name: str
    full_name: str
    owner: str
    clone_url: str
    html_url: str = ""

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'GitHubFork':
        """Create from GitHub API response."""
        owner = data.get('owner', {})

        return cls(
            name=data.get('name', ''),
            full_name=data.get('full_name', ''),
            owner=owner.get('login', '') if isinstance(owner, dict) else str(owner),
            clone_url=data.get('clone_url', ''),
            html_url=data.get('html_url', ''),
        )


@dataclass
class PullRequestRef:
    """An open pull request on the central repository."""
    number: int
    html_url: str
    created: bool = False  # False when an existing PR was reused

    @classmethod
    def from_api_response(cls, data: Dict[str, Any], created: bool = False) -> 'PullRequestRef':
        return cls(
            number=data.get('number', 0),
            html_url=data.get('html_url', ''),
            created=created,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'number': self.number,
            'url': self.html_url,
            'created': self.created,
        }
