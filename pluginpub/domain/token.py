"""
Access token domain object.

Persisted across invocations by ConfigStore under the "github" key. A stored
token's validity is unknown until it has been probed against the API.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class AccessToken:
    """An OAuth bearer token obtained through the device flow."""
    access_token: str
    token_type: str = "bearer"
    scope: str = ""
    created_at: int = field(default_factory=_now_ms)  # epoch milliseconds

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['AccessToken']:
        """Build from the persisted JSON shape, or None if it is unusable."""
        if not isinstance(data, dict) or not data.get('access_token'):
            return None
        return cls(
            access_token=data['access_token'],
            token_type=data.get('token_type', 'bearer'),
            scope=data.get('scope', ''),
            created_at=data.get('created_at', 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'access_token': self.access_token,
            'token_type': self.token_type,
            'scope': self.scope,
            'created_at': self.created_at,
        }

    def __repr__(self) -> str:
        # Keep the secret out of logs and tracebacks
        return f"AccessToken(token_type={self.token_type!r}, scope={self.scope!r})"
