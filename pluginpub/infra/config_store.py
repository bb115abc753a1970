"""
Persisted CLI state for pluginpub.

A single JSON object on disk (cli-config.json) holding, under the "github"
key, the access token obtained by the device flow. Writes are atomic
(write to temp, then rename) and create parent directories on demand.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional
import logging

from ..domain.token import AccessToken

logger = logging.getLogger(__name__)

TOKEN_KEY = "github"


class ConfigStore:
    """
    Key-value JSON store with atomic writes.

    Example:
        store = ConfigStore(Path("~/.config/pluginpub/cli-config.json"))
        store.save_token(token)
        token = store.get_token()
    """

    def __init__(self, path: Path):
        """
        Initialize ConfigStore.

        Args:
            path: Path to JSON file (created lazily on first write)
        """
        self.path = Path(path).expanduser()

    def _write_atomic(self, data: Dict[str, Any]) -> None:
        """Write data atomically using temp file and rename."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp"
        )

        try:
            with os.fdopen(fd, 'w') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.write('\n')

            # The file holds a bearer token
            os.chmod(temp_path, 0o600)
            os.replace(temp_path, self.path)

        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def read(self) -> Dict[str, Any]:
        """
        Read entire store.

        A missing or corrupt file reads as empty.
        """
        try:
            if self.path.exists():
                with open(self.path, 'r') as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    return data
                logger.warning(f"Ignoring {self.path}: not a JSON object")
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Error reading {self.path}: {e}")

        return {}

    def get(self, key: str, default: Any = None) -> Any:
        return self.read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self.read()
        data[key] = value
        self._write_atomic(data)

    def delete(self, key: str) -> bool:
        """
        Delete a key.

        Returns:
            True if key was deleted, False if not found
        """
        data = self.read()
        if key in data:
            del data[key]
            self._write_atomic(data)
            return True
        return False

    def get_token(self) -> Optional[AccessToken]:
        """Stored token, or None. Validity is not checked here."""
        return AccessToken.from_dict(self.get(TOKEN_KEY))

    def save_token(self, token: AccessToken) -> None:
        self.set(TOKEN_KEY, token.to_dict())

    def clear_token(self) -> bool:
        return self.delete(TOKEN_KEY)
