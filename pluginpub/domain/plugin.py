"""
Plugin manifest and replay-branch naming.

The manifest lives at the root of the source repository as plugin.json.
Its `name` is the slug used for the branch and the subtree directory.
"""

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from ..exit_codes import ManifestError

MANIFEST_FILENAME = "plugin.json"
PLUGINS_ROOT = "plugins"

_NAME_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9._-]*$')


def branch_name(plugin_name: str) -> str:
    """Replay branch for a plugin, e.g. plugin/clipboard."""
    return f"plugin/{plugin_name}"


def plugin_subdir(plugin_name: str) -> str:
    """Subtree of the central repository owned by a plugin."""
    return f"{PLUGINS_ROOT}/{plugin_name}"


def sparse_pattern(plugin_name: str) -> str:
    """Sparse-checkout pattern that materializes only the plugin's subtree."""
    return f"{plugin_subdir(plugin_name)}/**"


def validate_plugin_name(name: str) -> str:
    if not name or not _NAME_PATTERN.match(name) or '..' in name:
        raise ManifestError(
            f"Invalid plugin name {name!r}: use letters, digits, '.', '_' or '-'"
        )
    return name


@dataclass
class PluginManifest:
    """Fields of plugin.json that publishing needs."""
    name: str
    plugin_name: str
    description: str = ""
    author: str = ""
    version: str = "0.0.0"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PluginManifest':
        if not isinstance(data, dict):
            raise ManifestError(f"{MANIFEST_FILENAME} must contain a JSON object")
        name = validate_plugin_name(str(data.get('name', '')).strip())
        return cls(
            name=name,
            plugin_name=data.get('pluginName') or name,
            description=data.get('description', ''),
            author=data.get('author', ''),
            version=str(data.get('version', '0.0.0')),
        )

    @classmethod
    def load(cls, repo_path) -> 'PluginManifest':
        path = Path(repo_path) / MANIFEST_FILENAME
        if not path.is_file():
            raise ManifestError(f"No {MANIFEST_FILENAME} found in {repo_path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ManifestError(f"Cannot parse {path}: {e}") from e
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'pluginName': self.plugin_name,
            'description': self.description,
            'author': self.author,
            'version': self.version,
        }
