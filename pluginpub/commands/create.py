"""
Handles the 'create' command.

Scaffolds the smallest publishable plugin: a directory holding plugin.json
and a README, initialized as a git repository. Richer templates are left to
external generators.
"""

import json
from pathlib import Path
from typing import Optional

import click

from .. import render
from ..cli_utils import standard_command
from ..domain.plugin import MANIFEST_FILENAME, PluginManifest, validate_plugin_name
from ..exit_codes import CommandError
from ..infra.git_client import GitClient


def create_project(project_name: str, parent_dir, git: Optional[GitClient] = None,
                   description: str = "", author: str = "") -> Path:
    """
    Create a new plugin project directory.

    Returns:
        Path of the created project

    Raises:
        CommandError: target exists and is not empty
        ManifestError: project_name is not a valid plugin name
    """
    validate_plugin_name(project_name)
    project = Path(parent_dir) / project_name

    if project.exists() and any(project.iterdir()):
        raise CommandError(f"{project} already exists and is not empty")
    project.mkdir(parents=True, exist_ok=True)

    manifest = PluginManifest(
        name=project_name,
        plugin_name=project_name,
        description=description,
        author=author,
        version="1.0.0",
    )
    with open(project / MANIFEST_FILENAME, 'w', encoding='utf-8') as f:
        json.dump(manifest.to_dict(), f, indent=2, ensure_ascii=False)
        f.write('\n')

    (project / 'README.md').write_text(f"# {project_name}\n\n{description}\n", encoding='utf-8')

    (git or GitClient()).init(project)
    return project


@click.command()
@click.argument('project_name')
@click.option('-d', '--description', default='', help='Plugin description')
@click.option('-a', '--author', default='', help='Plugin author')
@standard_command
def create_handler(project_name, description, author):
    """Create a new plugin project named PROJECT_NAME."""
    project = create_project(project_name, Path.cwd(), description=description, author=author)
    render.success(f"Created {project}")
    render.info(f"Next: cd {project_name}, commit your work, then run `pluginpub publish`")
