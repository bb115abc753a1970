"""
Handles the 'publish' and 'logout' commands.

`publish` replays the plugin's committed history onto plugin/<name> in the
user's fork of the central repository and opens (or reuses) the pull request.
The pull request URL is the only thing printed to stdout.
"""

import json
from pathlib import Path

import click

from .. import render
from ..cli_utils import standard_command
from ..config import load_config
from ..services.auth_service import AuthSessionManager
from ..services.pipeline_service import PublishPipeline


@click.command()
@click.option('-p', '--path', 'source', default='.',
              type=click.Path(file_okay=False, path_type=Path),
              help='Plugin repository to publish (default: current directory)')
@click.option('--json', 'as_json', is_flag=True, help='Print the result as JSON')
@standard_command
def publish_handler(source, as_json):
    """Publish the plugin in the current repository to the central repository."""
    pipeline = PublishPipeline(load_config())
    result = pipeline.run(source)

    render.render_replay_summary(result.replay)
    if as_json:
        click.echo(json.dumps(result.to_dict(), ensure_ascii=False))
    else:
        render.success(f"Pull request: {result.pull_request.html_url}")
        click.echo(result.pull_request.html_url)


@click.command()
@standard_command
def logout_handler():
    """Forget the stored GitHub token."""
    manager = AuthSessionManager(load_config())
    if manager.logout():
        render.success("Logged out")
    else:
        render.warning("No stored token")
