#!/usr/bin/env python3

import click

from pluginpub.commands.create import create_handler
from pluginpub.commands.publish import publish_handler, logout_handler


@click.group()
@click.version_option(package_name='pluginpub')
def cli():
    """pluginpub - Publish plugin history to the central plugins repository.

    \b
    Examples:
      pluginpub create my-plugin
      pluginpub publish
    """
    pass


cli.add_command(create_handler, name='create')
cli.add_command(publish_handler, name='publish')
cli.add_command(logout_handler, name='logout')


def main():
    cli()

if __name__ == "__main__":
    main()
