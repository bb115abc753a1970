"""
Common CLI utilities and decorators for consistent command behavior.
"""

import logging
import sys
from functools import wraps

import click

from . import render
from .config import configure_logging
from .exit_codes import (
    INTERRUPTED,
    CommandError,
    get_exit_code_for_exception,
)

logger = logging.getLogger(__name__)


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - --verbose/-v switches logging to DEBUG
    - Errors print their message on stderr and exit non-zero
    - Ctrl+C exits with 130

    There is no partial-success mode: a command either completes or
    terminates with the exit code of the error that stopped it.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        verbose = kwargs.pop('verbose', False)
        configure_logging("DEBUG" if verbose else "WARNING")

        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            render.error("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            logger.debug("Command failed", exc_info=True)
            render.error(str(e))
            sys.exit(e.exit_code)
        except Exception as e:
            logger.debug("Unexpected failure", exc_info=True)
            render.error(f"{type(e).__name__}: {e}")
            sys.exit(get_exit_code_for_exception(e))

    return click.option('-v', '--verbose', is_flag=True,
                        help='Show debug logging on stderr')(wrapper)
