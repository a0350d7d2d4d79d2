# pstretch/cli/main.py

"""
Main entry point for the pstretch CLI application.
Uses Click for command-line interface handling.
"""

import logging

import click

from pstretch.version import __version__
from .base_cmd import ConfigGroup, verbose_option, quiet_option

from .stretch_cmd import stretch_cmd
from .info_cmd import info_cmd

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])


# --- Main CLI Group ---
@click.group(context_settings=CONTEXT_SETTINGS, cls=ConfigGroup)
@click.version_option(__version__, '-V', '--version', package_name='pstretch', prog_name='pstretch')
@verbose_option
@quiet_option
@click.pass_context
def main_cli(ctx, verbose: int, quiet: bool):
    """
    pstretch: extreme time stretching of audio without pitch change.

    Configuration is loaded from:
    Defaults -> ./pstretch.toml -> ~/.config/pstretch/pstretch.toml -> Env Vars

    Use -v for verbose output, -vv for debug output, -q for quiet mode.
    """
    logger.debug(f"pstretch CLI group invoked (verbose={verbose}, quiet={quiet}).")


# --- Register Commands ---
main_cli.add_command(stretch_cmd)
main_cli.add_command(info_cmd)

cli = main_cli

if __name__ == "__main__":
    cli()
