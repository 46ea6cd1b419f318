# reverberance/cli/main.py

"""
Main entry point for the reverberance CLI application.
Uses Click for command-line interface handling.
"""

import logging

import click

from reverberance.version import __version__
from .base_cmd import ConfigGroup, verbose_option, quiet_option, config_option
from .render_cmd import render_cmd, impulse_cmd

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])


@click.group(context_settings=CONTEXT_SETTINGS, cls=ConfigGroup)
@click.version_option(__version__, '-V', '--version', package_name='reverberance', prog_name='reverberance')
@verbose_option
@quiet_option
@config_option
@click.pass_context
def main_cli(ctx, verbose: int, quiet: bool, config_files):
    """
    reverberance: add synthetic room reverberation to audio recordings.

    Configuration is loaded from:
    Defaults -> --config files -> ./reverberance.toml -> ~/.config/reverberance/reverberance.toml -> Env Vars

    Use -v for verbose output, -vv for debug output, -q for quiet mode.
    """
    logger.debug("reverberance CLI group invoked.")


main_cli.add_command(render_cmd)
main_cli.add_command(impulse_cmd)

cli = main_cli

if __name__ == "__main__":
    cli()
