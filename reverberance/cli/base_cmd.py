# reverberance/cli/base_cmd.py

"""
Shared CLI plumbing: the config-loading command group and common options.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict

import click

from reverberance.config import load_configuration, ReverberanceConfig
from reverberance.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _verbosity_from_params(params: Dict[str, Any]) -> int:
    """Maps -q/-v flags to the verbosity levels understood by setup_logging."""
    if params.get('quiet'):
        return -1
    return params.get('verbose') or 0


class ConfigGroup(click.Group):
    """
    Click group that prepares the run before dispatching to a subcommand.

    On first invocation it loads the configuration (honouring --config files),
    stores it as ctx.obj['config'] and configures logging from it. A context
    that already carries a config (e.g. supplied by tests) is used as is.
    """
    def _prepare(self, ctx: click.Context) -> ReverberanceConfig:
        if ctx.obj is None:
            ctx.obj = {}
        if 'config' in ctx.obj:
            logger.debug("Using configuration already present in the context.")
            return ctx.obj['config']

        config_files = [Path(p) for p in ctx.params.get('config_files', ())]
        config = load_configuration(config_files=config_files)
        ctx.obj['config'] = config
        setup_logging(config, _verbosity_from_params(ctx.params))
        logger.debug("Configuration loaded and logging initialized.")
        return config

    def invoke(self, ctx: click.Context):
        try:
            self._prepare(ctx)
        except Exception as e:
            logging.getLogger("reverberance.error").critical(f"CLI setup failed: {e!r}", exc_info=True)
            print(f"CRITICAL SETUP ERROR: {e!r}", file=sys.stderr)
            ctx.exit(1)
        return super().invoke(ctx)


# --- Common CLI Options ---
verbose_option = click.option(
    '-v', '--verbose',
    count=True,
    help="Increase verbosity level (-v for INFO, -vv for DEBUG)."
)
quiet_option = click.option(
    '-q', '--quiet',
    is_flag=True,
    default=False,
    help="Suppress all console output except critical errors."
)
config_option = click.option(
    '-c', '--config', 'config_files',
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Additional TOML config file (may be repeated; lowest file precedence)."
)
