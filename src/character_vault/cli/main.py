"""
Main CLI entry point for the Character Vault.

Provides the command group; configuration is resolved once here and handed
to subcommands through the click context.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from ..core.config import Config
from ..core.exceptions import ConfigurationError
from ..core.logging import configure_logging
from .character import CHARACTER_COMMANDS

logger = logging.getLogger(__name__)


def _resolve_config(config_path: Optional[Path], data_dir: Optional[Path]) -> Config:
    base = Config.from_file(config_path) if config_path else None
    config = Config.from_env(base)
    if data_dir is not None:
        config.storage.data_dir = data_dir
    return config


@click.group()
@click.version_option(version="1.0.0")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML configuration file",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory the character collection is stored in",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", "-d", is_flag=True, help="Enable debug output")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    data_dir: Optional[Path],
    verbose: bool,
    debug: bool,
) -> None:
    """
    Character Vault

    Keep tabletop-RPG character sheets on this device: create, edit and
    delete characters, each with eight property slots.
    """
    ctx.ensure_object(dict)

    try:
        config = _resolve_config(config_path, data_dir)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    else:
        level = config.monitoring.log_level

    configure_logging(level, json_format=config.monitoring.structured_logging)
    logging.getLogger().setLevel(level.upper())

    ctx.obj["config"] = config


for command in CHARACTER_COMMANDS:
    cli.add_command(command)
