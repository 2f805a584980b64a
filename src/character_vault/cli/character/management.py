"""
Character management commands for the Character Vault CLI.
"""

import json
import logging

import click

from ...characters import AutoPrompter, export_json_schema
from .helpers import (
    ClickPrompter,
    _format_character,
    _format_character_list,
    _load_controller,
)

logger = logging.getLogger(__name__)


@click.command(name="list")
@click.option(
    "--format",
    type=click.Choice(["table", "json", "yaml"]),
    default="table",
    help="Output format",
)
@click.pass_context
def list_characters(ctx: click.Context, format: str) -> None:
    """List all stored characters."""
    controller = _load_controller(ctx, ClickPrompter())
    characters = list(controller.characters)

    if not characters and format == "table":
        click.echo("No characters yet. Use 'create' to add one.")
        return

    click.echo(_format_character_list(characters, format))


@click.command()
@click.argument("character_id")
@click.option(
    "--format",
    type=click.Choice(["json", "yaml"]),
    default="yaml",
    help="Output format",
)
@click.option("--with-image", is_flag=True, help="Print the full image data URI")
@click.pass_context
def show(ctx: click.Context, character_id: str, format: str, with_image: bool) -> None:
    """Show one character record."""
    controller = _load_controller(ctx, ClickPrompter())
    character = controller.get_character(character_id)

    if character is None:
        click.echo(f"Character '{character_id}' not found.", err=True)
        raise click.Abort()

    click.echo(_format_character(character, format, with_image=with_image))


@click.command()
@click.argument("character_id")
@click.option("--yes", "-y", is_flag=True, help="Delete without asking")
@click.pass_context
def delete(ctx: click.Context, character_id: str, yes: bool) -> None:
    """Delete a character."""
    prompter = AutoPrompter(answer=True) if yes else ClickPrompter()
    controller = _load_controller(ctx, prompter)

    character = controller.get_character(character_id)
    if character is None:
        click.echo(f"Character '{character_id}' not found; nothing to delete.")
        return

    click.echo(f"{character.display_name} ({character.id})")
    if controller.delete_character(character_id):
        click.echo(f"✓ Character '{character.display_name}' deleted.")
    else:
        click.echo("Deletion cancelled.")


@click.command()
def schema() -> None:
    """Print the JSON Schema of a stored character record."""
    click.echo(json.dumps(export_json_schema(), indent=2))
