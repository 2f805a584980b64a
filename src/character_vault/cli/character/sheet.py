"""
Interactive character sheet for the Character Vault CLI.

``create`` and ``edit`` open a sheet and read sheet commands until the
character is saved or the edit is discarded.
"""

import asyncio
import logging
from pathlib import Path

import click

from ...characters import CharacterController, ImageEncoder, ViewMode
from ...core.exceptions import CharacterVaultError
from .helpers import ClickPrompter, _load_controller, _load_image_encoder, _render_sheet

logger = logging.getLogger(__name__)

SHEET_HELP = """Sheet commands:
  set FIELD VALUE      FIELD: name, gender, age, capacity, appearance, powerRecovery
  prop N FIELD VALUE   N: 1-8; FIELD: name, look, genre, strength, notes, broken
  break N              toggle the broken mark on property N
  image PATH           attach an appearance image
  show                 print the sheet
  save                 save and return to the list
  back                 discard changes and return to the list
  help                 show this help"""

TRUE_WORDS = {"1", "true", "yes", "y", "on", "x"}
FALSE_WORDS = {"0", "false", "no", "n", "off", ""}


def _parse_slot(raw: str) -> int:
    try:
        slot = int(raw)
    except ValueError:
        raise click.BadParameter(f"property number must be 1-8, got {raw!r}")
    return slot - 1


def _parse_bool(raw: str) -> bool:
    word = raw.strip().lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    raise click.BadParameter(f"expected yes or no, got {raw!r}")


def _run_command(controller: CharacterController, encoder: ImageEncoder, line: str) -> None:
    words = line.split(maxsplit=1)
    if not words:
        return
    command = words[0].lower()
    rest = words[1] if len(words) > 1 else ""

    if command == "help":
        click.echo(SHEET_HELP)
    elif command == "show":
        click.echo(_render_sheet(controller.session))
    elif command == "set":
        parts = rest.split(maxsplit=1)
        if not parts:
            raise click.UsageError("usage: set FIELD VALUE")
        controller.update_field(parts[0], parts[1] if len(parts) > 1 else "")
    elif command == "prop":
        parts = rest.split(maxsplit=2)
        if len(parts) < 2:
            raise click.UsageError("usage: prop N FIELD VALUE")
        index = _parse_slot(parts[0])
        value = parts[2] if len(parts) > 2 else ""
        if parts[1] == "broken":
            controller.update_property(index, "broken", _parse_bool(value))
        else:
            controller.update_property(index, parts[1], value)
    elif command == "break":
        index = _parse_slot(rest.strip())
        session = controller.session
        if 0 <= index < len(session.properties):
            broken = not session.properties[index].broken
        else:
            broken = True  # out-of-range slots are rejected by the controller
        controller.update_property(index, "broken", broken)
        click.echo(f"Property {index + 1} is now {'broken' if broken else 'intact'}.")
    elif command == "image":
        if not rest.strip():
            raise click.UsageError("usage: image PATH")
        if asyncio.run(controller.attach_image_file(Path(rest.strip()), encoder)):
            click.echo("Image attached.")
    elif command == "save":
        name = controller.session.display_name
        if controller.save():
            click.echo(f"✓ Saved '{name}'.")
    elif command == "back":
        if controller.cancel_edit():
            click.echo("Changes discarded.")
    else:
        raise click.UsageError(f"unknown command {command!r}; type 'help'")


def run_sheet(controller: CharacterController, encoder: ImageEncoder) -> None:
    """Read sheet commands until the sheet is closed."""
    click.echo(_render_sheet(controller.session))
    click.echo("Type 'help' for sheet commands.")

    while controller.view_mode is ViewMode.SHEET:
        line = click.prompt("sheet", prompt_suffix="> ", default="", show_default=False)
        try:
            _run_command(controller, encoder, line)
        except (click.UsageError, click.BadParameter) as e:
            click.echo(f"Error: {e.format_message()}", err=True)
        except CharacterVaultError as e:
            click.echo(f"Error: {e.message}", err=True)


@click.command()
@click.pass_context
def create(ctx: click.Context) -> None:
    """Create a new character on an interactive sheet."""
    controller = _load_controller(ctx, ClickPrompter())
    controller.start_create()
    run_sheet(controller, _load_image_encoder(ctx))


@click.command()
@click.argument("character_id")
@click.pass_context
def edit(ctx: click.Context, character_id: str) -> None:
    """Edit an existing character on an interactive sheet."""
    controller = _load_controller(ctx, ClickPrompter())
    if controller.start_edit(character_id) is None:
        click.echo(f"Character '{character_id}' not found.", err=True)
        raise click.Abort()
    run_sheet(controller, _load_image_encoder(ctx))
