"""
Shared helper functions for character CLI commands.
"""

import json
import logging
from typing import Any, Dict, List

import click
import yaml
from tabulate import tabulate

from ...characters import Character, CharacterController, ImageEncoder, Prompter
from ...core.config import Config

logger = logging.getLogger(__name__)

IMAGE_PREVIEW_CHARS = 32


class ClickPrompter:
    """Prompter backed by the terminal."""

    def confirm(self, message: str) -> bool:
        return click.confirm(message, default=False)

    def alert(self, message: str) -> None:
        click.echo(f"! {message}", err=True)


def _get_config(ctx: click.Context) -> Config:
    return ctx.obj["config"]


def _load_controller(ctx: click.Context, prompter: Prompter) -> CharacterController:
    """Build the controller from the CLI's configuration."""
    return CharacterController.from_config(_get_config(ctx), prompter)


def _load_image_encoder(ctx: click.Context) -> ImageEncoder:
    return ImageEncoder.from_config(_get_config(ctx).images)


def _abbreviate_image(image: str) -> str:
    if len(image) <= IMAGE_PREVIEW_CHARS:
        return image
    return f"{image[:IMAGE_PREVIEW_CHARS]}... ({len(image)} chars)"


def _character_to_display_dict(character: Character, with_image: bool = False) -> Dict[str, Any]:
    data = character.to_storage()
    if not with_image:
        data["image"] = _abbreviate_image(character.image)
    return data


def _format_character(character: Character, format: str, with_image: bool = False) -> str:
    data = _character_to_display_dict(character, with_image=with_image)
    if format == "json":
        return json.dumps(data, indent=2, ensure_ascii=False)
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)


def _format_character_list(characters: List[Character], format: str = "table") -> str:
    """Format character list for display."""
    if format in ("json", "yaml"):
        char_data = [
            {
                "id": char.id,
                "name": char.name,
                "gender": char.gender,
                "age": char.age,
                "capacity": char.capacity,
                "has_image": char.has_image,
            }
            for char in characters
        ]
        if format == "json":
            return json.dumps(char_data, indent=2, ensure_ascii=False)
        return yaml.safe_dump(char_data, default_flow_style=False, sort_keys=False, allow_unicode=True)

    table_data = [
        [char.id, char.display_name, char.summary, "[img]" if char.has_image else ""]
        for char in characters
    ]
    headers = ["ID", "Name", "Details", "Image"]
    return str(tabulate(table_data, headers=headers, tablefmt="grid"))


def _render_sheet(character: Character) -> str:
    """Plain-text rendering of an open character sheet."""
    image = _abbreviate_image(character.image) if character.has_image else "(none)"
    lines = [
        f"== {character.display_name} ==",
        f"  name:          {character.name}",
        f"  gender:        {character.gender}",
        f"  age:           {character.age}",
        f"  capacity:      {character.capacity}",
        f"  appearance:    {character.appearance}",
        f"  powerRecovery: {character.power_recovery}",
        f"  image:         {image}",
        "",
    ]

    table_data = [
        [
            i + 1,
            prop.name,
            prop.look,
            prop.genre,
            prop.strength,
            prop.notes,
            "x" if prop.broken else "",
        ]
        for i, prop in enumerate(character.properties)
    ]
    headers = ["#", "Property", "Look", "Genre", "Strength", "Notes", "Broken"]
    lines.append(str(tabulate(table_data, headers=headers, tablefmt="simple")))
    return "\n".join(lines)
