"""
Character sheet value types.

A Character is an immutable value: every edit produces a new Character and
leaves the old one untouched, so a record in the committed collection and the
copy open on the sheet never share mutable state.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import ValidationError

PROPERTY_SLOTS = 8

UNNAMED_PLACEHOLDER = "(unnamed)"


def new_character_id() -> str:
    """Generate a fresh, unique character id."""
    return str(uuid.uuid4())


def _replace_validated(model: BaseModel, attr: str, value: Any) -> Any:
    data = {name: getattr(model, name) for name in type(model).model_fields}
    data[attr] = value
    try:
        return type(model).model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(attr, value, e.errors()[0]["msg"]) from e


class Property(BaseModel):
    """One of the eight trait slots on a character sheet."""

    model_config = ConfigDict(frozen=True)

    name: StrictStr = ""
    look: StrictStr = ""
    genre: StrictStr = ""  # e.g. survival / technique / dialogue
    strength: StrictStr = ""  # e.g. "+3", "+6"
    notes: StrictStr = ""
    broken: StrictBool = False

    def with_field(self, field_name: str, value: Any) -> Property:
        """Return a copy with one field replaced."""
        if field_name not in type(self).model_fields:
            raise ValidationError(field_name, value, "unknown property field")
        return _replace_validated(self, field_name, value)

    @property
    def is_blank(self) -> bool:
        return self == Property()


def blank_properties() -> Tuple[Property, ...]:
    return tuple(Property() for _ in range(PROPERTY_SLOTS))


class Character(BaseModel):
    """A character record as stored in the vault."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: StrictStr
    name: StrictStr = ""
    gender: StrictStr = ""
    age: StrictStr = ""
    capacity: StrictStr = ""
    appearance: StrictStr = ""
    image: StrictStr = ""  # data URI, empty when no image is attached
    power_recovery: StrictStr = Field(default="", alias="powerRecovery")
    properties: Tuple[Property, ...] = Field(default_factory=blank_properties)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        # Older sheets used a millisecond timestamp as the id.
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("id")
    @classmethod
    def _check_id(cls, v: str) -> str:
        if not v:
            raise ValueError("id must not be empty")
        return v

    @field_validator("image", mode="before")
    @classmethod
    def _absent_image(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("properties")
    @classmethod
    def _check_slots(cls, v: Tuple[Property, ...]) -> Tuple[Property, ...]:
        if len(v) != PROPERTY_SLOTS:
            raise ValueError(
                f"a character has exactly {PROPERTY_SLOTS} properties, got {len(v)}"
            )
        return v

    @classmethod
    def empty(cls) -> Character:
        """Blank sheet with a fresh id and eight blank properties."""
        return cls(id=new_character_id())

    @classmethod
    def resolve_field(cls, field_name: str) -> str:
        """Map a wire name (``powerRecovery``) or attribute name to the attribute."""
        for attr, info in cls.model_fields.items():
            if field_name == attr or field_name == info.alias:
                return attr
        raise ValidationError(field_name, None, "unknown character field")

    @classmethod
    def from_storage(cls, data: Dict[str, Any]) -> Character:
        return cls.model_validate(data)

    def to_storage(self) -> Dict[str, Any]:
        """Plain JSON-ready dict using the stored (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)

    def with_field(self, field_name: str, value: Any) -> Character:
        """Return a copy with one basic field replaced."""
        attr = self.resolve_field(field_name)
        if attr in ("id", "properties"):
            raise ValidationError(field_name, value, "field cannot be edited directly")
        return _replace_validated(self, attr, value)

    def with_property(self, index: int, field_name: str, value: Any) -> Character:
        """Return a copy with one field of property slot ``index`` replaced."""
        if isinstance(index, bool) or not isinstance(index, int):
            raise ValidationError("index", index, "property index must be an integer")
        if not 0 <= index < PROPERTY_SLOTS:
            raise ValidationError(
                "index", index, f"property index must be in [0, {PROPERTY_SLOTS})"
            )

        properties = list(self.properties)
        properties[index] = properties[index].with_field(field_name, value)
        return self.model_copy(update={"properties": tuple(properties)})

    @property
    def display_name(self) -> str:
        return self.name or UNNAMED_PLACEHOLDER

    @property
    def summary(self) -> str:
        """Gender, age and capacity on one line, skipping empty ones."""
        parts = []
        if self.gender:
            parts.append(f"Gender: {self.gender}")
        if self.age:
            parts.append(f"Age: {self.age}")
        if self.capacity:
            parts.append(f"Capacity: {self.capacity}")
        return "  ".join(parts)

    @property
    def has_image(self) -> bool:
        return bool(self.image)


def export_json_schema() -> Dict[str, Any]:
    """Export the JSON Schema of a stored character record."""
    return Character.model_json_schema(by_alias=True)
