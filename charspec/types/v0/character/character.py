"""
charspec/types/v0/character/character.py -- The root Character entity.

A character owns its prompt data, scripts, metadata and assets outright;
nothing nested inside it is shared with another character.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field

from charspec.schema import SchemaModel
from charspec.types.v0.character.assets import AssetsSettingSchema
from charspec.types.v0.character.lorebook import LorebookDataSchema
from charspec.types.v0.character.meta import MetaSchema
from charspec.types.v0.executables.executable import ScriptSettingSchema

__all__ = ["CharacterPromptDataSchema", "CharacterSchema"]


class CharacterPromptDataSchema(SchemaModel):
    """The prompt data for a character.

    Used to generate the character's persona. All parameters are for AI
    prompt and scriptable.
    """

    description: str = Field(description="The character description.")
    authors_note: Optional[str] = Field(
        default=None,
        description=(
            "The authors note. It's usually used to mock the user's message "
            "(differ by prompt)."
        ),
    )
    lorebook: LorebookDataSchema = Field(description="Global lorebook data")


class CharacterSchema(SchemaModel):
    """Represents a specific AI character personality."""

    spec_version: Literal[0] = Field(
        description=(
            "The version of the character spec. Used to determine which "
            "schema to use for parsing and migration."
        ),
    )
    id: str = Field(description="Unique identifier for the character.")
    name: str = Field(
        description="The display name of the character. Human readable, not scriptable.",
    )
    description: str = Field(
        description="A short description of the character. Human readable, not scriptable.",
    )
    avatar_url: Optional[str] = Field(
        default=None,
        description="Optional name of asset for the character's avatar image.",
    )
    prompt: CharacterPromptDataSchema = Field(description="The prompt data for the character.")
    executables: ScriptSettingSchema = Field(
        description="Script and hooks which can be used to control the character's behavior.",
    )
    metadata: MetaSchema = Field(
        description=(
            "Additional metadata about the character. Not used by the system, "
            "but can be used by the user."
        ),
    )
    assets: AssetsSettingSchema = Field(description="Assets for the character.")
