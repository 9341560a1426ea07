"""
charspec/types/v0/character/chat.py -- Chat session schema.

``characterId`` is a lookup reference only; the chat does not own the
character.  ``lorebook`` holds chat-scoped entries applied on top of the
character's global lorebook.
"""

from __future__ import annotations

from typing import Annotated, Optional

from pydantic import Field, StrictFloat

from charspec.schema import SchemaModel
from charspec.types.v0.character.lorebook import LorebookEntrySchema
from charspec.types.v0.character.message import MessageSchema
from charspec.types.v0.utils import current_timestamp, unique_by

__all__ = ["ChatSchema"]


class ChatSchema(SchemaModel):
    """Represents a chat session with a character."""

    id: str = Field(description="Unique identifier for the chat session.")
    character_id: str = Field(
        description="The ID of the character associated with this chat.",
    )
    messages: Annotated[list[MessageSchema], unique_by("id")] = Field(
        default_factory=list,
        description="The messages of the chat, oldest first. Duplicated id is not allowed.",
    )
    title: str = Field(default="Chat", description="Optional title for the chat.")
    created_at: StrictFloat = Field(
        default_factory=current_timestamp,
        description="Creation timestamp (unix epoch, milliseconds).",
    )
    updated_at: StrictFloat = Field(
        default_factory=current_timestamp,
        description="Last updated timestamp (unix epoch, milliseconds).",
    )
    lorebook: Optional[Annotated[list[LorebookEntrySchema], unique_by("id")]] = Field(
        default=None,
        description="Chat specific lorebook data.",
    )
