"""
charspec/types/v0/character/message.py -- Chat message schemas.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import Field, StrictFloat

from charspec.schema import SchemaModel, SchemaRule
from charspec.types.v0.character.assets import AssetEntitySchema
from charspec.types.v0.utils import File, current_timestamp, unique_by

__all__ = [
    "FileContentSchema",
    "MessageContent",
    "MessageContentSchema",
    "MessageSchema",
    "Role",
    "RoleSchema",
    "TextContentSchema",
]

Role = Literal["user", "assistant", "system"]

RoleSchema = SchemaRule(Role, description="Represents the role of the message sender.")


class TextContentSchema(SchemaModel):
    """Text message content."""

    type: Literal["text"] = Field(description="The message content is a simple string.")
    data: str = Field(description="The message content.")


class FileContentSchema(SchemaModel):
    """File message content."""

    type: Literal["file"] = Field(
        description="The file content is stored in the separated storage.",
    )
    data: File = Field(description="The file content.")
    mime_type: str = Field(description="MIME type of the file.")


MessageContent = Annotated[
    Union[TextContentSchema, FileContentSchema],
    Field(discriminator="type"),
]

MessageContentSchema = SchemaRule(MessageContent, description="The content of the message.")


class MessageSchema(SchemaModel):
    """Represents a single message in a chat history."""

    id: str = Field(description="Unique identifier for the message.")
    chat_id: str = Field(description="The ID of the chat associated with this message.")
    role: Role = Field(description="The role of the message sender.")
    content: MessageContent = Field(description="The content of the message.")
    timestamp: StrictFloat = Field(
        default_factory=current_timestamp,
        description="The timestamp when the message was created.",
    )
    inlays: Annotated[list[AssetEntitySchema], unique_by("name")] = Field(
        default_factory=list,
        description="The inlays of the message. It is not intended to be exported as public.",
    )
