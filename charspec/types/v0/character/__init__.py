"""
charspec/types/v0/character/ -- Character entity schemas (spec version 0).

Submodules:
    assets     AssetEntity, AssetsSetting
    character  Character, CharacterPromptData
    chat       Chat
    lorebook   Lorebook conditions, entries and data
    message    Message, Role, message content variants
    meta       Meta
"""

from charspec.types.v0.character.assets import AssetEntitySchema, AssetsSettingSchema
from charspec.types.v0.character.character import CharacterPromptDataSchema, CharacterSchema
from charspec.types.v0.character.chat import ChatSchema
from charspec.types.v0.character.lorebook import (
    LorebookConditionSchema,
    LorebookConfigSchema,
    LorebookDataSchema,
    LorebookEntrySchema,
)
from charspec.types.v0.character.message import MessageSchema, RoleSchema
from charspec.types.v0.character.meta import MetaSchema

__all__ = [
    "AssetEntitySchema",
    "AssetsSettingSchema",
    "CharacterPromptDataSchema",
    "CharacterSchema",
    "ChatSchema",
    "LorebookConditionSchema",
    "LorebookConfigSchema",
    "LorebookDataSchema",
    "LorebookEntrySchema",
    "MessageSchema",
    "MetaSchema",
    "RoleSchema",
]
