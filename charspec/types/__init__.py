"""
charspec/types/ -- Versioned character schemas.

``character_map`` maps every supported ``specVersion`` to the Character
schema of that version.  ``CharacterSchema`` is the highest version.

Usage::

    from charspec.types import character_map, SpecVersion

    schema = character_map[SpecVersion(data["specVersion"])]
"""

from enum import IntEnum

from charspec.types.v0.character.character import CharacterSchema as CharacterV0Schema


class SpecVersion(IntEnum):
    V0 = 0


character_map = {
    SpecVersion.V0: CharacterV0Schema,
}

LATEST_SPEC_VERSION = max(character_map)

CharacterSchema = character_map[LATEST_SPEC_VERSION]

__all__ = [
    "LATEST_SPEC_VERSION",
    "CharacterSchema",
    "CharacterV0Schema",
    "SpecVersion",
    "character_map",
]
