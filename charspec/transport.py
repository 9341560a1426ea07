"""
charspec/transport.py -- Export / import of validated characters as binary blobs.

Export is encode-then-compress; import is decompress-then-decode followed
by validation.  Both collaborators are plain callables so callers can swap
in their own encoder or compressor.  Nothing here retries: any exception
raised by a collaborator propagates unchanged.

The defaults are pydantic's JSON serializer (binary asset data travels as
base64) and ``zlib``.
"""

from __future__ import annotations

import logging
import zlib
from typing import Any, Callable, Optional

from pydantic import BaseModel

from charspec.validation import parse_character, parse_character_json

logger = logging.getLogger(__name__)

Encoder = Callable[[BaseModel], bytes]
Compressor = Callable[[bytes], bytes]
Decompressor = Callable[[bytes], bytes]
Decoder = Callable[[bytes], Any]


def encode_json(character: BaseModel) -> bytes:
    return character.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")


def export_character(
    character: BaseModel,
    *,
    encoder: Encoder = encode_json,
    compressor: Compressor = zlib.compress,
) -> bytes:
    """Encode a validated character, then compress the encoded bytes."""
    payload = encoder(character)
    blob = compressor(payload)
    logger.debug(
        "Exported character %s: %d -> %d bytes",
        getattr(character, "id", "?"), len(payload), len(blob),
    )
    return blob


def import_character(
    blob: bytes,
    *,
    decompressor: Decompressor = zlib.decompress,
    decoder: Optional[Decoder] = None,
) -> BaseModel:
    """Reverse :func:`export_character` and validate the result.

    Without a *decoder* the payload is validated as JSON directly, which
    restores base64 binary data to ``bytes``.  A custom *decoder* must
    return plain Python data.
    """
    payload = decompressor(blob)
    if decoder is None:
        return parse_character_json(payload)
    return parse_character(decoder(payload))
