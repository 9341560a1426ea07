"""
charspec/codegen/overrides.py -- Declaration types for non-structural schema nodes.

Resolution order for a custom node (a ``Predicate`` or ``PlainValidator``
standing in for the whole type):

    1. An explicit ``TsType`` marker or ``json_schema_extra["ts_type"]``.
    2. The stored ``Predicate.instance_of`` descriptor, when it names a known
       safe built-in (bytes -> Uint8Array, datetime -> Date, ...).
    3. Only with probing enabled: call the check on one sample value per
       candidate type and keep the candidate it accepts while rejecting
       ``{}``, ``None`` and a stray string.
    4. A check whose source reads as a pure refinement (``len(``, ``==`` or
       ``!=``, no ``isinstance``) is validation-only and emitted as ``unknown``.
       A check attached to a concrete base type is a refinement as well;
       the renderer emits the base type for it.
    5. Otherwise generation fails and asks for an explicit ``TsType``.

Format-specialised primitives (URLs, UUIDs, e-mail addresses, IP
addresses, paths) are emitted as their underlying primitive.
"""

from __future__ import annotations

import datetime
import inspect
import ipaddress
import logging
import uuid
from pathlib import PurePath
from typing import Any, Callable, Optional

import pydantic_core
from pydantic import AnyUrl, EmailStr, NameEmail, PlainValidator
from pydantic.fields import FieldInfo

from charspec.codegen.errors import SchemaExtractionError
from charspec.schema import Predicate, TsType

logger = logging.getLogger(__name__)

# Checked in order; datetime must precede date.
KNOWN_INSTANCE_TYPES: tuple[tuple[type, str], ...] = (
    (bytes, "Uint8Array"),
    (bytearray, "Uint8Array"),
    (memoryview, "Uint8Array"),
    (datetime.datetime, "Date"),
    (datetime.date, "Date"),
)

STRING_FORMAT_TYPES: tuple[type, ...] = (
    AnyUrl,
    pydantic_core.Url,
    pydantic_core.MultiHostUrl,
    EmailStr,
    NameEmail,
    uuid.UUID,
    PurePath,
    ipaddress.IPv4Address,
    ipaddress.IPv6Address,
    ipaddress.IPv4Network,
    ipaddress.IPv6Network,
    ipaddress.IPv4Interface,
    ipaddress.IPv6Interface,
)

PROBE_CANDIDATES: tuple[tuple[str, Any], ...] = (
    ("Uint8Array", b""),
    ("Date", datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)),
)

PROBE_REJECTS: tuple[Any, ...] = ({}, None, "not-a-match")


def explicit_override(metadata: list[Any]) -> Optional[str]:
    """Return the ``TsType`` text among annotation *metadata*, if any."""
    for item in reversed(metadata):
        if isinstance(item, TsType):
            return item.text.strip()
        if isinstance(item, FieldInfo) and isinstance(item.json_schema_extra, dict):
            text = item.json_schema_extra.get("ts_type")
            if isinstance(text, str) and text.strip():
                return text.strip()
    return None


def known_instance_type(cls: Any) -> Optional[str]:
    if not isinstance(cls, type):
        return None
    for known, ts_name in KNOWN_INSTANCE_TYPES:
        if issubclass(cls, known):
            return ts_name
    return None


def string_format_type(cls: Any) -> Optional[str]:
    if isinstance(cls, type) and issubclass(cls, STRING_FORMAT_TYPES):
        return "string"
    return None


def is_custom_marker(item: Any) -> bool:
    return isinstance(item, (Predicate, PlainValidator))


def resolve_custom_type(marker: Any, context: str, probe_predicates: bool = False) -> str:
    """Return the declaration type for an opaque *marker*, or raise."""
    descriptor = getattr(marker, "instance_of", None)
    if descriptor is not None:
        ts_name = known_instance_type(descriptor)
        if ts_name:
            logger.debug("%s: instance_of(%s) -> %s", context, descriptor.__name__, ts_name)
            return ts_name

    if probe_predicates:
        ts_name = probe_check(_as_check(marker))
        if ts_name:
            logger.debug("%s: probed custom check -> %s", context, ts_name)
            return ts_name

    if looks_like_refinement(getattr(marker, "func", None)):
        logger.debug("%s: validation-only custom check -> unknown", context)
        return "unknown"

    raise SchemaExtractionError(
        "Unsupported custom schema encountered. This generator requires either "
        "a known safe type (e.g. instance_of(bytes)) or an explicit override "
        "via TsType(...) / json_schema_extra={'ts_type': ...}. "
        f"Fix: annotate the node with TsType(\"Uint8Array\") (or the appropriate TS type). "
        f"Custom check: {marker!r}",
        context,
    )


def probe_check(check: Callable[[Any], bool]) -> Optional[str]:
    """Guess the type a check stands for from its behaviour on sample values."""
    for ts_name, sample in PROBE_CANDIDATES:
        if _accepts(check, sample) and not any(_accepts(check, value) for value in PROBE_REJECTS):
            return ts_name
    return None


def _as_check(marker: Any) -> Callable[[Any], bool]:
    if isinstance(marker, Predicate):
        return lambda value: bool(marker.func(value))

    def passes(value: Any) -> bool:
        marker.func(value)
        return True

    return passes


def _accepts(check: Callable[[Any], bool], value: Any) -> bool:
    # A check that raises on a sample rejects it.
    try:
        return check(value)
    except Exception:
        return False


def looks_like_refinement(func: Any) -> bool:
    """True when *func* reads as a length or equality check, not a type test."""
    if func is None:
        return False
    try:
        source = inspect.getsource(func)
    except (OSError, TypeError):
        return False
    if "isinstance" in source:
        return False
    return "len(" in source or "==" in source or "!=" in source
