"""
charspec/types/v0/utils.py -- Leaf rules shared by every v0 entity.

    ImageURLSchema         Any syntactically valid URL (``local:``, ``data:``
                           and fetchable schemes alike).
    Uint8ArraySchema       Raw binary content (``bytes`` only).
    FileSchema             Either of the two above.
    PositiveIntegerSchema  Integer >= 1.  Integral floats such as 1.0 count as
                           integers; bools and fractional floats are rejected.

``unique`` / ``unique_by`` implement the collection-level "no two elements
share a key" refinement.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Annotated, Any, Callable, Union

from annotated_types import Ge
from pydantic import AfterValidator, AnyUrl, BeforeValidator, Strict, TypeAdapter, ValidationError

from charspec.schema import Predicate, SchemaRule

__all__ = [
    "File",
    "FileSchema",
    "ImageURL",
    "ImageURLSchema",
    "PositiveInteger",
    "PositiveIntegerSchema",
    "Uint8Array",
    "Uint8ArraySchema",
    "current_timestamp",
    "unique",
    "unique_by",
]

_URL_ADAPTER = TypeAdapter(AnyUrl)


def _check_url(value: str) -> str:
    # Only the syntax is checked; the caller's string is kept as-is.
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError as exc:
        reason = exc.errors()[0].get("msg", "invalid URL")
        raise ValueError(f"Input should be a valid URL ({reason})") from None
    return value


ImageURL = Annotated[str, AfterValidator(_check_url)]

ImageURLSchema = SchemaRule(
    ImageURL,
    description=(
        "URL of an image. `data:` for base64 (export only), `local:` for "
        "browser storage (OpFS), otherwise a fetchable URL."
    ),
)

Uint8Array = Annotated[bytes, Strict()]

Uint8ArraySchema = SchemaRule(Uint8Array, description="Raw binary content.")

File = Union[ImageURL, Uint8Array]

FileSchema = SchemaRule(
    File,
    description="File content, either a URL reference or raw binary data.",
)


def _integral_float(value: Any) -> Any:
    # JSON has a single number type, so 3.0 is the integer 3.
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


PositiveInteger = Annotated[int, Strict(), Ge(1), BeforeValidator(_integral_float)]

PositiveIntegerSchema = SchemaRule(
    PositiveInteger,
    description="Positive integer (>= 1)",
)


def unique(key: str) -> Callable[[list[Any]], bool]:
    """Return a predicate that is True when every element has a distinct *key*.

    Elements may be mappings or objects (validated models).

    Example::

        unique("name")([{"name": "alice"}, {"name": "bob"}])   # True
    """

    def check(items: list[Any]) -> bool:
        values = [
            item[key] if isinstance(item, Mapping) else getattr(item, key)
            for item in items
        ]
        return len(set(values)) == len(values)

    return check


def unique_by(key: str) -> Predicate:
    """Refinement marker for ``Annotated[list[...], unique_by("id")]``."""
    return Predicate(unique(key), message=f"Not unique key: {key}")


def current_timestamp() -> int:
    """Current Unix epoch time in milliseconds."""
    return int(time.time() * 1000)
