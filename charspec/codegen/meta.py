"""
charspec/codegen/meta.py -- Documentation metadata extraction.

Schema metadata is side data: it never changes validation, it only becomes
JSDoc in the generated declarations.  It is read from

    - model classes: the docstring, plus ``model_config["json_schema_extra"]``
    - ``SchemaRule`` instances: their ``description`` / ``deprecated`` /
      ``examples`` and extra keyword arguments
    - ``FieldInfo`` objects: ``description``, ``deprecated``, ``examples``
      and ``json_schema_extra``

Recognised ``json_schema_extra`` keys: ``since``, ``default``, ``see``,
``example``, ``deprecated`` and the ``ts_type`` override.
"""

from __future__ import annotations

import ast
import inspect
import logging
import textwrap
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from charspec.schema import SchemaRule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaMeta:
    description: Optional[str] = None
    deprecated: Any = None
    since: Any = None
    default: Any = None
    see: Any = None
    example: Any = None
    examples: Any = None
    ts_type: Any = None


def read_schema_meta(node: Any) -> SchemaMeta:
    """Collect the documentation metadata attached to *node*."""
    if isinstance(node, SchemaRule):
        return _meta_from(node.description, node.deprecated, node.examples, node.extra)

    if isinstance(node, FieldInfo):
        extra = node.json_schema_extra if isinstance(node.json_schema_extra, dict) else {}
        return _meta_from(node.description, node.deprecated, node.examples, extra)

    if isinstance(node, type) and issubclass(node, BaseModel):
        doc = node.__dict__.get("__doc__")
        extra = node.model_config.get("json_schema_extra")
        return _meta_from(
            inspect.cleandoc(doc) if doc else None,
            None,
            None,
            extra if isinstance(extra, dict) else {},
        )

    return SchemaMeta()


def _meta_from(description: Any, deprecated: Any, examples: Any, extra: dict) -> SchemaMeta:
    if deprecated is None:
        deprecated = extra.get("deprecated")
    # typing_extensions.deprecated / warnings.deprecated carry a .message
    if deprecated is not None and not isinstance(deprecated, (bool, str)):
        deprecated = getattr(deprecated, "message", True)

    return SchemaMeta(
        description=description if isinstance(description, str) else None,
        deprecated=deprecated,
        since=extra.get("since"),
        default=extra.get("default"),
        see=extra.get("see"),
        example=extra.get("example"),
        examples=examples if examples is not None else extra.get("examples"),
        ts_type=extra.get("ts_type"),
    )


# ------------------------------------------------------------------
# JSDoc rendering
# ------------------------------------------------------------------

def escape_for_jsdoc(text: str) -> str:
    return text.replace("*/", "*\\/")


def doc_lines(meta: SchemaMeta) -> list[str]:
    """Return the JSDoc body lines for *meta* (empty if nothing to say)."""
    lines: list[str] = []

    description = meta.description.strip() if isinstance(meta.description, str) else ""
    if description:
        lines.extend(line.rstrip() for line in description.split("\n"))

    if meta.deprecated is True:
        lines.append("@deprecated")
    elif isinstance(meta.deprecated, str) and meta.deprecated.strip():
        lines.append(f"@deprecated {meta.deprecated.strip()}")

    for tag, value in (
        ("since", meta.since),
        ("default", meta.default),
        ("see", meta.see),
        ("example", meta.example),
    ):
        if isinstance(value, str) and value.strip():
            lines.append(f"@{tag} {value.strip()}")

    if isinstance(meta.examples, (list, tuple)):
        for example in meta.examples:
            if isinstance(example, str) and example.strip():
                lines.append(f"@example {example.strip()}")

    return lines


def build_doc_comment(lines: list[str], indent: str = "", compact: bool = False) -> str:
    """Format *lines* as a JSDoc block.

    With *compact*, a single line is rendered as ``/** text */``.
    """
    if not lines:
        return ""
    if compact and len(lines) == 1:
        return f"{indent}/** {escape_for_jsdoc(lines[0])} */"
    body = "\n".join(
        f"{indent} * {escape_for_jsdoc(line)}" if line else f"{indent} *"
        for line in lines
    )
    return f"{indent}/**\n{body}\n{indent} */"


# ------------------------------------------------------------------
# Hand-written field comments
# ------------------------------------------------------------------

def harvest_field_comments(model: type[BaseModel]) -> dict[str, str]:
    """Map field names to the ``#`` comment written right above them.

    Only comment lines directly preceding a field declaration in a class
    body count; a blank line in between breaks the association.  Text inside
    the class docstring is never taken for a comment.  Fields inherited from
    other models pick up the comments of the class that declares them.
    Classes without retrievable source contribute nothing.
    """
    comments: dict[str, str] = {}

    for klass in reversed(model.__mro__):
        if klass is BaseModel or not (isinstance(klass, type) and issubclass(klass, BaseModel)):
            continue
        try:
            source = textwrap.dedent(inspect.getsource(klass))
            tree = ast.parse(source)
        except (OSError, TypeError, SyntaxError):
            logger.debug("No source available for %s; skipping comment harvest", klass.__name__)
            continue

        class_def = next((node for node in tree.body if isinstance(node, ast.ClassDef)), None)
        if class_def is None:
            continue
        lines = source.splitlines()
        floor = class_def.lineno
        for node in class_def.body:
            if (
                isinstance(node, ast.AnnAssign)
                and isinstance(node.target, ast.Name)
                and node.target.id in model.model_fields
            ):
                text = _comment_above(lines, node.lineno, floor)
                if text:
                    comments[node.target.id] = text
            floor = node.end_lineno or node.lineno

    return comments


def _comment_above(lines: list[str], lineno: int, floor: int) -> str:
    # lineno and floor are 1-based; only lines strictly between them qualify.
    pending: list[str] = []
    index = lineno - 2
    while index >= floor:
        stripped = lines[index].strip()
        if not stripped.startswith("#"):
            break
        pending.append(stripped.lstrip("#").strip())
        index -= 1
    return " ".join(part for part in reversed(pending) if part)
