"""
charspec/codegen/render.py -- Annotation -> TypeScript type expression.

``TypeRenderer`` walks live pydantic models and ``SchemaRule`` annotations
(not source text) and produces declaration text for one output module.

Named types are found by identity through a ``TypeRegistry`` shared by all
modules of a run: a model class or ``SchemaRule.annotation`` that some
module exports renders as that module's type name (plus an ``import type``
when it lives elsewhere).  Models nobody exports are hoisted into
non-exported auxiliary aliases of the module being rendered.
"""

from __future__ import annotations

import enum
import inspect
import json
import logging
import posixpath
import re
import types
from collections.abc import Mapping, MutableMapping, MutableSequence, MutableSet, Sequence
from collections.abc import Set as AbstractSet
from dataclasses import dataclass
from decimal import Decimal
from typing import Annotated, Any, Literal, Optional, Union, get_args, get_origin

from pydantic import BaseModel, RootModel

from charspec.codegen.errors import SchemaExtractionError
from charspec.codegen.meta import build_doc_comment, doc_lines, harvest_field_comments, read_schema_meta
from charspec.codegen.overrides import (
    explicit_override,
    is_custom_marker,
    known_instance_type,
    resolve_custom_type,
    string_format_type,
)

logger = logging.getLogger(__name__)

IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

INDENT = "    "

_ARRAY_ORIGINS = (list, set, frozenset, Sequence, MutableSequence, AbstractSet, MutableSet)
_MAPPING_ORIGINS = (dict, Mapping, MutableMapping)


@dataclass(frozen=True)
class TypeRef:
    """Where a named declaration lives: ``module_path`` is POSIX, no suffix."""

    name: str
    module_path: str


class TypeRegistry:
    """Identity map from schema objects to the declarations exporting them.

    The first registration of an object wins.  Plain classes other than
    models (``str``, ``int``, ...) and ``Any`` are never registered, so a
    ``SchemaRule(str)`` does not capture every string in the tree.
    """

    def __init__(self):
        self._refs: dict[int, tuple[Any, TypeRef]] = {}

    def register(self, obj: Any, ref: TypeRef) -> None:
        if obj is Any or obj is None:
            return
        if isinstance(obj, type) and not issubclass(obj, BaseModel):
            return
        self._refs.setdefault(id(obj), (obj, ref))

    def lookup(self, obj: Any) -> Optional[TypeRef]:
        found = self._refs.get(id(obj))
        if found is not None and found[0] is obj:
            return found[1]
        return None


class TypeRenderer:
    """Renders the declarations of one output module.

    Parameters
    ----------
    module_path : str
        POSIX path of the output module relative to the output root.
    registry : TypeRegistry
        Exported declarations of the whole run.
    local_names : set[str]
        Type names exported by this module; auxiliary names avoid them.
    probe_predicates : bool
        Allow guessing custom predicate types from sample values.
    """

    def __init__(
        self,
        module_path: str,
        registry: TypeRegistry,
        local_names: set[str],
        probe_predicates: bool = False,
    ):
        self.module_path = module_path
        self.registry = registry
        self.probe_predicates = probe_predicates
        self.imports: dict[str, set[str]] = {}
        self._taken = set(local_names)
        self._aux_names: dict[type, str] = {}
        self._aux_bodies: dict[str, str] = {}
        self._aux_pending: list[type] = []
        self._context = module_path

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def render_entry(self, schema: Any, ref: TypeRef) -> str:
        """Return the type expression declared for an exported schema."""
        self._context = f"{self.module_path}:{ref.name}"
        target = schema.annotation if not _is_model(schema) else schema
        if _is_model(target):
            owner = self.registry.lookup(target)
            if owner is None or owner == ref:
                return self.render_object(target)
            return self._reference(owner)
        return self.render(target, skip_ref=True)

    def drain_auxiliary(self) -> list[tuple[str, str]]:
        """Render every pending auxiliary model; returns ``(name, body)`` sorted by name."""
        while self._aux_pending:
            model = self._aux_pending.pop(0)
            name = self._aux_names[model]
            self._context = f"{self.module_path}:{name}"
            self._aux_bodies[name] = self.render_object(model)
        return sorted(self._aux_bodies.items())

    def import_lines(self) -> list[str]:
        lines = []
        for module_path in sorted(self.imports):
            names = ", ".join(sorted(self.imports[module_path]))
            lines.append(f'import type {{ {names} }} from "{relative_specifier(self.module_path, module_path)}";')
        return lines

    # ------------------------------------------------------------------
    # Annotations
    # ------------------------------------------------------------------

    def render(self, annotation: Any, skip_ref: bool = False) -> str:
        if not skip_ref:
            ref = self.registry.lookup(annotation)
            if ref is not None:
                return self._reference(ref)

        if annotation is Any or annotation is object:
            return "unknown"
        if annotation is None or annotation is type(None):
            return "null"

        origin = get_origin(annotation)
        args = get_args(annotation)

        if origin is Annotated:
            return self._render_annotated(args[0], list(annotation.__metadata__))
        if origin is Literal:
            return " | ".join(_literal(value) for value in args)
        if origin is Union or origin is types.UnionType:
            return _join_union(self.render(arg) for arg in args)
        if origin in _ARRAY_ORIGINS:
            return _array(self.render(args[0]) if args else "unknown")
        if origin is tuple:
            return self._render_tuple(args)
        if origin in _MAPPING_ORIGINS:
            key, value = (self.render(args[0]), self.render(args[1])) if args else ("string", "unknown")
            return f"Record<{key}, {value}>"
        if origin is type:
            return "unknown"

        if isinstance(annotation, type):
            return self._render_class(annotation)

        value = getattr(annotation, "__value__", None)
        if value is not None:
            # PEP 695 ``type X = ...`` aliases
            return self.render(value)

        raise SchemaExtractionError(
            f"Unsupported annotation {annotation!r}. Add TsType(...) to declare its type.",
            self._context,
        )

    def _render_annotated(self, base: Any, metadata: list[Any]) -> str:
        override = explicit_override(metadata)
        if override is not None:
            return override
        markers = [item for item in metadata if is_custom_marker(item)]
        if markers and (base is Any or base is object):
            return resolve_custom_type(markers[-1], self._context, self.probe_predicates)
        # Constraints and refinements on a concrete base keep the base type.
        return self.render(base)

    def _render_tuple(self, args: tuple[Any, ...]) -> str:
        if len(args) == 2 and args[1] is Ellipsis:
            return _array(self.render(args[0]))
        if args == ((),):
            return "[]"
        return "[" + ", ".join(self.render(arg) for arg in args) + "]"

    def _render_class(self, cls: type) -> str:
        if issubclass(cls, BaseModel):
            return self._model_reference(cls)
        if issubclass(cls, enum.Enum):
            return " | ".join(_literal(member.value) for member in cls) or "never"
        if cls is bool:
            return "boolean"
        if issubclass(cls, str):
            return "string"

        builtin = known_instance_type(cls) or string_format_type(cls)
        if builtin:
            return builtin
        if issubclass(cls, (int, float, Decimal)):
            return "number"
        if cls in (list, tuple, set, frozenset):
            return "unknown[]"
        if cls is dict:
            return "Record<string, unknown>"

        raise SchemaExtractionError(
            f"Cannot derive a declaration for class {cls.__module__}.{cls.__qualname__}. "
            "Add TsType(...) or json_schema_extra={'ts_type': ...} to the field.",
            self._context,
        )

    # ------------------------------------------------------------------
    # Models
    # ------------------------------------------------------------------

    def render_object(self, model: type[BaseModel]) -> str:
        """Render *model* as an object literal type, one property per field."""
        hints = field_annotations(model, self._context)

        if issubclass(model, RootModel):
            return self.render(hints["root"])

        if not model.model_fields:
            return "{}"

        comments = harvest_field_comments(model)
        lines = ["{"]
        for name, field in model.model_fields.items():
            key = field.serialization_alias or field.alias or name
            annotation = hints[name]
            optional = not field.is_required() and field.default is None
            if optional:
                annotation = _without_none(annotation)

            meta = read_schema_meta(field)
            if isinstance(meta.ts_type, str) and meta.ts_type.strip():
                type_text = meta.ts_type.strip()
            else:
                type_text = self.render(annotation)

            if name in comments:
                doc = [comments[name]]
            else:
                doc = doc_lines(meta)
            if doc:
                lines.append(build_doc_comment(doc, INDENT, compact=True))

            marker = "?" if optional else ""
            lines.append(f"{INDENT}{_property_key(key)}{marker}: {type_text};")
        lines.append("}")
        return "\n".join(lines)

    def _model_reference(self, model: type[BaseModel]) -> str:
        ref = self.registry.lookup(model)
        if ref is not None:
            return self._reference(ref)

        name = self._aux_names.get(model)
        if name is None:
            name = self._claim_name(_auxiliary_name(model))
            self._aux_names[model] = name
            self._aux_pending.append(model)
            logger.debug("%s: hoisting %s as auxiliary type %s", self.module_path, model.__name__, name)
        return name

    def _reference(self, ref: TypeRef) -> str:
        if ref.module_path == self.module_path:
            return ref.name
        names = self.imports.setdefault(ref.module_path, set())
        if ref.name not in names:
            if ref.name in self._taken:
                raise SchemaExtractionError(
                    f"Imported type {ref.name} from {ref.module_path} collides with a "
                    "declaration of the same name in this module.",
                    self._context,
                )
            names.add(ref.name)
            self._taken.add(ref.name)
        return ref.name

    def _claim_name(self, base: str) -> str:
        name, counter = base, 2
        while name in self._taken:
            name = f"{base}{counter}"
            counter += 1
        self._taken.add(name)
        return name


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def field_annotations(model: type[BaseModel], context: str) -> dict[str, Any]:
    """Return the declared annotation of each field of *model*.

    Unlike ``FieldInfo.annotation`` these keep ``Annotated`` metadata and the
    identity of module-level aliases (``File``, ``Role``), which is what
    lets named rules render by name.  Only the model's own classes are
    evaluated; pydantic's internals are never touched.
    """
    hints: dict[str, Any] = {}
    for klass in reversed(model.__mro__):
        if not (isinstance(klass, type) and issubclass(klass, BaseModel)) or klass in (BaseModel, RootModel):
            continue
        try:
            own = inspect.get_annotations(klass, eval_str=True)
        except Exception as exc:
            raise SchemaExtractionError(
                f"Cannot resolve annotations of {klass.__qualname__}: {exc}",
                context,
            ) from exc
        for name, annotation in own.items():
            if name in model.model_fields:
                hints[name] = annotation

    for name, field in model.model_fields.items():
        if name not in hints:
            annotation = field.annotation
            if field.metadata:
                annotation = Annotated[(annotation, *field.metadata)]
            hints[name] = annotation
    return hints


def relative_specifier(from_module: str, to_module: str) -> str:
    """Relative import specifier from one output module to another."""
    start = posixpath.dirname(from_module) or "."
    rel = posixpath.relpath(to_module, start)
    return rel if rel.startswith("../") else f"./{rel}"


def _is_model(obj: Any) -> bool:
    return isinstance(obj, type) and issubclass(obj, BaseModel)


def _without_none(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = tuple(arg for arg in get_args(annotation) if arg is not type(None))
        if len(args) == 1:
            return args[0]
        return Union[args]
    return annotation


def _auxiliary_name(model: type[BaseModel]) -> str:
    name = model.__name__
    if name.endswith("Schema") and len(name) > len("Schema"):
        name = name[: -len("Schema")]
    name = name[:1].upper() + name[1:]
    return name if IDENTIFIER.match(name) else "Anonymous"


def _literal(value: Any) -> str:
    if isinstance(value, enum.Enum):
        value = value.value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    return json.dumps(str(value), ensure_ascii=False)


def _join_union(parts: Any) -> str:
    seen: list[str] = []
    for part in parts:
        if part not in seen:
            seen.append(part)
    return " | ".join(seen)


def _array(inner: str) -> str:
    if " | " in inner or " & " in inner:
        return f"({inner})[]"
    return f"{inner}[]"


def _property_key(key: str) -> str:
    return key if IDENTIFIER.match(key) else json.dumps(key, ensure_ascii=False)
