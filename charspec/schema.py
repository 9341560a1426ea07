"""
charspec/schema.py -- Shared building blocks for the character schemas.

Every entity schema in ``charspec.types`` is built from the pieces defined
here:

    SchemaModel   Frozen pydantic base model.  camelCase wire names,
                  unknown keys dropped, explicit nulls rejected, bytes
                  exchanged as base64 in JSON.
    SchemaRule    A named validation rule for any annotated type that is not
                  an object shape (unions, literals, refined primitives).
    Predicate     Annotation marker running an arbitrary check after the
                  base type validated.  Carries an optional ``instance_of``
                  descriptor so the declaration generator can type it.
    TsType        Annotation marker forcing the declaration type emitted for
                  a node.  Pure side data, ignored by validation.

Usage::

    from typing import Annotated, Any
    from charspec.schema import Predicate, SchemaRule, TsType

    EvenSchema = SchemaRule(
        Annotated[int, Predicate(lambda v: v % 2 == 0, message="Not even")],
        description="An even integer.",
    )
    EvenSchema.validate(4)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Annotated, Any, Callable, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError, core_schema

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SchemaModel(BaseModel):
    """Base for every object-shaped schema.

    Optional fields (``Optional[X] = None``) may be omitted but not sent as
    ``null``; ``None`` only marks a field that was absent from the input.
    Undeclared keys are dropped.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    @field_validator("*", mode="before")
    @classmethod
    def _reject_explicit_null(cls, value: Any, info: ValidationInfo) -> Any:
        # Runs for provided values only, so the None default stays valid.
        if value is None and info.field_name is not None:
            field = cls.model_fields[info.field_name]
            if not field.is_required() and field.default is None:
                raise PydanticCustomError("null_forbidden", "Input should be omitted instead of null")
        return value


# ------------------------------------------------------------------
# Annotation markers
# ------------------------------------------------------------------

@dataclass(frozen=True)
class TsType:
    """Explicit declaration type for the annotated node, e.g. ``TsType("Uint8Array")``."""

    text: str


@dataclass(frozen=True)
class Predicate:
    """Run *func* on the already-validated value; a falsy result is a failure.

    Attached to a concrete base type (``Annotated[list[X], Predicate(...)]``)
    it is a refinement.  Attached to ``Any`` it is the whole type check, in
    which case the declaration generator needs ``instance_of`` or a
    ``TsType`` marker to know what to emit.
    """

    func: Callable[[Any], Any]
    message: str = "Invalid input"
    instance_of: Optional[type] = None

    def __get_pydantic_core_schema__(self, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(self._check, handler(source_type))

    def _check(self, value: Any) -> Any:
        if not self.func(value):
            raise PydanticCustomError("custom", self.message)
        return value


def instance_of(cls: type) -> Any:
    """Return an annotation accepting only instances of *cls*."""
    return Annotated[
        Any,
        Predicate(
            lambda value: isinstance(value, cls),
            message=f"Input should be an instance of {cls.__name__}",
            instance_of=cls,
        ),
    ]


# ------------------------------------------------------------------
# SchemaRule
# ------------------------------------------------------------------

class SchemaRule(Generic[T]):
    """A validation rule for a single annotated type.

    Parameters
    ----------
    annotation
        Any type pydantic can validate (``Literal``, ``Annotated``,
        unions of models, ...).  Models reuse it as a field annotation.
    description, deprecated, examples
        Documentation metadata, never used by validation.
    **extra
        Further documentation keys (``since``, ``see``, ``default``,
        ``example``) and the ``ts_type`` override.
    """

    def __init__(
        self,
        annotation: Any,
        *,
        description: Optional[str] = None,
        deprecated: Any = None,
        examples: Optional[list[Any]] = None,
        **extra: Any,
    ):
        self.annotation = annotation
        self.description = description
        self.deprecated = deprecated
        self.examples = examples
        self.extra = extra
        self._adapter: TypeAdapter[T] = TypeAdapter(annotation)

    def validate(self, value: Any) -> T:
        """Validate a plain Python value; raises ``pydantic.ValidationError``."""
        return self._adapter.validate_python(value)

    def validate_json(self, data: str | bytes) -> T:
        return self._adapter.validate_json(data)

    def dump(self, value: T) -> Any:
        """Plain representation with wire names and absent optionals dropped."""
        return self._adapter.dump_python(value, by_alias=True, exclude_none=True)

    def __repr__(self) -> str:
        return f"SchemaRule({self.annotation!r})"


def is_schema(value: Any) -> bool:
    """Return True if *value* is a schema-rule: a model class or a ``SchemaRule``."""
    if isinstance(value, SchemaRule):
        return True
    return isinstance(value, type) and issubclass(value, BaseModel)
