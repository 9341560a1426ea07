"""
charspec/validation.py -- Validation entry point for character data.

Every consumer (persistence, transport, UI) validates through this module:

    validate(schema, data)        validated value, or CharacterValidationError
                                  listing every violated constraint
    safe_validate(schema, data)   ValidationResult, never raises for bad data
    validate_fail_fast(...)       like validate, reports the first issue only
    parse_character(data)         picks the Character schema from ``specVersion``
    parse_character_json(payload) same, for a JSON document
    to_plain(value)               plain camelCase dict/list form of a value

Failures are always aggregated: pydantic collects all field errors of a
pass before reporting, so a caller can fix every problem in one go.

Usage::

    from charspec.validation import safe_validate
    from charspec.types.v0.character.meta import MetaSchema

    result = safe_validate(MetaSchema, {})
    result.value.license        # "ARR"
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from charspec.schema import SchemaRule, is_schema
from charspec.types import SpecVersion, character_map

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Issues and errors
# ------------------------------------------------------------------

@dataclass(frozen=True)
class ValidationIssue:
    """A single violated constraint."""

    path: str
    message: str
    type: str = ""


class CharacterValidationError(ValueError):
    """Aggregate validation failure.

    Attributes
    ----------
    issues : list[ValidationIssue]
        One entry per violated constraint, in the order pydantic reported them.
    """

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        summary = "; ".join(issue.message for issue in issues)
        super().__init__(f"{len(issues)} validation error(s): {summary}")

    @classmethod
    def from_pydantic(cls, exc: ValidationError, data: Any = None) -> "CharacterValidationError":
        return cls([_issue_from_error(err, data) for err in exc.errors()])


class ValidationResult:
    """Result of validating data against a schema.

    Attributes
    ----------
    passed : bool
        Whether validation succeeded.
    issues : list[ValidationIssue]
        Violated constraints (empty if passed).
    value : object | None
        The validated value (only set if passed).
    """

    __slots__ = ("passed", "issues", "value")

    def __init__(self, passed: bool, issues: list[ValidationIssue], value: Any):
        self.passed = passed
        self.issues = issues
        self.value = value

    @property
    def errors(self) -> list[str]:
        return [issue.message for issue in self.issues]

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "errors": self.errors,
        }


# ------------------------------------------------------------------
# Entry points
# ------------------------------------------------------------------

def validate(schema: Any, data: Any) -> Any:
    """Validate *data* against *schema* (a model class or ``SchemaRule``).

    Raises
    ------
    CharacterValidationError
        If any constraint is violated.  All violations are reported.
    TypeError
        If *schema* is not a schema-rule.
    """
    if not is_schema(schema):
        raise TypeError(f"Expected a schema model or SchemaRule, got {schema!r}")

    try:
        if isinstance(schema, SchemaRule):
            return schema.validate(data)
        return schema.model_validate(data)
    except ValidationError as exc:
        error = CharacterValidationError.from_pydantic(exc, data)
        logger.debug("Validation against %s failed with %d issue(s)", _schema_name(schema), len(error.issues))
        raise error from exc


def safe_validate(schema: Any, data: Any) -> ValidationResult:
    """Like :func:`validate`, but returns a ``ValidationResult`` instead of raising."""
    try:
        value = validate(schema, data)
    except CharacterValidationError as exc:
        return ValidationResult(passed=False, issues=exc.issues, value=None)
    return ValidationResult(passed=True, issues=[], value=value)


def validate_fail_fast(schema: Any, data: Any) -> Any:
    """Like :func:`validate`, but the raised error carries only the first issue."""
    try:
        return validate(schema, data)
    except CharacterValidationError as exc:
        raise CharacterValidationError(exc.issues[:1]) from exc.__cause__


def parse_character(data: Any) -> BaseModel:
    """Validate a character of any supported spec version.

    The ``specVersion`` tag selects the schema from ``character_map``.
    """
    return validate(_character_schema_for(data), data)


def parse_character_json(payload: str | bytes) -> BaseModel:
    """Like :func:`parse_character`, for a JSON document.

    JSON mode decodes base64 strings back into binary asset data.
    """
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise CharacterValidationError([
            ValidationIssue(path="(root)", message=f"Invalid JSON: {exc}", type="json_invalid")
        ]) from exc

    schema = _character_schema_for(data)
    try:
        return schema.model_validate_json(payload)
    except ValidationError as exc:
        raise CharacterValidationError.from_pydantic(exc, data) from exc


def _character_schema_for(data: Any) -> type[BaseModel]:
    version = data.get("specVersion") if isinstance(data, Mapping) else None
    if isinstance(version, bool) or not isinstance(version, int) or version not in set(SpecVersion):
        supported = ", ".join(str(int(v)) for v in sorted(character_map))
        raise CharacterValidationError([
            ValidationIssue(
                path="specVersion",
                message=(
                    f"The field 'specVersion' has an unsupported value {version!r}. "
                    f"Supported versions: {supported}."
                ),
                type="spec_version",
            )
        ])
    return character_map[SpecVersion(version)]


def to_plain(value: Any) -> Any:
    """Return the plain representation of a validated value.

    Models become dicts keyed by wire names; absent optional fields are
    omitted.  Validating the result again with the same schema gives back
    an equal value.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True)
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    if isinstance(value, Mapping):
        return {key: to_plain(item) for key, item in value.items()}
    return value


# ------------------------------------------------------------------
# Error humanization
# ------------------------------------------------------------------

def format_path(loc: tuple[Any, ...]) -> str:
    """``("data", 1, "id")`` -> ``"data[1].id"``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path or "(root)"


def _issue_from_error(err: dict, data: Any) -> ValidationIssue:
    path = format_path(tuple(err.get("loc", ())))
    return ValidationIssue(
        path=path,
        message=_humanize_pydantic_error(err, path, data),
        type=err.get("type", ""),
    )


def _humanize_pydantic_error(err: dict, field_path: str, data: Any) -> str:
    """Convert a single pydantic error dict to a human-friendly message.

    Pydantic error dicts look like::

        {
            "type": "string_type",
            "loc": ("prompt", "description"),
            "msg": "Input should be a valid string",
            "input": 42,
        }
    """
    msg = err.get("msg", "Validation error")
    err_type = err.get("type", "")

    entity_name = "the input"
    if isinstance(data, Mapping):
        entity_name = f"'{data.get('name', data.get('id', 'this entity'))}'"

    if err_type == "missing":
        return f"The field '{field_path}' is required for {entity_name} but was not provided."
    elif err_type == "null_forbidden":
        return f"The field '{field_path}' may be omitted but must not be null."
    elif err_type == "literal_error":
        return f"The field '{field_path}' has an invalid value. {msg}."
    elif err_type.startswith("union_tag"):
        return f"The field '{field_path}' does not match any variant. {msg}."
    elif err_type == "custom":
        return f"The field '{field_path}' failed a check: {msg}."
    elif "type" in err_type:
        return f"The field '{field_path}' has the wrong type. {msg}."
    else:
        return f"Field '{field_path}': {msg}."


def _schema_name(schema: Any) -> str:
    return getattr(schema, "__name__", None) or repr(schema)
