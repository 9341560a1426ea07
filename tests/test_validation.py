"""
Tests for charspec/validation.py -- the validation entry point.

Covers:
    - validate / safe_validate / validate_fail_fast
    - Aggregated issues with dotted paths and humanized messages
    - Version dispatch through parse_character / parse_character_json
    - to_plain dumping and re-validation
"""

import json

import pytest


# ======================================================================
# validate / safe_validate
# ======================================================================


class TestValidate:
    """Tests for validate()."""

    def test_returns_model(self):
        from charspec.types.v0.character.meta import MetaSchema
        from charspec.validation import validate
        meta = validate(MetaSchema, {"author": "me"})
        assert isinstance(meta, MetaSchema)
        assert meta.license == "ARR"

    def test_accepts_schema_rule(self):
        from charspec.types.v0.utils import PositiveIntegerSchema
        from charspec.validation import validate
        assert validate(PositiveIntegerSchema, 5) == 5

    def test_rejects_non_schema(self):
        from charspec.validation import validate
        with pytest.raises(TypeError):
            validate(dict, {})

    def test_reports_every_missing_field(self):
        from charspec.types.v0.character.lorebook import LorebookEntrySchema
        from charspec.validation import CharacterValidationError, validate
        with pytest.raises(CharacterValidationError) as exc_info:
            validate(LorebookEntrySchema, {})
        issues = exc_info.value.issues
        assert {issue.path for issue in issues} == {"id", "name", "content"}
        assert all(issue.type == "missing" for issue in issues)
        assert "is required" in issues[0].message

    def test_aggregates_nested_issues(self):
        from charspec.types.v0.character.lorebook import LorebookDataSchema
        from charspec.validation import CharacterValidationError, validate
        data = {
            "config": {"tokenLimit": 0},
            "data": [{"id": "1", "name": "entry"}],
        }
        with pytest.raises(CharacterValidationError) as exc_info:
            validate(LorebookDataSchema, data)
        paths = {issue.path for issue in exc_info.value.issues}
        assert paths == {"config.tokenLimit", "data[0].content"}

    def test_error_is_chained(self):
        from pydantic import ValidationError
        from charspec.types.v0.character.meta import MetaSchema
        from charspec.validation import CharacterValidationError, validate
        with pytest.raises(CharacterValidationError) as exc_info:
            validate(MetaSchema, {"license": 5})
        assert isinstance(exc_info.value.__cause__, ValidationError)
        assert exc_info.value.issues[0].path == "license"
        assert "wrong type" in exc_info.value.issues[0].message

    def test_unknown_key_stripped(self):
        from charspec.types.v0.character.meta import MetaSchema
        from charspec.validation import to_plain, validate
        meta = validate(MetaSchema, {"author": "a", "extraThing": 1})
        assert to_plain(meta) == {"author": "a", "license": "ARR"}

    def test_explicit_null_message(self):
        from charspec.types.v0.character.meta import MetaSchema
        from charspec.validation import CharacterValidationError, validate
        with pytest.raises(CharacterValidationError) as exc_info:
            validate(MetaSchema, {"author": None, "version": None})
        issues = exc_info.value.issues
        assert {issue.path for issue in issues} == {"author", "version"}
        assert all(issue.type == "null_forbidden" for issue in issues)
        assert "must not be null" in issues[0].message

    def test_lorebook_entry_null_fields(self):
        from charspec.types.v0.character.lorebook import LorebookEntrySchema
        from charspec.validation import CharacterValidationError, validate
        data = {"id": "1", "name": "entry", "content": "c", "priority": None, "enabled": None}
        with pytest.raises(CharacterValidationError) as exc_info:
            validate(LorebookEntrySchema, data)
        assert {issue.path for issue in exc_info.value.issues} == {"priority", "enabled"}

    def test_refinement_message(self):
        from charspec.types.v0.character.assets import AssetsSettingSchema
        from charspec.validation import CharacterValidationError, validate
        asset = {"mimeType": "image/png", "name": "a", "data": "http://example.com/a.png"}
        with pytest.raises(CharacterValidationError) as exc_info:
            validate(AssetsSettingSchema, {"assets": [asset, asset]})
        issue = exc_info.value.issues[0]
        assert issue.path == "assets"
        assert "Not unique key: name" in issue.message


class TestSafeValidate:
    """Tests for safe_validate() and ValidationResult."""

    def test_passed(self):
        from charspec.types.v0.executables.replace_hook import ReplaceHookSchema
        from charspec.validation import safe_validate
        result = safe_validate(ReplaceHookSchema, {})
        assert result.passed is True
        assert result.issues == []
        assert result.value.display == []

    def test_failed(self):
        from charspec.types.v0.character.lorebook import LorebookDataSchema
        from charspec.validation import safe_validate
        result = safe_validate(LorebookDataSchema, {"config": {"tokenLimit": 0}})
        assert result.passed is False
        assert result.value is None
        assert len(result.errors) == 1
        assert result.to_dict() == {"passed": False, "errors": result.errors}


class TestFailFast:
    """Tests for validate_fail_fast()."""

    def test_single_issue(self):
        from charspec.types.v0.character.lorebook import LorebookEntrySchema
        from charspec.validation import CharacterValidationError, validate_fail_fast
        with pytest.raises(CharacterValidationError) as exc_info:
            validate_fail_fast(LorebookEntrySchema, {})
        assert len(exc_info.value.issues) == 1

    def test_success(self):
        from charspec.types.v0.character.meta import MetaSchema
        from charspec.validation import validate_fail_fast
        assert validate_fail_fast(MetaSchema, {}).license == "ARR"


# ======================================================================
# Version dispatch
# ======================================================================


class TestParseCharacter:
    """Tests for parse_character() and parse_character_json()."""

    def test_minimal(self, minimal_character_data):
        from charspec.types.v0.character.character import CharacterSchema
        from charspec.validation import parse_character
        character = parse_character(minimal_character_data)
        assert isinstance(character, CharacterSchema)

    @pytest.mark.parametrize("version", [7, None, "0", True])
    def test_unsupported_version(self, minimal_character_data, version):
        from charspec.validation import CharacterValidationError, parse_character
        data = dict(minimal_character_data, specVersion=version)
        with pytest.raises(CharacterValidationError) as exc_info:
            parse_character(data)
        issues = exc_info.value.issues
        assert len(issues) == 1
        assert issues[0].path == "specVersion"
        assert issues[0].type == "spec_version"

    def test_missing_version(self, minimal_character_data):
        from charspec.validation import CharacterValidationError, parse_character
        data = dict(minimal_character_data)
        del data["specVersion"]
        with pytest.raises(CharacterValidationError):
            parse_character(data)

    def test_non_mapping(self):
        from charspec.validation import CharacterValidationError, parse_character
        with pytest.raises(CharacterValidationError):
            parse_character(["not", "a", "character"])

    def test_json(self, minimal_character_data):
        from charspec.validation import parse_character_json
        character = parse_character_json(json.dumps(minimal_character_data))
        assert character.name == "Test"

    def test_invalid_json(self):
        from charspec.validation import CharacterValidationError, parse_character_json
        with pytest.raises(CharacterValidationError) as exc_info:
            parse_character_json("{not json")
        assert exc_info.value.issues[0].type == "json_invalid"

    def test_undecodable_bytes(self):
        from charspec.validation import CharacterValidationError, parse_character_json
        with pytest.raises(CharacterValidationError) as exc_info:
            parse_character_json(b'{"a": "\x80"}')
        assert exc_info.value.issues[0].type == "json_invalid"
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    def test_null_avatar(self, minimal_character_data):
        from charspec.validation import CharacterValidationError, parse_character
        with pytest.raises(CharacterValidationError) as exc_info:
            parse_character(dict(minimal_character_data, avatarUrl=None))
        assert exc_info.value.issues[0].path == "avatarUrl"


# ======================================================================
# Plain dumps
# ======================================================================


class TestToPlain:
    """Tests for to_plain()."""

    def test_camel_case_and_defaults(self, minimal_character_data):
        from charspec.validation import parse_character, to_plain
        plain = to_plain(parse_character(minimal_character_data))
        assert plain["specVersion"] == 0
        assert "avatarUrl" not in plain
        assert plain["metadata"] == {"license": "ARR"}
        assert plain["prompt"]["lorebook"] == {"config": {"tokenLimit": 4096}, "data": []}
        assert plain["executables"]["runtimeSetting"] == {"timeout": 3}

    def test_round_trip(self, full_character_data):
        from charspec.validation import parse_character, to_plain
        first = to_plain(parse_character(full_character_data))
        second = to_plain(parse_character(first))
        assert first == second

    def test_lists_and_plain_values(self):
        from charspec.types.v0.character.meta import MetaSchema
        from charspec.validation import to_plain
        metas = [MetaSchema(author="a"), MetaSchema()]
        assert to_plain(metas) == [{"author": "a", "license": "ARR"}, {"license": "ARR"}]
        assert to_plain({"k": 1}) == {"k": 1}
        assert to_plain("text") == "text"


class TestFormatPath:
    """Tests for format_path()."""

    def test_nested(self):
        from charspec.validation import format_path
        assert format_path(("data", 1, "id")) == "data[1].id"

    def test_root(self):
        from charspec.validation import format_path
        assert format_path(()) == "(root)"
