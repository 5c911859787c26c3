"""Unit tests for the validation engine.

Tests cover:
- Missing required fields (root level and nested)
- Type, length, numeric, pattern and format constraints
- Custom message overrides
- Grouping of messages by field
- ValidationResult structure
"""

import jsonschema
import pytest

from formtester.errors import FieldError
from formtester.types import FieldErrorCode
from formtester.validation import ValidationEngine, ValidationResult


USER_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 2, "maxLength": 20},
        "email": {"type": "string", "format": "email"},
        "age": {"type": "integer", "minimum": 18},
        "role": {"enum": ["admin", "editor"]},
        "zip": {"type": "string", "pattern": "^[0-9]{5}$"},
        "address": {
            "type": "object",
            "properties": {"city": {"type": "string"}},
            "required": ["city"],
        },
    },
    "required": ["name", "email"],
}


class TestRequiredFields:
    """Test validation of missing required fields."""

    def test_single_missing_field(self):
        """Should return a REQUIRED error naming the field."""
        engine = ValidationEngine(USER_SCHEMA)
        result = engine.validate({"name": "Ada"})

        assert result.is_valid is False
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.code == FieldErrorCode.REQUIRED
        assert error.path == "email"
        assert error.message == "The email field is required."
        assert error.expected == "required field"
        assert error.received is None

    def test_multiple_missing_fields(self):
        """Should report every missing field."""
        result = ValidationEngine(USER_SCHEMA).validate({})

        assert {error.path for error in result.errors} == {"name", "email"}
        assert sorted(result.missing_fields) == ["email", "name"]
        assert result.invalid_fields == []

    def test_nested_missing_field(self):
        """Should use a dotted path for nested fields."""
        result = ValidationEngine(USER_SCHEMA).validate(
            {"name": "Ada", "email": "ada@example.com", "address": {}}
        )

        assert result.is_valid is False
        assert result.errors[0].path == "address.city"
        assert result.errors[0].code == FieldErrorCode.REQUIRED

    def test_missing_field_name_with_quotes(self):
        """Should report field names containing quotes intact."""
        schema = {"type": "object", "required": ["owner's name", "title"]}
        result = ValidationEngine(schema).validate({"title": "Deed"})

        assert [error.path for error in result.errors] == ["owner's name"]
        assert result.missing_fields == ["owner's name"]

    def test_each_missing_field_reported_once(self):
        """Should name a different field in each required error."""
        schema = {"type": "object", "required": ["a", "it's", 'say "hi"']}
        result = ValidationEngine(schema).validate({})

        assert sorted(error.path for error in result.errors) == sorted(["a", "it's", 'say "hi"'])

    def test_all_required_present(self):
        """Should pass with every required field provided."""
        data = {"name": "Ada", "email": "ada@example.com"}
        result = ValidationEngine(USER_SCHEMA).validate(data)

        assert result.is_valid is True
        assert result.errors == []
        assert result.data == data
        assert result.missing_fields == []


class TestConstraints:
    """Test translation of constraint violations."""

    def base(self, **overrides):
        data = {"name": "Ada", "email": "ada@example.com"}
        data.update(overrides)
        return data

    @pytest.mark.parametrize("data,path,code", [
        ({"age": "old"}, "age", FieldErrorCode.INVALID_TYPE),
        ({"name": "A"}, "name", FieldErrorCode.TOO_SHORT),
        ({"name": "A" * 21}, "name", FieldErrorCode.TOO_LONG),
        ({"age": 17}, "age", FieldErrorCode.INVALID_VALUE),
        ({"role": "owner"}, "role", FieldErrorCode.INVALID_VALUE),
        ({"zip": "abc"}, "zip", FieldErrorCode.INVALID_FORMAT),
        ({"email": "not-an-email"}, "email", FieldErrorCode.INVALID_FORMAT),
    ])
    def test_error_codes(self, data, path, code):
        """Should map each jsonschema validator to a field error code."""
        result = ValidationEngine(USER_SCHEMA).validate(self.base(**data))

        assert result.is_valid is False
        assert len(result.errors) == 1
        assert result.errors[0].path == path
        assert result.errors[0].code == code
        assert result.invalid_fields == [path]

    def test_type_error_reports_received_type(self):
        """Should report the received Python type name."""
        result = ValidationEngine(USER_SCHEMA).validate(self.base(age="old"))
        assert result.errors[0].expected == "integer"
        assert result.errors[0].received == "str"

    def test_length_error_reports_lengths(self):
        """Should report expected and actual lengths."""
        result = ValidationEngine(USER_SCHEMA).validate(self.base(name="A"))
        assert result.errors[0].expected == "minimum 2 characters"
        assert result.errors[0].received == "1 characters"
        assert result.errors[0].message == "The name field must be at least 2 characters."

    def test_unmapped_validator_is_custom(self):
        """Should fall back to CUSTOM for validators without a mapping."""
        schema = {"type": "object", "properties": {"tags": {"type": "array", "minItems": 2}}}
        result = ValidationEngine(schema).validate({"tags": ["a"]})
        assert result.errors[0].code == FieldErrorCode.CUSTOM
        assert result.errors[0].path == "tags"

    def test_invalid_schema_rejected(self):
        """Should refuse a schema that is not valid JSON Schema."""
        with pytest.raises(jsonschema.SchemaError):
            ValidationEngine({"type": "not-a-type"})


class TestCustomMessages:
    """Test message overrides."""

    def test_field_and_validator_override(self):
        """Should prefer the 'field.validator' override."""
        engine = ValidationEngine(USER_SCHEMA, {"email.required": "Email is required"})
        assert engine.validate({"name": "Ada"}).messages() == {"email": ["Email is required"]}

    def test_field_override(self):
        """Should fall back to the field-wide override."""
        engine = ValidationEngine(USER_SCHEMA, {"age": "Too young"})
        result = engine.validate({"name": "Ada", "email": "ada@example.com", "age": 3})
        assert result.messages() == {"age": ["Too young"]}

    def test_override_keeps_code(self):
        """Should keep the error code and context when replacing the message."""
        engine = ValidationEngine(USER_SCHEMA, {"name.minLength": "Name too short"})
        error = engine.validate({"name": "A", "email": "ada@example.com"}).errors[0]
        assert error.code == FieldErrorCode.TOO_SHORT
        assert error.expected == "minimum 2 characters"

    def test_unrelated_override_ignored(self):
        """Should keep the default message when no override matches."""
        engine = ValidationEngine(USER_SCHEMA, {"email.format": "Bad email"})
        assert engine.validate({"name": "Ada"}).messages() == {"email": ["The email field is required."]}


class TestValidationResult:
    """Test ValidationResult helpers."""

    def test_messages_grouped_by_field(self):
        """Should group messages per field in first-seen order."""
        result = ValidationResult(
            is_valid=False,
            errors=[
                FieldError(path="email", code=FieldErrorCode.REQUIRED, message="one"),
                FieldError(path="name", code=FieldErrorCode.TOO_SHORT, message="two"),
                FieldError(path="email", code=FieldErrorCode.CUSTOM, message="three"),
            ],
        )
        assert result.messages() == {"email": ["one", "three"], "name": ["two"]}
        assert list(result.messages()) == ["email", "name"]

    def test_to_dict(self):
        """Should serialize with camelCase keys."""
        result = ValidationEngine(USER_SCHEMA).validate({"name": "Ada"})
        result_dict = result.to_dict()

        assert result_dict["isValid"] is False
        assert result_dict["missingFields"] == ["email"]
        assert result_dict["invalidFields"] == []
        assert result_dict["errors"][0]["code"] == "required"
        assert result_dict["errors"][0]["path"] == "email"
