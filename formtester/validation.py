"""JSON Schema validation engine used by form requests.

Form requests express their rules as a JSON Schema. The ValidationEngine
validates request input against it and translates jsonschema's errors into
FieldError objects with a field path, an error code and a message. Form
requests may override any message by field ("email") or by field and
validator keyword ("email.required").
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import jsonschema
from jsonschema import Draft7Validator

from formtester.errors import FieldError, group_messages
from formtester.types import FieldErrorCode


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating request input against a JSON Schema.

    Attributes:
        is_valid: Whether the data passed all validation checks
        errors: List of field-level validation errors (empty if valid)
        data: The validated data
        missing_fields: List of required field paths that are missing
        invalid_fields: List of field paths that failed validation

    Examples:
        >>> schema = {'type': 'object', 'properties': {'name': {'type': 'string'}}, 'required': ['name']}
        >>> engine = ValidationEngine(schema)
        >>> result = engine.validate({'name': 'test'})
        >>> result.is_valid
        True
        >>> result.messages()
        {}
    """
    is_valid: bool
    errors: List[FieldError]
    data: Optional[Dict[str, Any]] = None
    missing_fields: Optional[List[str]] = None
    invalid_fields: Optional[List[str]] = None

    def messages(self) -> Dict[str, List[str]]:
        """Field path -> ordered messages."""
        return group_messages(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "isValid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
        }
        if self.data is not None:
            result["data"] = self.data
        if self.missing_fields is not None:
            result["missingFields"] = self.missing_fields
        if self.invalid_fields is not None:
            result["invalidFields"] = self.invalid_fields
        return result


class ValidationEngine:
    """JSON Schema validation engine for form request input.

    Attributes:
        schema: The JSON Schema definition to validate against
        custom_messages: Message overrides keyed by "field" or "field.validator"
        validator: The underlying jsonschema validator instance

    Examples:
        >>> schema = {
        ...     'type': 'object',
        ...     'properties': {'email': {'type': 'string'}},
        ...     'required': ['email']
        ... }
        >>> engine = ValidationEngine(schema, {'email.required': 'Email is required'})
        >>> engine.validate({}).messages()
        {'email': ['Email is required']}
    """

    def __init__(self, schema: Dict[str, Any], messages: Optional[Dict[str, str]] = None) -> None:
        """Initialize the validation engine with a JSON Schema.

        Args:
            schema: A JSON Schema definition (Draft 7 or compatible)
            messages: Optional message overrides

        Raises:
            jsonschema.SchemaError: If the provided schema is invalid
        """
        self.schema = schema
        self.custom_messages = dict(messages or {})
        Draft7Validator.check_schema(schema)
        self.validator = Draft7Validator(schema, format_checker=Draft7Validator.FORMAT_CHECKER)

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        """Validate request input against the schema.

        Args:
            data: The request input to validate

        Returns:
            ValidationResult with is_valid flag and errors list
        """
        errors = list(self.validator.iter_errors(data))

        if not errors:
            return ValidationResult(
                is_valid=True,
                errors=[],
                data=data,
                missing_fields=[],
                invalid_fields=[],
            )

        field_errors: List[FieldError] = []
        missing_fields: List[str] = []
        invalid_fields: List[str] = []

        for error in errors:
            field_error = self._apply_custom_message(self._translate_error(error), error.validator)
            field_errors.append(field_error)

            if field_error.code == FieldErrorCode.REQUIRED:
                missing_fields.append(field_error.path)
            else:
                invalid_fields.append(field_error.path)

        return ValidationResult(
            is_valid=False,
            errors=field_errors,
            data=data,
            missing_fields=missing_fields,
            invalid_fields=invalid_fields,
        )

    def _apply_custom_message(self, field_error: FieldError, keyword: str) -> FieldError:
        message = self.custom_messages.get(
            f"{field_error.path}.{keyword}",
            self.custom_messages.get(field_error.path),
        )
        if message is None:
            return field_error
        return FieldError(
            path=field_error.path,
            code=field_error.code,
            message=message,
            expected=field_error.expected,
            received=field_error.received,
        )

    def _translate_error(self, error: jsonschema.ValidationError) -> FieldError:
        """Translate a jsonschema ValidationError to a FieldError.

        Error mapping:
            - 'required' property errors -> REQUIRED
            - 'type' errors -> INVALID_TYPE
            - 'format' and 'pattern' errors -> INVALID_FORMAT
            - 'enum', 'const' and numeric bound errors -> INVALID_VALUE
            - 'minLength' errors -> TOO_SHORT
            - 'maxLength' errors -> TOO_LONG
            - anything else -> CUSTOM
        """
        path = ".".join(str(p) for p in error.path)

        if error.validator == "required":
            # One error per missing property, reported as "<repr(name)> is a required property"
            missing = [p for p in error.validator_value if p not in error.instance]
            missing_prop = next(
                (p for p in missing if error.message.startswith(repr(p))),
                missing[0] if missing else "field",
            )
            full_path = f"{path}.{missing_prop}" if path else missing_prop
            return FieldError(
                path=full_path,
                code=FieldErrorCode.REQUIRED,
                message=f"The {full_path} field is required.",
                expected="required field",
                received=None,
            )

        if error.validator == "type":
            received_type = type(error.instance).__name__
            return FieldError(
                path=path,
                code=FieldErrorCode.INVALID_TYPE,
                message=f"The {path} field must be of type {error.validator_value}, got {received_type}.",
                expected=error.validator_value,
                received=received_type,
            )

        if error.validator == "format":
            return FieldError(
                path=path,
                code=FieldErrorCode.INVALID_FORMAT,
                message=f"The {path} field must be a valid {error.validator_value}.",
                expected=error.validator_value,
                received=error.instance,
            )

        if error.validator in ("enum", "const"):
            return FieldError(
                path=path,
                code=FieldErrorCode.INVALID_VALUE,
                message=f"The selected {path} is invalid. Must be one of: {error.validator_value}",
                expected=error.validator_value,
                received=error.instance,
            )

        if error.validator in ("minLength", "maxLength"):
            limit = error.validator_value
            actual_length = len(error.instance) if error.instance else 0
            too_short = error.validator == "minLength"
            return FieldError(
                path=path,
                code=FieldErrorCode.TOO_SHORT if too_short else FieldErrorCode.TOO_LONG,
                message=(
                    f"The {path} field must be at least {limit} characters."
                    if too_short
                    else f"The {path} field must not be greater than {limit} characters."
                ),
                expected=f"{'minimum' if too_short else 'maximum'} {limit} characters",
                received=f"{actual_length} characters",
            )

        if error.validator in ("minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum"):
            return FieldError(
                path=path,
                code=FieldErrorCode.INVALID_VALUE,
                message=f"The {path} field violates {error.validator} constraint: {error.validator_value}",
                expected=f"{error.validator}: {error.validator_value}",
                received=error.instance,
            )

        if error.validator == "pattern":
            return FieldError(
                path=path,
                code=FieldErrorCode.INVALID_FORMAT,
                message=f"The {path} field format is invalid.",
                expected=f"pattern: {error.validator_value}",
                received=error.instance,
            )

        return FieldError(
            path=path,
            code=FieldErrorCode.CUSTOM,
            message=f"The {path} field is invalid: {error.message}",
            expected=error.validator_value,
            received=error.instance,
        )


__all__ = [
    "ValidationEngine",
    "ValidationResult",
]
