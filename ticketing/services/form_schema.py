"""Form schema engine — field definitions and submission validation.

Two entry points:
- validate_field_definitions: run once when a form is created or edited.
- validate_submission: pure check of submitted values against a form's fields.

Neither touches the database.
"""
import enum
import math
from typing import Any, Optional

from pydantic import BaseModel, EmailStr, TypeAdapter, ValidationError

from ticketing.exceptions import (
    FileTooLarge,
    InvalidFieldDefinition,
    InvalidFieldFormat,
    InvalidFileType,
    InvalidOption,
    MissingRequiredField,
)

MIN_FILE_SIZE_MB = 1
MAX_FILE_SIZE_MB = 50
DEFAULT_FILE_SIZE_MB = 5

_email_adapter = TypeAdapter(EmailStr)


class FieldType(str, enum.Enum):
    text = "text"
    email = "email"
    number = "number"
    select = "select"
    checkbox = "checkbox"
    file = "file"


OPTION_TYPES = (FieldType.select, FieldType.checkbox)


class FormField(BaseModel):
    id: str
    label: str
    type: FieldType
    required: bool = False
    options: list[str] = []
    file_types: list[str] = []
    max_file_size: Optional[int] = None  # MB


# ---------------------------------------------------------------------------
# Definition checks
# ---------------------------------------------------------------------------
def _normalize_extension(ext: str) -> str:
    return ext.strip().lstrip(".").lower()


def validate_field_definitions(fields: list[FormField]) -> list[FormField]:
    """Check and normalize a form's field list.

    Returns a new list where blank options/extensions are dropped and
    attributes that do not belong to a field's type are cleared.
    """
    seen: set[str] = set()
    normalized: list[FormField] = []

    for field in fields:
        field_id = field.id.strip()
        if not field_id:
            raise InvalidFieldDefinition(None, "Field id must not be blank")
        if field_id in seen:
            raise InvalidFieldDefinition(field_id, f"Duplicate field id '{field_id}'")
        seen.add(field_id)

        options: list[str] = []
        file_types: list[str] = []
        max_file_size = None

        if field.type in OPTION_TYPES:
            options = [opt.strip() for opt in field.options if opt.strip()]
            if not options:
                raise InvalidFieldDefinition(field_id, f"Field '{field.label}' requires at least one option")

        elif field.type == FieldType.file:
            file_types = []
            for ext in field.file_types:
                ext = _normalize_extension(ext)
                if ext and ext not in file_types:
                    file_types.append(ext)
            if not file_types:
                raise InvalidFieldDefinition(field_id, f"File field '{field.label}' requires at least one file type")

            max_file_size = DEFAULT_FILE_SIZE_MB if field.max_file_size is None else field.max_file_size
            if not MIN_FILE_SIZE_MB <= max_file_size <= MAX_FILE_SIZE_MB:
                raise InvalidFieldDefinition(
                    field_id,
                    f"File field '{field.label}' max size must be between "
                    f"{MIN_FILE_SIZE_MB} and {MAX_FILE_SIZE_MB} MB",
                )

        normalized.append(field.model_copy(update={
            "id": field_id,
            "options": options,
            "file_types": file_types,
            "max_file_size": max_file_size,
        }))

    return normalized


def load_fields(raw: list[dict[str, Any]]) -> list[FormField]:
    """Rebuild field models from the JSON stored on a Form row."""
    return [FormField.model_validate(item) for item in raw or []]


def dump_fields(fields: list[FormField]) -> list[dict[str, Any]]:
    return [field.model_dump(mode="json") for field in fields]


# ---------------------------------------------------------------------------
# Submission checks
# ---------------------------------------------------------------------------
def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0 or all(_is_blank(v) for v in value)
    if isinstance(value, dict):
        return not value or ("filename" in value and _is_blank(value["filename"]))
    return False


def _check_text(field: FormField, value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidFieldFormat(field.id, value, "text")
    return value.strip()


def check_email_address(field_id: str, value: Any) -> str:
    """Return the normalized address or raise InvalidFieldFormat."""
    if not isinstance(value, str):
        raise InvalidFieldFormat(field_id, value, "an email address")
    try:
        return _email_adapter.validate_python(value.strip())
    except ValidationError:
        raise InvalidFieldFormat(field_id, value, "an email address")


def _check_email(field: FormField, value: Any) -> str:
    return check_email_address(field.id, value)


def _check_number(field: FormField, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidFieldFormat(field.id, value, "a number")
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise InvalidFieldFormat(field.id, value, "a number")
    else:
        raise InvalidFieldFormat(field.id, value, "a number")

    if isinstance(number, float):
        if not math.isfinite(number):
            raise InvalidFieldFormat(field.id, value, "a number")
        if number.is_integer():
            return int(number)
    return number


def _check_select(field: FormField, value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidFieldFormat(field.id, value, "a single option")
    if value not in field.options:
        raise InvalidOption(field.id, value)
    return value


def _check_checkbox(field: FormField, value: Any) -> list[str]:
    values = [value] if isinstance(value, str) else value
    if not isinstance(values, (list, tuple)):
        raise InvalidFieldFormat(field.id, value, "a list of options")
    chosen: list[str] = []
    for item in values:
        if not isinstance(item, str) or item not in field.options:
            raise InvalidOption(field.id, item)
        if item not in chosen:
            chosen.append(item)
    return chosen


def _check_file(field: FormField, value: Any) -> dict[str, Any]:
    if not isinstance(value, dict) or not isinstance(value.get("filename"), str):
        raise InvalidFieldFormat(field.id, value, "file metadata with a filename")
    filename = value["filename"].strip()
    size = value.get("size")
    if isinstance(size, bool) or not isinstance(size, int) or size < 0:
        raise InvalidFieldFormat(field.id, value, "a non-negative file size in bytes")

    extension = filename.rsplit(".", 1)[1].lower() if "." in filename else ""
    if extension not in field.file_types:
        raise InvalidFileType(field.id, filename)

    max_mb = field.max_file_size or DEFAULT_FILE_SIZE_MB
    if size > max_mb * 1024 * 1024:
        raise FileTooLarge(field.id, size, max_mb)

    return {"filename": filename, "size": size}


_CHECKS = {
    FieldType.text: _check_text,
    FieldType.email: _check_email,
    FieldType.number: _check_number,
    FieldType.select: _check_select,
    FieldType.checkbox: _check_checkbox,
    FieldType.file: _check_file,
}


def validate_submission(fields: list[FormField], values: dict[str, Any]) -> dict[str, Any]:
    """Validate submitted values against the form, in field order.

    Raises the first SubmissionError encountered. On success returns the
    normalized values keyed by field id; keys that are not fields are dropped.
    """
    validated: dict[str, Any] = {}
    for field in fields:
        value = values.get(field.id)
        if _is_blank(value):
            if field.required:
                raise MissingRequiredField(field.id)
            continue
        validated[field.id] = _CHECKS[field.type](field, value)
    return validated
