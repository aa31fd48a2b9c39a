"""
Pydantic Schemas (Input Structs and Read Models)

Each mutating pet operation gets its own input struct instead of an
untyped form collection:

- CreatePetInput: fields submitted from the create form
- UpdatePetInput: route id plus fields submitted from the edit form
- DeletePetInput: route id plus fields submitted from the delete form

Validation here is structural only. No Pet schema exists yet, so field
names and values are kept as free-form text; the checks make sure the
submission is well formed:
- every value is text (file uploads are rejected)
- every field name is non-empty
- names and values are valid UTF-8 (no U+FFFD from undecodable bytes)
- no value exceeds the configured maximum length
- an `id` field, when submitted, is the route id as an integer

The maximum length comes from Settings and is passed in through the
pydantic validation context under "max_field_length".
"""

from typing import Annotated, Any, TypeVar

from pydantic import AfterValidator, BaseModel, Field, ValidationError, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from example_web_api.models.results import FieldError, Ok, ValidationFailed

# Undecodable form bytes arrive as U+FFFD after Starlette decodes them
REPLACEMENT_CHARACTER = "\ufffd"


def _check_form_fields(value: dict[str, str], info: ValidationInfo) -> dict[str, str]:
    max_length = (info.context or {}).get("max_field_length")

    for name, text in value.items():
        if not name.strip():
            raise PydanticCustomError(
                "empty_field_name",
                "Field names must not be empty",
                {"field": name},
            )
        if REPLACEMENT_CHARACTER in name or REPLACEMENT_CHARACTER in text:
            raise PydanticCustomError(
                "invalid_encoding",
                "Must be valid UTF-8 text",
                {"field": name},
            )
        if max_length is not None and len(text) > max_length:
            raise PydanticCustomError(
                "field_too_long",
                "Must be at most {max_length} characters",
                {"field": name, "max_length": max_length},
            )
    return value


def _check_id_matches_route(fields: dict[str, str], pet_id: int | None) -> dict[str, str]:
    submitted = fields.get("id")
    if submitted is None or pet_id is None:
        return fields
    try:
        matches = int(submitted.strip()) == pet_id
    except ValueError:
        matches = False
    if not matches:
        raise PydanticCustomError(
            "id_mismatch",
            "Submitted id {submitted} does not match the pet being changed ({pet_id})",
            {"field": "id", "submitted": submitted, "pet_id": pet_id},
        )
    return fields


FormFields = Annotated[dict[str, str], AfterValidator(_check_form_fields)]


# ============================================
# Read Model
# ============================================

class Pet(BaseModel):
    """
    A pet as returned by the pet service.

    Only the identifier is known; everything else the service stores
    travels in `fields` untouched.
    """
    id: int
    fields: dict[str, str] = Field(default_factory=dict)


# ============================================
# Input Structs
# ============================================

class CreatePetInput(BaseModel):
    """Fields submitted from the create form."""
    fields: FormFields = Field(default_factory=dict)


class UpdatePetInput(BaseModel):
    """Fields submitted from the edit form for one pet."""
    pet_id: int
    fields: FormFields = Field(default_factory=dict)

    @field_validator("fields")
    @classmethod
    def id_matches_route(cls, value: dict[str, str], info: ValidationInfo) -> dict[str, str]:
        return _check_id_matches_route(value, info.data.get("pet_id"))


class DeletePetInput(BaseModel):
    """Fields submitted from the delete confirmation for one pet."""
    pet_id: int
    fields: FormFields = Field(default_factory=dict)

    @field_validator("fields")
    @classmethod
    def id_matches_route(cls, value: dict[str, str], info: ValidationInfo) -> dict[str, str]:
        return _check_id_matches_route(value, info.data.get("pet_id"))


# ============================================
# Parsing
# ============================================

InputT = TypeVar("InputT", bound=BaseModel)


def _to_field_error(error: dict[str, Any]) -> FieldError:
    ctx = error.get("ctx") or {}
    loc = [str(part) for part in error.get("loc", ())]

    if "field" in ctx:
        name = str(ctx["field"])
    elif len(loc) > 1:
        # ("fields", "<form key>") for per-value type errors
        name = loc[-1]
    else:
        name = loc[0] if loc else ""

    return FieldError(field=name, message=error["msg"])


def parse_input(
    model: type[InputT],
    data: dict[str, Any],
    max_field_length: int | None = None,
) -> Ok[InputT] | ValidationFailed:
    """
    Validate raw data into an input struct.

    Returns Ok(instance) on success or ValidationFailed with one
    FieldError per problem; never raises for bad input.
    """
    try:
        instance = model.model_validate(data, context={"max_field_length": max_field_length})
    except ValidationError as exc:
        return ValidationFailed(errors=[_to_field_error(e) for e in exc.errors()])
    return Ok(instance)
