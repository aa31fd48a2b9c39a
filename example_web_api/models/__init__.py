"""
Models Package - Input structs, read models and operation results.
"""

from example_web_api.models.results import (
    FieldError,
    Ok,
    ValidationFailed,
    NotFound,
    UnexpectedFailure,
    Result,
)
from example_web_api.models.schemas import (
    Pet,
    CreatePetInput,
    UpdatePetInput,
    DeletePetInput,
    parse_input,
)

__all__ = [
    # Results
    "FieldError",
    "Ok",
    "ValidationFailed",
    "NotFound",
    "UnexpectedFailure",
    "Result",
    # Schemas
    "Pet",
    "CreatePetInput",
    "UpdatePetInput",
    "DeletePetInput",
    "parse_input",
]
