"""
Operation Results

Every pet service call and every form parse returns one of the tagged
outcomes below instead of raising. The controller maps each outcome to
exactly one kind of response:

    Ok                 -> redirect (mutations) or rendered view (reads)
    ValidationFailed   -> input view re-rendered with errors (422)
    NotFound           -> not-found view (404)
    UnexpectedFailure  -> input view re-rendered with a generic message (500)
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class FieldError:
    """A single problem with one submitted form field."""
    field: str
    message: str


@dataclass(frozen=True)
class Ok(Generic[T]):
    """The operation succeeded."""
    value: T = None


@dataclass(frozen=True)
class ValidationFailed:
    """The submitted fields were rejected."""
    errors: list[FieldError] = field(default_factory=list)


@dataclass(frozen=True)
class NotFound:
    """No pet exists with the given id."""
    pet_id: int


@dataclass(frozen=True)
class UnexpectedFailure:
    """Something went wrong that the caller cannot fix by resubmitting."""
    message: str = "Something went wrong. Please try again."


Result = Union[Ok[T], ValidationFailed, NotFound, UnexpectedFailure]
