"""
Pets Controller

Handles the CRUD pages for pets:
- Listing pets
- Showing one pet
- Create, edit and delete forms with their POST handlers

Every POST follows the same flow:
1. The anti-forgery token is checked (route dependency, 400 on failure)
2. The form is parsed into the operation's input struct
3. The pet service is called; any exception it raises is logged and
   becomes an UnexpectedFailure
4. The outcome picks the response: redirect to the list on success,
   the input form again on validation or unexpected failure, or the
   not-found page

Routes are declared in the table at the bottom of this module rather
than with decorators; see example_web_api.routing.
"""

import logging
from typing import Any, Callable

from fastapi import Depends, Request
from fastapi.responses import RedirectResponse
from starlette.datastructures import FormData
from starlette.responses import Response

from example_web_api.config import Settings, get_settings
from example_web_api.models import (
    CreatePetInput,
    DeletePetInput,
    NotFound,
    Ok,
    Pet,
    UnexpectedFailure,
    UpdatePetInput,
    ValidationFailed,
    parse_input,
)
from example_web_api.routing import RouteTable
from example_web_api.services import PetServiceBase, get_pet_service
from example_web_api.views import render

logger = logging.getLogger(__name__)

OUTCOME_TYPES = (Ok, ValidationFailed, NotFound, UnexpectedFailure)

routes = RouteTable(tags=["pets"])


# ============================================
# Helpers
# ============================================

def collect_form_fields(form: FormData, exclude: set[str]) -> dict[str, Any]:
    """
    Flatten submitted form data into one value per key.

    Repeated text values are joined with commas. A non-text value
    (an uploaded file) is kept as-is so validation can reject it.
    """
    fields: dict[str, Any] = {}
    for key, value in form.multi_items():
        if key in exclude:
            continue
        if key not in fields:
            fields[key] = value
        elif isinstance(value, str) and isinstance(fields[key], str):
            fields[key] = f"{fields[key]},{value}"
        elif not isinstance(value, str):
            fields[key] = value
    return fields


def _text_only(fields: dict[str, Any]) -> dict[str, str]:
    return {k: v for k, v in fields.items() if isinstance(v, str)}


def _attempt(action: Callable[..., Any], *args: Any):
    """
    Call a service method, turning any exception into UnexpectedFailure.

    A return value outside the tagged outcomes is treated the same way.
    """
    name = getattr(action, "__name__", action)
    try:
        outcome = action(*args)
    except Exception:
        logger.exception(f"Pet service call {name} failed")
        return UnexpectedFailure()

    if not isinstance(outcome, OUTCOME_TYPES):
        logger.error(f"Pet service call {name} returned {type(outcome).__name__}, not an outcome")
        return UnexpectedFailure()
    return outcome


def _load_pet(service: PetServiceBase, pet_id: int):
    outcome = _attempt(service.get_pet, pet_id)
    if isinstance(outcome, Ok) and not isinstance(outcome.value, Pet):
        logger.error(f"Pet service get_pet returned Ok({type(outcome.value).__name__}), not a pet")
        return UnexpectedFailure()
    return outcome


def _not_found(request: Request, pet_id: int) -> Response:
    return render(request, "not_found.html", {"pet_id": pet_id}, status_code=404)


def _read_failure(request: Request, outcome) -> Response:
    if isinstance(outcome, NotFound):
        return _not_found(request, outcome.pet_id)
    message = outcome.message if isinstance(outcome, UnexpectedFailure) else UnexpectedFailure().message
    return render(request, "error.html", {"error_message": message}, status_code=500)


def _mutation_response(
    request: Request,
    outcome,
    template: str,
    context: dict[str, Any],
    description: str,
) -> Response:
    if isinstance(outcome, Ok):
        logger.info(f"{description} succeeded")
        return RedirectResponse(request.url_for("pets:index"), status_code=303)

    if isinstance(outcome, NotFound):
        return _not_found(request, outcome.pet_id)

    if isinstance(outcome, ValidationFailed):
        logger.info(f"{description} rejected: {len(outcome.errors)} field error(s)")
        return render(request, template, {**context, "errors": outcome.errors}, status_code=422)

    message = outcome.message if isinstance(outcome, UnexpectedFailure) else UnexpectedFailure().message
    return render(request, template, {**context, "error_message": message}, status_code=500)


async def _read_fields(request: Request, settings: Settings) -> dict[str, Any]:
    form = await request.form()
    return collect_form_fields(form, exclude={settings.antiforgery_field_name})


# ============================================
# Read actions
# ============================================

def index(
    request: Request,
    service: PetServiceBase = Depends(get_pet_service),
) -> Response:
    """List all pets."""
    outcome = _attempt(service.list_pets)
    if isinstance(outcome, Ok) and not isinstance(outcome.value, list):
        logger.error(f"Pet service list_pets returned Ok({type(outcome.value).__name__}), not a list")
        outcome = UnexpectedFailure()
    if not isinstance(outcome, Ok):
        return _read_failure(request, outcome)
    return render(request, "pets/index.html", {"pets": outcome.value})


def details(
    pet_id: int,
    request: Request,
    service: PetServiceBase = Depends(get_pet_service),
) -> Response:
    """Show a single pet."""
    outcome = _load_pet(service, pet_id)
    if not isinstance(outcome, Ok):
        return _read_failure(request, outcome)
    return render(request, "pets/details.html", {"pet": outcome.value})


def new(request: Request) -> Response:
    """Show the empty create form."""
    return render(request, "pets/create.html", {"fields": {}})


def edit_form(
    pet_id: int,
    request: Request,
    service: PetServiceBase = Depends(get_pet_service),
) -> Response:
    """Show the edit form for a pet."""
    outcome = _load_pet(service, pet_id)
    if not isinstance(outcome, Ok):
        return _read_failure(request, outcome)
    return render(request, "pets/edit.html", {"pet_id": pet_id, "fields": outcome.value.fields})


def delete_form(
    pet_id: int,
    request: Request,
    service: PetServiceBase = Depends(get_pet_service),
) -> Response:
    """Ask for confirmation before deleting a pet."""
    outcome = _load_pet(service, pet_id)
    if not isinstance(outcome, Ok):
        return _read_failure(request, outcome)
    return render(request, "pets/delete.html", {"pet_id": pet_id})


# ============================================
# Mutating actions
# ============================================

async def create(
    request: Request,
    service: PetServiceBase = Depends(get_pet_service),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Create a pet, then go back to the list."""
    fields = await _read_fields(request, settings)

    parsed = parse_input(CreatePetInput, {"fields": fields}, settings.max_field_length)
    outcome = _attempt(service.create_pet, parsed.value) if isinstance(parsed, Ok) else parsed

    return _mutation_response(
        request,
        outcome,
        "pets/create.html",
        {"fields": _text_only(fields)},
        "Create pet",
    )


async def edit(
    pet_id: int,
    request: Request,
    service: PetServiceBase = Depends(get_pet_service),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Update a pet, then go back to the list."""
    fields = await _read_fields(request, settings)

    parsed = parse_input(
        UpdatePetInput, {"pet_id": pet_id, "fields": fields}, settings.max_field_length
    )
    outcome = _attempt(service.update_pet, parsed.value) if isinstance(parsed, Ok) else parsed

    return _mutation_response(
        request,
        outcome,
        "pets/edit.html",
        {"pet_id": pet_id, "fields": _text_only(fields)},
        f"Update pet {pet_id}",
    )


async def delete(
    pet_id: int,
    request: Request,
    service: PetServiceBase = Depends(get_pet_service),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Delete a pet, then go back to the list."""
    fields = await _read_fields(request, settings)

    parsed = parse_input(
        DeletePetInput, {"pet_id": pet_id, "fields": fields}, settings.max_field_length
    )
    outcome = _attempt(service.delete_pet, parsed.value) if isinstance(parsed, Ok) else parsed

    return _mutation_response(
        request,
        outcome,
        "pets/delete.html",
        {"pet_id": pet_id},
        f"Delete pet {pet_id}",
    )


# ============================================
# Route table
# ============================================

routes.add("GET", "/pets", index, name="pets:index")
routes.add("GET", "/pets/create", new, name="pets:new")
routes.add("POST", "/pets/create", create, name="pets:create", antiforgery=True)
routes.add("GET", "/pets/{pet_id}", details, name="pets:details")
routes.add("GET", "/pets/{pet_id}/edit", edit_form, name="pets:edit_form")
routes.add("POST", "/pets/{pet_id}/edit", edit, name="pets:edit", antiforgery=True)
routes.add("GET", "/pets/{pet_id}/delete", delete_form, name="pets:delete_form")
routes.add("POST", "/pets/{pet_id}/delete", delete, name="pets:delete", antiforgery=True)
