"""
Shared fixtures for the pets application tests.

The app is built with explicit Settings (fixed secret key, short field
limit) and a TestClient that does not follow redirects, so tests can
assert on the 303 itself. Pet services are swapped in through FastAPI's
dependency_overrides.
"""

import re

import pytest
from fastapi.testclient import TestClient

from example_web_api.config import Settings
from example_web_api.main import create_app
from example_web_api.models import NotFound, Ok, Pet, ValidationFailed, FieldError
from example_web_api.services import PlaceholderPetService, get_pet_service

TOKEN_PATTERN = re.compile(r'name="csrf_token" value="([^"]+)"')


# ============================================================================
# TEST DOUBLES
# ============================================================================


class RecordingPetService(PlaceholderPetService):
    """Placeholder behaviour plus a log of every call."""

    def __init__(self, pets: list[Pet] | None = None):
        self.pets = pets or []
        self.calls: list[tuple[str, object]] = []

    def list_pets(self):
        self.calls.append(("list", None))
        return Ok(list(self.pets))

    def get_pet(self, pet_id):
        self.calls.append(("get", pet_id))
        return super().get_pet(pet_id)

    def create_pet(self, data):
        self.calls.append(("create", data))
        return super().create_pet(data)

    def update_pet(self, data):
        self.calls.append(("update", data))
        return super().update_pet(data)

    def delete_pet(self, data):
        self.calls.append(("delete", data))
        return super().delete_pet(data)

    @property
    def mutations(self) -> list[tuple[str, object]]:
        return [c for c in self.calls if c[0] in ("create", "update", "delete")]


class RaisingPetService(PlaceholderPetService):
    """Every mutation blows up with an internal error."""

    def _boom(self, data):
        raise RuntimeError("database exploded: secret connection string")

    create_pet = _boom
    update_pet = _boom
    delete_pet = _boom


class MissingPetService(PlaceholderPetService):
    """No pet exists."""

    def get_pet(self, pet_id):
        return NotFound(pet_id)

    def update_pet(self, data):
        return NotFound(data.pet_id)

    def delete_pet(self, data):
        return NotFound(data.pet_id)


class RejectingPetService(PlaceholderPetService):
    """The service itself refuses the submitted fields."""

    def create_pet(self, data):
        return ValidationFailed([FieldError(field="name", message="Name is already taken")])

    def update_pet(self, data):
        return ValidationFailed([FieldError(field="name", message="Name is already taken")])


class MalformedPetService(PlaceholderPetService):
    """Returns values that are not outcomes, or Ok around the wrong value."""

    def list_pets(self):
        return Ok(None)

    def get_pet(self, pet_id):
        return Ok(None)

    def _nothing(self, data):
        return None

    create_pet = _nothing
    update_pet = _nothing
    delete_pet = _nothing


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def settings():
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        secret_key="test-secret-key",
        max_field_length=20,
        log_level="DEBUG",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client


@pytest.fixture
def use_service(app):
    """Install a pet service for the duration of a test."""
    def _use(service):
        app.dependency_overrides[get_pet_service] = lambda: service
        return service

    yield _use
    app.dependency_overrides.pop(get_pet_service, None)


@pytest.fixture
def recording_service(use_service):
    return use_service(RecordingPetService())


@pytest.fixture
def raising_service(use_service):
    return use_service(RaisingPetService())


@pytest.fixture
def missing_service(use_service):
    return use_service(MissingPetService())


@pytest.fixture
def rejecting_service(use_service):
    return use_service(RejectingPetService())


@pytest.fixture
def malformed_service(use_service):
    return use_service(MalformedPetService())


@pytest.fixture
def listed_pets_service(use_service):
    return use_service(RecordingPetService(pets=[Pet(id=3), Pet(id=8, fields={"name": "Rex"})]))


def fetch_token(client: TestClient, path: str = "/pets/create") -> str:
    """Load a form page and pull the anti-forgery token out of it."""
    response = client.get(path)
    assert response.status_code == 200
    match = TOKEN_PATTERN.search(response.text)
    assert match, "form did not include an anti-forgery field"
    return match.group(1)


@pytest.fixture
def antiforgery_token(client):
    return fetch_token(client)


@pytest.fixture
def token_for(client):
    """Fetch a token from any form page: token_for("/pets/5/edit")."""
    return lambda path="/pets/create": fetch_token(client, path)
