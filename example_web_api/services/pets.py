"""
Pet Service - the business logic collaborator behind the pets controller.

The controller never touches storage itself; it hands validated input
structs to a PetServiceBase implementation and maps the returned
outcome to a response. Swap the implementation with FastAPI's
dependency_overrides on get_pet_service.
"""

import logging
from abc import ABC, abstractmethod

from example_web_api.models import (
    CreatePetInput,
    DeletePetInput,
    NotFound,
    Ok,
    Pet,
    UpdatePetInput,
    ValidationFailed,
)

logger = logging.getLogger(__name__)


class PetServiceBase(ABC):
    """Abstract base class for pet services."""

    @abstractmethod
    def list_pets(self) -> Ok[list[Pet]]:
        """Return every pet the service knows about."""
        pass

    @abstractmethod
    def get_pet(self, pet_id: int) -> Ok[Pet] | NotFound:
        """Look up a single pet by id."""
        pass

    @abstractmethod
    def create_pet(self, data: CreatePetInput) -> Ok[Pet] | ValidationFailed:
        """
        Create a pet from submitted fields.

        Args:
            data: Structurally valid fields from the create form

        Returns:
            Ok with the new pet, or ValidationFailed if the service
            rejects the fields
        """
        pass

    @abstractmethod
    def update_pet(self, data: UpdatePetInput) -> Ok[Pet] | NotFound | ValidationFailed:
        """Apply submitted fields to an existing pet."""
        pass

    @abstractmethod
    def delete_pet(self, data: DeletePetInput) -> Ok[None] | NotFound:
        """Remove an existing pet."""
        pass


class PlaceholderPetService(PetServiceBase):
    """
    Stateless stand-in used until a real service is wired up.

    Every lookup finds a pet with the requested id and every mutation
    succeeds without changing anything. The list is always empty.
    """

    def list_pets(self) -> Ok[list[Pet]]:
        return Ok([])

    def get_pet(self, pet_id: int) -> Ok[Pet]:
        return Ok(Pet(id=pet_id))

    def create_pet(self, data: CreatePetInput) -> Ok[Pet]:
        logger.debug(f"Placeholder create with {len(data.fields)} field(s)")
        return Ok(Pet(id=0, fields=data.fields))

    def update_pet(self, data: UpdatePetInput) -> Ok[Pet]:
        logger.debug(f"Placeholder update of pet {data.pet_id}")
        return Ok(Pet(id=data.pet_id, fields=data.fields))

    def delete_pet(self, data: DeletePetInput) -> Ok[None]:
        logger.debug(f"Placeholder delete of pet {data.pet_id}")
        return Ok(None)


_default_service = PlaceholderPetService()


def get_pet_service() -> PetServiceBase:
    """FastAPI dependency returning the active pet service."""
    return _default_service
