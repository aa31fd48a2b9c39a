"""
Services - business logic collaborators used by the controllers.
"""

from example_web_api.services.pets import PetServiceBase, PlaceholderPetService, get_pet_service

__all__ = ["PetServiceBase", "PlaceholderPetService", "get_pet_service"]
