"""
Controllers Package - The 'C' in MVC

Controllers handle HTTP requests and coordinate between:
- Models (input structs and results)
- Services (business logic)
- Views (template rendering)

Each controller exposes a RouteTable; the application verifies it and
turns it into a FastAPI APIRouter at startup.
"""

from example_web_api.controllers.pets import routes as pets_routes

__all__ = ["pets_routes"]
