"""
Example Web API - Application Entry Point

This is the main FastAPI application. It follows the MVC
(Model-View-Controller) architectural pattern.

Architecture Overview:
=====================
- Models (example_web_api/models/): Input structs and results
  - schemas.py: Pydantic input structs per operation and the Pet read model
  - results.py: Tagged outcomes (Ok, ValidationFailed, NotFound, UnexpectedFailure)

- Views (example_web_api/views/): Jinja2 templates for the pets pages

- Controllers (example_web_api/controllers/): Request handlers
  - pets.py: List/detail pages and create/edit/delete forms

- Services (example_web_api/services/): Business logic layer
  - pets.py: Pet service interface and the placeholder implementation

- Routing (example_web_api/routing.py): Explicit route tables, checked
  for ambiguity before the application starts serving

Request Flow:
============
1. Request is dispatched through the controller's route table
2. POST requests must carry the session's anti-forgery token
3. Controller parses the form into an input struct (Models)
4. Controller calls the pet service (Services)
5. The outcome becomes a redirect or a rendered page (Views)
"""

import logging
import secrets

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from example_web_api.config import Settings, get_settings
from example_web_api.controllers import pets_routes
from example_web_api.services import PetServiceBase, get_pet_service

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Set up root logging once; later calls are no-ops."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use instead of the environment-derived ones
            (tests pass their own)

    Raises:
        AmbiguousRouteError: If a controller's route table is ambiguous
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="""
    Server-rendered CRUD pages for pets.

    ## Routes
    - `GET /pets` list, `GET /pets/{id}` detail
    - `GET|POST /pets/create`, `GET|POST /pets/{id}/edit`, `GET|POST /pets/{id}/delete`

    All POST routes require the anti-forgery token issued with each form.
    """,
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.dependency_overrides[get_settings] = lambda: settings

    secret_key = settings.secret_key
    if not secret_key:
        secret_key = secrets.token_urlsafe(32)
        logger.warning("PETS_SECRET_KEY not set; using an ephemeral session key")

    # Session cookie carries the anti-forgery token
    app.add_middleware(
        SessionMiddleware,
        secret_key=secret_key,
        session_cookie=settings.session_cookie,
        same_site="lax",
        https_only=settings.session_https_only,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register controllers (route tables are verified here)
    app.include_router(pets_routes.build_router())   # /pets endpoints
    logger.info(f"{settings.app_name} ready with {len(pets_routes.routes)} pet route(s)")

    # ============================================
    # Health Check Endpoints
    # ============================================

    @app.get("/", tags=["health"])
    def root():
        """
        Basic health check endpoint.

        Returns a simple status indicating the API is running.
        """
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
        }

    @app.get("/health", tags=["health"])
    def health_check(service: PetServiceBase = Depends(get_pet_service)):
        """Report which pet service is wired in."""
        return {
            "status": "healthy",
            "pet_service": type(service).__name__,
        }

    return app


app = create_app()
