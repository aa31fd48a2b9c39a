"""
Views Package - The 'V' in MVC

Server-rendered Jinja2 templates for the pets pages. The pages are
placeholders: they show headings, the pet id and, for forms, the
anti-forgery hidden field plus any validation errors.

render() is the single entry point controllers use; it injects the
session's anti-forgery token and the configured field name so every
form can post back.
"""

import os
from typing import Any

from fastapi import Request
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

from example_web_api.config import get_settings
from example_web_api.security import issue_antiforgery_token

templates_path = os.path.join(os.path.dirname(__file__), "templates")
templates = Jinja2Templates(directory=templates_path)


def render(
    request: Request,
    name: str,
    context: dict[str, Any] | None = None,
    status_code: int = 200,
) -> Response:
    """Render a template with the anti-forgery token available."""
    settings = getattr(request.app.state, "settings", None) or get_settings()
    page_context = {
        "app_name": settings.app_name,
        "antiforgery_field_name": settings.antiforgery_field_name,
        "antiforgery_token": issue_antiforgery_token(request),
        "errors": [],
        "error_message": None,
    }
    page_context.update(context or {})
    return templates.TemplateResponse(request, name, page_context, status_code=status_code)
