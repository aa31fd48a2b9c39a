"""
Anti-forgery (CSRF) Tokens

Every browser session gets one random token, kept in the signed session
cookie managed by Starlette's SessionMiddleware. Forms embed the token as
a hidden field; state-changing routes declare require_antiforgery_token
as a dependency so a request without a matching token is rejected with
400 before the controller runs.

The token may be submitted either as a form field or as a request header
(for scripted clients posting an otherwise empty body). Field and header
names come from Settings.
"""

import logging
import secrets

from fastapi import Depends, HTTPException, Request

from example_web_api.config import Settings, get_settings

logger = logging.getLogger(__name__)

SESSION_KEY = "antiforgery_token"


def issue_antiforgery_token(request: Request) -> str:
    """Return the session's token, creating one on first use."""
    token = request.session.get(SESSION_KEY)
    if not token:
        token = secrets.token_urlsafe(32)
        request.session[SESSION_KEY] = token
    return token


async def _submitted_token(request: Request, settings: Settings) -> str | None:
    header_value = request.headers.get(settings.antiforgery_header_name)
    if header_value:
        return header_value

    form = await request.form()
    field_value = form.get(settings.antiforgery_field_name)
    return field_value if isinstance(field_value, str) else None


async def require_antiforgery_token(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Reject the request unless it carries the session's token.

    Raises:
        HTTPException: 400 when the token is missing or does not match
    """
    expected = request.session.get(SESSION_KEY)
    submitted = await _submitted_token(request, settings)

    if not expected or not submitted or not secrets.compare_digest(
        expected.encode("utf-8"), submitted.encode("utf-8")
    ):
        logger.warning(
            f"Rejected {request.method} {request.url.path}: "
            f"anti-forgery token {'missing' if not submitted else 'invalid'}"
        )
        raise HTTPException(
            status_code=400,
            detail="Anti-forgery token missing or invalid",
        )
