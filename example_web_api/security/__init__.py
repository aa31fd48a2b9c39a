"""
Security Package - request protection shared by all controllers.
"""

from example_web_api.security.antiforgery import issue_antiforgery_token, require_antiforgery_token

__all__ = ["issue_antiforgery_token", "require_antiforgery_token"]
