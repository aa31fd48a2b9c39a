"""
Tests for anti-forgery token issuing and enforcement.

Tests cover:
- Forms embed a per-session token
- Every POST route rejects a missing or wrong token before the
  controller runs
- Tokens are accepted from the form field or the header
- A token from one session does not work in another
- Every rejection is logged at WARNING with its reason
"""

import logging

import pytest
from fastapi.testclient import TestClient

from example_web_api.main import create_app

POST_ROUTES = ["/pets/create", "/pets/5/edit", "/pets/5/delete"]


class TestIssuing:

    @pytest.mark.parametrize("path", ["/pets/create", "/pets/5/edit", "/pets/5/delete"])
    def test_forms_embed_token(self, client, path):
        response = client.get(path)

        assert '<input type="hidden" name="csrf_token" value="' in response.text

    def test_token_is_stable_within_session(self, token_for):
        assert token_for("/pets/create") == token_for("/pets/5/edit")

    def test_token_is_stored_in_session_cookie(self, client, antiforgery_token):
        assert "pets_session" in client.cookies

    def test_sessions_get_different_tokens(self, app, token_for):
        with TestClient(app) as other:
            other_token = other.get("/pets/create").text

        assert token_for() not in other_token


class TestEnforcement:

    @pytest.mark.parametrize("path", POST_ROUTES)
    def test_missing_token_is_rejected(self, client, recording_service, antiforgery_token, caplog, path):
        with caplog.at_level(logging.WARNING, logger="example_web_api.security.antiforgery"):
            response = client.post(path, data={"name": "Rex"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Anti-forgery token missing or invalid"
        assert recording_service.mutations == []
        assert f"Rejected POST {path}: anti-forgery token missing" in caplog.text

    @pytest.mark.parametrize("path", POST_ROUTES)
    def test_wrong_token_is_rejected(self, client, recording_service, antiforgery_token, caplog, path):
        with caplog.at_level(logging.WARNING, logger="example_web_api.security.antiforgery"):
            response = client.post(path, data={"csrf_token": antiforgery_token + "x"})

        assert response.status_code == 400
        assert recording_service.mutations == []
        assert f"Rejected POST {path}: anti-forgery token invalid" in caplog.text

    @pytest.mark.parametrize("path", POST_ROUTES)
    def test_post_without_session_is_rejected(self, client, recording_service, path):
        response = client.post(path, data={"csrf_token": "guessed"})

        assert response.status_code == 400
        assert recording_service.mutations == []

    def test_token_from_another_session_is_rejected(self, app, client, recording_service):
        with TestClient(app) as attacker:
            stolen = attacker.get("/pets/create").text.split('name="csrf_token" value="')[1].split('"')[0]

        client.get("/pets/create")
        response = client.post("/pets/create", data={"csrf_token": stolen})

        assert response.status_code == 400
        assert recording_service.mutations == []

    def test_non_ascii_token_is_rejected(self, client, antiforgery_token):
        response = client.post("/pets/create", data={"csrf_token": "jeton-é"})

        assert response.status_code == 400

    @pytest.mark.parametrize("path", POST_ROUTES)
    def test_form_token_is_accepted(self, client, antiforgery_token, path):
        response = client.post(path, data={"csrf_token": antiforgery_token})

        assert response.status_code == 303

    @pytest.mark.parametrize("path", POST_ROUTES)
    def test_header_token_is_accepted(self, client, antiforgery_token, path):
        response = client.post(path, headers={"X-CSRF-Token": antiforgery_token})

        assert response.status_code == 303

    def test_field_name_follows_settings(self, settings):
        custom = settings.model_copy(update={"antiforgery_field_name": "__RequestVerificationToken"})
        with TestClient(create_app(custom), follow_redirects=False) as custom_client:
            page = custom_client.get("/pets/create").text
            token = page.split('name="__RequestVerificationToken" value="')[1].split('"')[0]

            response = custom_client.post(
                "/pets/create", data={"__RequestVerificationToken": token, "name": "Rex"}
            )

        assert response.status_code == 303
