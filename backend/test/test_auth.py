"""
Tests for Token Verification and Member Resolution Dependencies
"""

from datetime import timedelta
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from clubos.config import settings
from clubos.exceptions import Unauthenticated
from clubos.utils.auth import decode_access_token
from conftest import headers_for, make_token


class TestDecodeAccessToken:
    """Test Supabase token verification"""

    def test_valid_token(self):
        assert decode_access_token(make_token("user-123")) == "user-123"

    def test_expired_token(self):
        with pytest.raises(Unauthenticated) as exc_info:
            decode_access_token(make_token("user-123", expires_in=timedelta(minutes=-5)))

        assert exc_info.value.detail == "Token has expired"

    def test_wrong_secret(self):
        token = make_token("user-123", secret="another-secret-that-is-also-long-enough-for-hs256")

        with pytest.raises(Unauthenticated):
            decode_access_token(token)

    def test_garbage_token(self):
        with pytest.raises(Unauthenticated):
            decode_access_token("not-a-jwt")

    def test_missing_secret_rejects_everything(self, monkeypatch):
        token = make_token("user-123")
        monkeypatch.setattr(settings, "SUPABASE_JWT_SECRET", "")

        with pytest.raises(Unauthenticated):
            decode_access_token(token)


class TestAuthenticatedRoutes:
    """Test 401/404 behaviour of member-scoped endpoints"""

    @pytest.mark.parametrize("path", ["/facilities", "/bookings/my", "/events"])
    def test_missing_token(self, client: TestClient, path):
        response = client.get(path)

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_invalid_token(self, client: TestClient):
        response = client.get("/events", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_unprovisioned_identity(self, client: TestClient, test_club):
        headers = {"Authorization": f"Bearer {make_token(str(uuid4()))}"}

        response = client.get("/events", headers=headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Member not found"

    def test_club_header_selects_membership(self, client: TestClient, test_club, other_club, make_member, make_event):
        user_id = str(uuid4())
        make_member(test_club, user_id=user_id)
        member = make_member(other_club, user_id=user_id)
        make_event(test_club, "Home Club Social")
        make_event(other_club, "Harbor Regatta")

        response = client.get("/events", headers={**headers_for(member), "X-Club-Id": str(other_club.id)})

        assert response.status_code == 200
        assert [e["title"] for e in response.json()["events"]] == ["Harbor Regatta"]

    def test_malformed_club_header(self, client: TestClient, standard_member):
        response = client.get("/events", headers={**headers_for(standard_member), "X-Club-Id": "not-a-uuid"})

        assert response.status_code == 400
