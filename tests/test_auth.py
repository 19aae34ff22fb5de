from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from campusapi.config import settings
from campusapi.core.exceptions import AuthenticationError
from campusapi.core.security import (
    create_access_token,
    decode_access_token,
    verify_shared_secret,
)
from campusapi.database.session import get_db
from campusapi.main import create_app
from campusapi.services.auth_service import AuthService


class TestSecurity:
    """JWT 및 공유 시크릿 검증 테스트"""

    def test_token_round_trip(self):
        token = create_access_token({"sub": "user-1", "email": "sari@campus.ac.id"})

        payload = decode_access_token(token)

        assert payload is not None
        assert payload.sub == "user-1"
        assert payload.email == "sari@campus.ac.id"

    def test_expired_token(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-1))

        assert decode_access_token(token) is None

    def test_garbage_token(self):
        assert decode_access_token("not-a-jwt") is None

    @pytest.mark.parametrize(
        "provided, expected, ok",
        [
            ("s3cret", "s3cret", True),
            ("wrong", "s3cret", False),
            (None, "s3cret", False),
            ("", "", False),
        ],
    )
    def test_verify_shared_secret(self, provided, expected, ok):
        assert verify_shared_secret(provided, expected) is ok


class TestAuthService:
    def test_resolves_user_from_token(self, db_session, make_user):
        user = make_user("Sari")
        service = AuthService(db_session, settings=settings)
        token = create_access_token({"sub": user.id, "email": user.email})

        current = service.get_current_user(token)

        assert current.id == user.id

    def test_unknown_subject(self, db_session):
        service = AuthService(db_session, settings=settings)
        token = create_access_token({"sub": "missing-user"})

        with pytest.raises(AuthenticationError):
            service.get_current_user(token)

    def test_bearer_token_reaches_protected_route(self, db_session, make_user):
        user = make_user("Sari")
        token = create_access_token({"sub": user.id, "email": user.email})
        app = create_app()
        app.dependency_overrides[get_db] = lambda: db_session

        response = TestClient(app).get(
            "/api/balance/me",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 200
        assert response.json()["pendingBalance"] == 0
