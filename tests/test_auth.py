"""Tests for authentication, registration and OAuth provisioning."""
import httpx
import pytest

from app.application.services.auth_service import (
    create_access_token,
    create_oauth_state,
    provision_oauth_user,
    verify_oauth_state,
)
from app.core.exceptions import UnauthorizedException
from app.domain.models.user import User, Role
from app.domain.schemas.auth import OAuthUserInfo
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository
from app.interfaces.deps import get_oauth_provider
from app.main import app

from conftest import PASSWORD, auth_headers, make_user


def register_payload(**overrides):
    payload = {
        "email": "Nouveau@Esmt.sn",
        "password": "pass1234",
        "confirm_password": "pass1234",
        "first_name": "Fatou",
        "last_name": "Ndiaye",
    }
    payload.update(overrides)
    return payload


class TestRegister:
    def test_register_candidate(self, client, db_session):
        response = client.post("/api/auth/register", json=register_payload())
        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "nouveau@esmt.sn"
        assert body["role"] == "CANDIDATE"
        assert body["profile_completed"] is False

    def test_register_with_profile_is_complete(self, client):
        response = client.post(
            "/api/auth/register",
            json=register_payload(institution="ESMT", phone="+221770000000"),
        )
        assert response.json()["profile_completed"] is True

    def test_duplicate_email_is_rejected(self, client, db_session):
        assert client.post("/api/auth/register", json=register_payload()).status_code == 201

        response = client.post("/api/auth/register", json=register_payload(email="nouveau@esmt.sn"))
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "ValidationFailedException"
        assert db_session.query(User).filter(User.email == "nouveau@esmt.sn").count() == 1

    def test_password_confirmation_must_match(self, client):
        response = client.post("/api/auth/register", json=register_payload(confirm_password="other"))
        assert response.status_code == 422
        assert response.json()["error"]["message"] == "Les mots de passe ne correspondent pas"

    def test_legacy_role_name_is_normalised(self, client):
        response = client.post("/api/auth/register", json=register_payload(role="ROLE_GESTIONNAIRE"))
        assert response.status_code == 201
        assert response.json()["role"] == "MANAGER"
        assert response.json()["profile_completed"] is True

    def test_unknown_role_is_rejected(self, client):
        response = client.post("/api/auth/register", json=register_payload(role="ROOT"))
        assert response.status_code == 422

    def test_registration_closed(self, client, db_session, app_config):
        app_config.registration_open = False
        db_session.commit()

        response = client.post("/api/auth/register", json=register_payload())
        assert response.status_code == 403


class TestLogin:
    def test_login_returns_token(self, client, candidate):
        response = client.post("/api/auth/login", json={"email": "ANA@x.com", "password": PASSWORD})
        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["email"] == "ana@x.com"

    def test_wrong_password(self, client, candidate):
        response = client.post("/api/auth/login", json={"email": "ana@x.com", "password": "nope"})
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_inactive_user_cannot_login(self, client, db_session, candidate):
        candidate.is_active = False
        db_session.commit()
        response = client.post("/api/auth/login", json={"email": "ana@x.com", "password": PASSWORD})
        assert response.status_code == 401


class TestMe:
    def test_me_requires_token(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UnauthorizedException"

    def test_me_with_garbage_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_me_reflects_current_role(self, client, db_session, candidate):
        headers = auth_headers(candidate)
        candidate.role = Role.MANAGER
        db_session.commit()

        response = client.get("/api/auth/me", headers=headers)
        assert response.status_code == 200
        assert response.json()["role"] == "MANAGER"

    def test_complete_profile(self, client, db_session):
        user = make_user(db_session, "new@x.com", Role.CANDIDATE)
        assert user.profile_completed is False

        response = client.put(
            "/api/auth/me/profile",
            json={"institution": "UCAD", "phone": "+221775555555", "bio": "Doctorant"},
            headers=auth_headers(user),
        )
        assert response.status_code == 200
        assert response.json()["profile_completed"] is True
        assert response.json()["bio"] == "Doctorant"
class TestOAuthProvisioning:
    def info(self, email="oauth@x.com", subject="google-123", verified=True):
        return OAuthUserInfo(
            subject=subject, email=email, email_verified=verified, given_name="Lamine", family_name="Gaye"
        )

    def test_first_login_creates_incomplete_candidate(self, db_session):
        repo = SQLAlchemyUserRepository(db_session, User)
        user = provision_oauth_user(repo, "google", self.info())

        assert user.role == Role.CANDIDATE
        assert user.profile_completed is False
        assert user.provider == "GOOGLE"
        assert user.password_hash is None

    def test_existing_email_gets_linked(self, db_session, candidate):
        repo = SQLAlchemyUserRepository(db_session, User)
        user = provision_oauth_user(repo, "google", self.info(email="ana@x.com"))

        assert user.id == candidate.id
        assert user.oauth_id == "google-123"
        assert user.profile_completed is True
        assert db_session.query(User).count() == 1

    def test_inactive_account_is_refused(self, db_session, candidate):
        candidate.is_active = False
        db_session.commit()
        repo = SQLAlchemyUserRepository(db_session, User)
        with pytest.raises(UnauthorizedException):
            provision_oauth_user(repo, "google", self.info(email="ana@x.com"))

    def test_unverified_email_creates_nothing(self, db_session):
        repo = SQLAlchemyUserRepository(db_session, User)
        with pytest.raises(UnauthorizedException):
            provision_oauth_user(repo, "google", self.info(verified=False))
        assert db_session.query(User).count() == 0

    def test_unverified_email_does_not_link_existing_account(self, db_session, candidate):
        repo = SQLAlchemyUserRepository(db_session, User)
        with pytest.raises(UnauthorizedException):
            provision_oauth_user(repo, "google", self.info(email="ana@x.com", verified=False))
        db_session.refresh(candidate)
        assert candidate.oauth_id is None

    def test_account_linked_to_another_subject_is_refused(self, db_session, candidate):
        repo = SQLAlchemyUserRepository(db_session, User)
        provision_oauth_user(repo, "google", self.info(email="ana@x.com"))
        with pytest.raises(UnauthorizedException):
            provision_oauth_user(repo, "google", self.info(email="ana@x.com", subject="google-999"))


class TestOAuthState:
    def test_issued_state_verifies_against_its_nonce(self):
        state, nonce = create_oauth_state()
        verify_oauth_state(state, nonce)

    def test_wrong_nonce_is_refused(self):
        state, _ = create_oauth_state()
        with pytest.raises(UnauthorizedException):
            verify_oauth_state(state, "other-nonce")

    def test_access_token_is_not_a_state(self):
        token = create_access_token({"sub": "ana@x.com", "nonce": "n"})
        with pytest.raises(UnauthorizedException):
            verify_oauth_state(token, "n")

    def test_missing_state_or_nonce(self):
        state, nonce = create_oauth_state()
        with pytest.raises(UnauthorizedException):
            verify_oauth_state(None, nonce)
        with pytest.raises(UnauthorizedException):
            verify_oauth_state(state, None)


class FakeGoogleProvider:
    configured = True

    def __init__(self, info):
        self.info = info

    def get_authorization_url(self, state=None):
        return str(httpx.URL("https://accounts.google.com/o/oauth2/v2/auth", params={"state": state}))

    async def authenticate(self, code):
        return self.info if code == "good-code" else None


class TestOAuthRoutes:
    @pytest.fixture
    def provider(self):
        fake = FakeGoogleProvider(
            OAuthUserInfo(
                subject="g-1", email="oauth@x.com", email_verified=True, given_name="Lamine", family_name="Gaye"
            )
        )
        app.dependency_overrides[get_oauth_provider] = lambda: fake
        yield fake
        app.dependency_overrides.pop(get_oauth_provider, None)

    def start_login(self, client) -> str:
        response = client.get("/api/auth/oauth/google/login")
        assert response.status_code == 200
        return httpx.URL(response.json()["authorization_url"]).params["state"]

    def test_login_url_carries_state_and_sets_nonce_cookie(self, client, provider):
        response = client.get("/api/auth/oauth/google/login")
        assert response.status_code == 200
        state = httpx.URL(response.json()["authorization_url"]).params["state"]
        nonce = response.cookies.get("oauth_state_nonce")
        assert nonce
        verify_oauth_state(state, nonce)

    def test_callback_provisions_and_returns_token(self, client, provider):
        state = self.start_login(client)
        response = client.get("/api/auth/oauth/google/callback", params={"code": "good-code", "state": state})
        assert response.status_code == 200
        body = response.json()
        assert body["user"]["email"] == "oauth@x.com"
        assert body["user"]["profile_completed"] is False

    def test_callback_with_rejected_code(self, client, provider):
        state = self.start_login(client)
        response = client.get("/api/auth/oauth/google/callback", params={"code": "bad", "state": state})
        assert response.status_code == 401

    def test_callback_without_state_is_refused(self, client, db_session, provider):
        self.start_login(client)
        response = client.get("/api/auth/oauth/google/callback", params={"code": "good-code"})
        assert response.status_code == 401
        assert db_session.query(User).count() == 0

    def test_callback_with_forged_state_is_refused(self, client, db_session, provider):
        self.start_login(client)
        forged, _ = create_oauth_state()
        response = client.get("/api/auth/oauth/google/callback", params={"code": "good-code", "state": forged})
        assert response.status_code == 401
        assert db_session.query(User).count() == 0

    def test_callback_without_login_cookie_is_refused(self, client, provider):
        state, _ = create_oauth_state()
        response = client.get("/api/auth/oauth/google/callback", params={"code": "good-code", "state": state})
        assert response.status_code == 401

    def test_callback_with_unverified_email_is_refused(self, client, db_session, provider):
        provider.info = provider.info.model_copy(update={"email_verified": False})
        state = self.start_login(client)
        response = client.get("/api/auth/oauth/google/callback", params={"code": "good-code", "state": state})
        assert response.status_code == 401
        assert db_session.query(User).count() == 0
