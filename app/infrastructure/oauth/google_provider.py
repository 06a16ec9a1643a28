"""Google OAuth2 provider — authorization-code flow over httpx."""

from typing import Any, Dict, Optional

import httpx
import structlog

from app.config import get_settings
from app.domain.schemas.auth import OAuthUserInfo

logger = structlog.get_logger(__name__)

PROVIDER_NAME = "GOOGLE"


class GoogleOAuthProvider:
    """Handle Google OAuth authentication."""

    GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
    GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"

    def __init__(self, client_id: str, client_secret: str, redirect_uri: str, timeout: float = 10.0):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def get_authorization_url(self, state: Optional[str] = None) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": "openid email profile",
            "prompt": "select_account",
        }
        if state:
            params["state"] = state
        return str(httpx.URL(self.GOOGLE_AUTH_URL, params=params))

    async def exchange_code_for_tokens(self, code: str) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                self.GOOGLE_TOKEN_URL,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "code": code,
                    "grant_type": "authorization_code",
                    "redirect_uri": self.redirect_uri,
                },
            )
            response.raise_for_status()
            return response.json()

    async def get_user_info(self, access_token: str) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(
                self.GOOGLE_USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            response.raise_for_status()
            return response.json()

    async def authenticate(self, code: str) -> Optional[OAuthUserInfo]:
        """
        Complete the OAuth flow: exchange the code, then fetch the profile.

        Returns None when Google rejects the code or is unreachable.
        """
        try:
            tokens = await self.exchange_code_for_tokens(code)
            access_token = tokens.get("access_token")
            if not access_token:
                logger.error("No access token in Google token response")
                return None

            profile = await self.get_user_info(access_token)
        except httpx.HTTPStatusError as e:
            logger.error(
                "Google OAuth HTTP error",
                status_code=e.response.status_code,
                body=e.response.text[:500],
            )
            return None
        except httpx.RequestError as e:
            logger.error("Google OAuth request error", error=str(e))
            return None

        if not profile.get("sub") or not profile.get("email"):
            logger.error("Google profile without subject or email")
            return None

        return OAuthUserInfo(
            subject=profile["sub"],
            email=profile["email"],
            email_verified=profile.get("email_verified") in (True, "true"),
            given_name=profile.get("given_name"),
            family_name=profile.get("family_name"),
            picture=profile.get("picture"),
        )


def get_google_provider() -> GoogleOAuthProvider:
    settings = get_settings()
    return GoogleOAuthProvider(
        client_id=settings.GOOGLE_CLIENT_ID,
        client_secret=settings.GOOGLE_CLIENT_SECRET,
        redirect_uri=settings.GOOGLE_REDIRECT_URI,
    )
