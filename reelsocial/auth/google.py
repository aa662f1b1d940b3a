# =============================================================================
# REELSOCIAL BACKEND - GOOGLE SIGN-IN
# =============================================================================
# File: auth/google.py
# Description: Verification of Google ID tokens with google-auth
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi.concurrency import run_in_threadpool
from google.auth.exceptions import GoogleAuthError as GoogleLibraryError
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from reelsocial.core.exceptions import GoogleAuthError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GoogleIdentity:
    """Claims of a verified Google ID token that the app uses."""
    subject: str
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None


class GoogleTokenVerifier:
    """
    Verifies ID tokens issued to our Google OAuth client.

    ``verify_oauth2_token`` fetches Google's signing certificates over HTTP,
    so it runs in the threadpool.
    """

    def __init__(self, client_id: Optional[str]):
        self._client_id = client_id
        self._request = google_requests.Request()

    @property
    def is_configured(self) -> bool:
        return bool(self._client_id)

    async def verify(self, credential: str) -> GoogleIdentity:
        """
        Verify a credential and return the identity it asserts.

        Raises:
            GoogleAuthError: If the token is invalid, not for our client,
                has no verified email, or Google sign-in is not configured
        """
        if not self._client_id:
            raise GoogleAuthError(details={"reason": "Google sign-in is not configured"})

        try:
            claims = await run_in_threadpool(
                id_token.verify_oauth2_token,
                credential,
                self._request,
                self._client_id,
            )
        except (ValueError, GoogleLibraryError) as e:
            logger.info("Rejected Google credential: %s", e)
            raise GoogleAuthError()

        email = claims.get("email")
        if not email or not claims.get("email_verified", False):
            raise GoogleAuthError(details={"reason": "Email not verified"})

        return GoogleIdentity(
            subject=claims["sub"],
            email=email,
            name=claims.get("name"),
            picture=claims.get("picture"),
        )
