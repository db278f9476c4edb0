"""Bearer-token verification against the OAuth identity provider.

Two modes are supported:

- local: the provider signs access tokens as JWTs with a shared secret, so the
  token is decoded in-process and its `sub` claim is the user id;
- remote: the token is sent to the provider's `/user` endpoint, which answers
  with the user record. A single bounded wait applies; nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from jose import JWTError, jwt

from humor_gallery.core.errors import ServiceUnreachableError, UnauthenticatedError
from humor_gallery.core.settings import settings

logger = logging.getLogger(__name__)

HTTP_OK = 200
HTTP_INTERNAL_SERVER_ERROR = 500


@dataclass(frozen=True)
class IdentityConfig:
    """Immutable configuration for token verification."""

    jwt_secret: str
    jwt_algorithm: str
    jwt_audience: str | None
    verify_remote: bool
    auth_url: str | None
    api_key: str | None
    timeout_seconds: float


def load_identity_config() -> IdentityConfig:
    """Build configuration object from global settings."""
    return IdentityConfig(
        jwt_secret=settings.auth_jwt_secret,
        jwt_algorithm=settings.auth_jwt_algorithm,
        jwt_audience=settings.auth_jwt_audience,
        verify_remote=settings.auth_verify_remote,
        auth_url=settings.auth_url,
        api_key=settings.auth_api_key,
        timeout_seconds=float(settings.auth_timeout_seconds),
    )


class IdentityService:
    """Resolve a bearer credential to the provider's user id."""

    def __init__(
        self,
        config: IdentityConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_identity_config()
        self._transport = transport

    async def verify(self, credential: str | None) -> str:
        """Return the user id for `credential`.

        Raises:
            UnauthenticatedError: If the credential is missing, malformed or rejected.
            ServiceUnreachableError: If the provider could not be reached in time.
        """
        if not credential:
            raise UnauthenticatedError("Missing bearer token")
        if self.config.verify_remote:
            return await self._verify_remote(credential)
        return self._verify_local(credential)

    def _verify_local(self, token: str) -> str:
        audience = self.config.jwt_audience
        try:
            payload = jwt.decode(
                token,
                self.config.jwt_secret,
                algorithms=[self.config.jwt_algorithm],
                audience=audience,
                options={"verify_aud": audience is not None},
            )
        except JWTError as err:
            logger.info("Rejected bearer token: %s", err)
            raise UnauthenticatedError("Could not validate credentials") from err

        subject = payload.get("sub")
        if not subject:
            raise UnauthenticatedError("Could not validate credentials")
        return str(subject)

    async def _verify_remote(self, token: str) -> str:
        if not self.config.auth_url:
            raise ServiceUnreachableError("Identity provider URL is not configured")

        headers = {"Authorization": f"Bearer {token}"}
        if self.config.api_key:
            headers["apikey"] = self.config.api_key

        try:
            async with httpx.AsyncClient(
                base_url=self.config.auth_url,
                timeout=httpx.Timeout(self.config.timeout_seconds),
                transport=self._transport,
            ) as client:
                response = await client.get("/user", headers=headers)
        except httpx.TimeoutException as exc:
            logger.warning("Identity provider timed out after %.1fs", self.config.timeout_seconds)
            raise ServiceUnreachableError("Identity provider timed out") from exc
        except httpx.HTTPError as exc:
            logger.warning("Identity provider request failed: %s", exc)
            raise ServiceUnreachableError(f"Identity provider request failed: {exc}") from exc

        if response.status_code >= HTTP_INTERNAL_SERVER_ERROR:
            logger.warning("Identity provider responded with %s", response.status_code)
            raise ServiceUnreachableError(
                f"Identity provider responded with {response.status_code}"
            )
        if response.status_code != HTTP_OK:
            raise UnauthenticatedError("Could not validate credentials")

        try:
            user_id = response.json().get("id")
        except ValueError as exc:
            raise UnauthenticatedError("Malformed identity provider response") from exc
        if not user_id:
            raise UnauthenticatedError("Could not validate credentials")
        return str(user_id)


def get_identity_service() -> IdentityService:
    """Return an identity service configured from settings."""
    return IdentityService()
