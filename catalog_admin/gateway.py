"""Decides, per request, whether the caller may reach an admin operation."""

import logging
from typing import NamedTuple, Optional, Union

from fastapi import Request
from starlette.concurrency import run_in_threadpool

from .domain import Authorization, Identity, Profile
from .exceptions import AuthorizationDenied, CredentialRejected, ErrorKind, \
    UpstreamFailure
from .services.identity import SupabaseAuthClient
from .services.profiles import ProfileStore
from .sessions import SessionCodec

log = logging.getLogger(__name__)

MISSING_TOKEN = 'Missing token'
INVALID_TOKEN = 'Invalid token'
PROFILE_NOT_FOUND = 'User profile not found.'
NOT_AN_ADMIN = 'Access Denied: Not an administrator.'
INTERNAL_ERROR = 'Internal server error'


class Denied(NamedTuple):
    """Why a request was refused."""

    kind: ErrorKind
    detail: str
    clear_session: bool = False
    """Only set when the credential itself is unusable."""

    def to_exception(self) -> AuthorizationDenied:
        return AuthorizationDenied(self.kind, self.detail,
                                   clear_session=self.clear_session)


class AuthorizationGateway:
    """Check that the request carries a valid credential of an admin.

    The steps run strictly in order and stop at the first failure:
    credential present, credential accepted by the identity provider,
    profile found, profile role is admin. Any unexpected exception is a
    denial.

    Use an instance as a FastAPI dependency to get the
    :class:`.Authorization` as an argument of the route.
    """

    def __init__(self, codec: SessionCodec, idp: SupabaseAuthClient,
                 profiles: ProfileStore):
        self.codec = codec
        self.idp = idp
        self.profiles = profiles

    async def _verify(self, credential: str) -> Union[Identity, Denied]:
        try:
            identity: Optional[Identity] = await run_in_threadpool(
                self.idp.get_user, credential)
        except (CredentialRejected, UpstreamFailure) as ex:
            # An unverifiable credential is invalid, whatever the cause.
            log.warning("Auth failed: Invalid token. %s", ex)
            return Denied(ErrorKind.INVALID_CREDENTIAL, INVALID_TOKEN,
                          clear_session=True)
        if identity is None:
            log.warning("Auth failed: no user for token")
            return Denied(ErrorKind.INVALID_CREDENTIAL, INVALID_TOKEN,
                          clear_session=True)
        return identity

    async def _profile(self, identity: Identity) -> Union[Profile, Denied]:
        try:
            profile: Optional[Profile] = await run_in_threadpool(
                self.profiles.get_profile, identity.id)
        except Exception as ex:
            log.warning("Auth success, but profile fetch failed: %s", ex)
            return Denied(ErrorKind.PROFILE_NOT_FOUND, PROFILE_NOT_FOUND)
        if profile is None:
            log.warning("Auth success, but no profile for %s", identity.id)
            return Denied(ErrorKind.PROFILE_NOT_FOUND, PROFILE_NOT_FOUND)
        return profile

    async def authorize(self, request: Request) -> Union[Authorization, Denied]:
        """Return the :class:`.Authorization` or the reason for refusal."""
        try:
            credential = self.codec.extract(request)
            if not credential:
                log.warning("Auth failed: Missing token cookie for %s",
                            request.url.path)
                return Denied(ErrorKind.MISSING_CREDENTIAL, MISSING_TOKEN)

            identity = await self._verify(credential)
            if isinstance(identity, Denied):
                return identity

            profile = await self._profile(identity)
            if isinstance(profile, Denied):
                return profile

            if not profile.is_admin:
                log.warning("Access Denied: User %s is not an admin.",
                            identity.email)
                return Denied(ErrorKind.INSUFFICIENT_ROLE, NOT_AN_ADMIN)

            log.info("Admin user authenticated: %s", identity.email)
            return Authorization(identity=identity, role=profile.role)
        except Exception:
            log.error("Unexpected error while authorizing", exc_info=True)
            return Denied(ErrorKind.UNEXPECTED_FAILURE, INTERNAL_ERROR)

    async def __call__(self, request: Request) -> Authorization:
        result = await self.authorize(request)
        if isinstance(result, Denied):
            raise result.to_exception()
        return result
