"""Sign-in and sign-out."""
import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from .domain import Credentials, ProviderSession
from .exceptions import AuthorizationDenied, CredentialRejected, ErrorKind, \
    UpstreamFailure
from .services.identity import SupabaseAuthClient
from .services.profiles import ProfileStore
from .sessions import SessionCodec

logger = logging.getLogger(__name__)

router = APIRouter()


async def sign_in(idp: SupabaseAuthClient, profiles: ProfileStore,
                  codec: SessionCodec, email: str, password: str) -> Response:
    """Authenticate with the identity provider and open an admin session.

    The cookie is only issued once the identity is known to have the admin
    role. A user who authenticates correctly without being an admin gets
    no session at all.
    """
    try:
        session: ProviderSession = await run_in_threadpool(
            idp.sign_in_with_password, email, password)
    except (CredentialRejected, UpstreamFailure) as exc:
        logger.warning("Login failed for %s: %s", email, exc)
        raise AuthorizationDenied(ErrorKind.INVALID_CREDENTIAL, str(exc)) from exc

    try:
        profile = await run_in_threadpool(profiles.get_profile, session.user.id)
    except Exception as exc:
        logger.error("Profile lookup failed during login", exc_info=True)
        raise AuthorizationDenied(ErrorKind.PROFILE_NOT_FOUND,
                                  'Profile not found.') from exc
    if profile is None:
        raise AuthorizationDenied(ErrorKind.PROFILE_NOT_FOUND, 'Profile not found.')
    if not profile.is_admin:
        logger.warning("Login refused: %s is not an admin", session.user.email)
        raise AuthorizationDenied(ErrorKind.INSUFFICIENT_ROLE, 'Not an administrator.')

    logger.info("Admin logged in: %s", session.user.email)
    response = JSONResponse({'success': True}, status_code=status.HTTP_200_OK)
    return codec.apply(response, codec.issue(session.access_token,
                                             session.expires_in))


def sign_out(codec: SessionCodec) -> Response:
    """Always succeeds, whether or not there was a session."""
    response = JSONResponse({'success': True, 'message': 'Logged out.'},
                            status_code=status.HTTP_200_OK)
    return codec.apply(response, codec.clear())


@router.post('/login')
async def login(request: Request, credentials: Credentials) -> Response:
    """User logs in with email and password."""
    return await sign_in(request.app.extra['idp'],
                         request.app.extra['profiles'],
                         request.app.extra['session_codec'],
                         credentials.email, credentials.password)


@router.post('/logout')
async def logout(request: Request) -> Response:
    """Log out by expiring the session cookie."""
    return sign_out(request.app.extra['session_codec'])
