"""Client for the external identity provider.

The provider speaks the GoTrue REST dialect used by Supabase: a password
grant at ``/auth/v1/token?grant_type=password`` and a user lookup at
``/auth/v1/user`` that validates an access token. When a JWT secret is
configured, access tokens are checked locally with PyJWT instead, which saves
a round trip per request.
"""

import logging
from typing import Any, Dict, Optional

import jwt
import requests

from ..domain import Identity, ProviderSession
from ..exceptions import CredentialRejected, UpstreamFailure

log = logging.getLogger(__name__)

ALGORITHM = "HS256"


def _reason(response: requests.Response) -> str:
    """Best effort error message from a provider error response."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code} from identity provider"
    if isinstance(body, dict):
        for key in ('error_description', 'msg', 'message', 'error'):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return f"HTTP {response.status_code} from identity provider"


class SupabaseAuthClient:
    """Verifies access tokens and performs password grants."""

    def __init__(self, url: str, api_key: str, jwt_secret: str = '',
                 timeout: float = 10.0,
                 session: Optional[requests.Session] = None) -> None:
        self.url = url.rstrip('/')
        self.api_key = api_key
        self.jwt_secret = jwt_secret
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self, token: Optional[str] = None) -> Dict[str, str]:
        headers = {'apikey': self.api_key, 'Accept': 'application/json'}
        if token:
            headers['Authorization'] = f'Bearer {token}'
        return headers

    def _call(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self.session.request(method, self.url + path,
                                            timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            log.error("identity provider unreachable: %s", e)
            raise UpstreamFailure(f"identity provider unreachable: {type(e).__name__}") from e
        if not response.ok:
            raise CredentialRejected(_reason(response))
        try:
            body = response.json()
        except ValueError as e:
            raise CredentialRejected("invalid JSON from identity provider") from e
        if not isinstance(body, dict):
            raise CredentialRejected("invalid identity provider response shape")
        return body

    def decode_token(self, token: str) -> Optional[Identity]:
        """Check an access token against the shared JWT secret."""
        try:
            claims = jwt.decode(token, self.jwt_secret, algorithms=[ALGORITHM],
                                options={"verify_aud": False})
        except jwt.ExpiredSignatureError as e:
            raise CredentialRejected("token has expired") from e
        except jwt.PyJWTError as e:
            raise CredentialRejected(f"invalid token: {type(e).__name__}") from e
        user_id = claims.get("sub")
        if not isinstance(user_id, str) or not user_id:
            return None
        return Identity(id=user_id, email=claims.get("email"))

    def get_user(self, token: str) -> Optional[Identity]:
        """
        Resolve an access token to the identity that owns it.

        Returns
        -------
        :class:`.Identity` or None
            None when the provider answers without a user.

        Raises
        ------
        :class:`.CredentialRejected`
            The provider refused the token.
        :class:`.UpstreamFailure`
            The provider could not be reached.
        """
        if not token:
            raise CredentialRejected("empty token")
        if self.jwt_secret:
            return self.decode_token(token)
        body = self._call('GET', '/auth/v1/user', headers=self._headers(token))
        user_id = body.get('id')
        if not isinstance(user_id, str) or not user_id:
            return None
        return Identity(id=user_id, email=body.get('email'))

    def sign_in_with_password(self, email: str, password: str) -> ProviderSession:
        """Exchange an email and password for an access token."""
        if not email or not password:
            raise CredentialRejected("email and password are required")
        body = self._call('POST', '/auth/v1/token',
                          params={'grant_type': 'password'},
                          json={'email': email, 'password': password},
                          headers=self._headers())
        user = body.get('user')
        if not isinstance(body.get('access_token'), str) or not isinstance(user, dict) \
                or not isinstance(user.get('id'), str):
            raise CredentialRejected("token endpoint did not return a session")
        return ProviderSession(
            access_token=body['access_token'],
            expires_in=int(body.get('expires_in') or 3600),
            user=Identity(id=user.get('id'), email=user.get('email')),
        )
