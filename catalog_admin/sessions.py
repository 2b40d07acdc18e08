"""Carries the session credential in a cookie.

Nothing here verifies the credential; the identity provider does that on
every request.
"""
from datetime import datetime, timedelta, timezone
from typing import Literal, NamedTuple, Optional

from fastapi import Request, Response


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class CookieSpec(NamedTuple):
    """Everything needed to emit a ``Set-Cookie`` header."""

    key: str
    value: str
    max_age: int
    expires: datetime
    path: str
    domain: Optional[str]
    secure: bool
    httponly: bool
    samesite: Literal["lax", "strict", "none"]


class SessionCodec:
    def __init__(self, cookie_name: str = 'token', secure: bool = True,
                 samesite: Literal["lax", "strict", "none"] = "lax",
                 domain: Optional[str] = None) -> None:
        self.cookie_name = cookie_name
        self.secure = secure
        self.samesite = samesite
        self.domain = domain

    def _spec(self, value: str, max_age: int, expires: datetime) -> CookieSpec:
        return CookieSpec(key=self.cookie_name, value=value, max_age=max_age,
                          expires=expires, path='/', domain=self.domain,
                          secure=self.secure, httponly=True,
                          samesite=self.samesite)

    def issue(self, credential: str, ttl_seconds: int,
              now: Optional[datetime] = None) -> CookieSpec:
        """Cookie holding ``credential`` that expires ``ttl_seconds`` from now."""
        now = now or datetime.now(tz=timezone.utc)
        return self._spec(credential, int(ttl_seconds),
                          now + timedelta(seconds=int(ttl_seconds)))

    def clear(self) -> CookieSpec:
        """Cookie with the same scope that is already expired."""
        return self._spec('', 0, EPOCH)

    def extract(self, request: Request) -> Optional[str]:
        """The credential carried by ``request``, if any."""
        return request.cookies.get(self.cookie_name) or None

    def apply(self, response: Response, spec: CookieSpec) -> Response:
        response.set_cookie(spec.key, spec.value, max_age=spec.max_age,
                            expires=spec.expires, path=spec.path,
                            domain=spec.domain, secure=spec.secure,
                            httponly=spec.httponly, samesite=spec.samesite)
        return response
