"""Errors raised by the catalog admin service and their HTTP mapping."""

from enum import Enum
from typing import Dict

from fastapi import status


class ErrorKind(str, Enum):
    MISSING_CREDENTIAL = 'MissingCredential'
    INVALID_CREDENTIAL = 'InvalidCredential'
    PROFILE_NOT_FOUND = 'ProfileNotFound'
    INSUFFICIENT_ROLE = 'InsufficientRole'
    NOT_FOUND = 'NotFound'
    UPSTREAM_FAILURE = 'UpstreamFailure'
    UNEXPECTED_FAILURE = 'UnexpectedFailure'


STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.MISSING_CREDENTIAL: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INVALID_CREDENTIAL: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.PROFILE_NOT_FOUND: status.HTTP_403_FORBIDDEN,
    ErrorKind.INSUFFICIENT_ROLE: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.UPSTREAM_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.UNEXPECTED_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class CatalogError(RuntimeError):
    """Base class: a machine readable ``kind`` plus a human readable detail."""

    def __init__(self, kind: ErrorKind, detail: str) -> None:
        super().__init__(detail)
        self.kind = kind
        self.detail = detail

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class AuthorizationDenied(CatalogError):
    """The gateway refused the request."""

    def __init__(self, kind: ErrorKind, detail: str,
                 clear_session: bool = False) -> None:
        super().__init__(kind, detail)
        self.clear_session = clear_session


class NotFound(CatalogError):
    """No record matches the requested id."""

    def __init__(self, detail: str = 'Product not found') -> None:
        super().__init__(ErrorKind.NOT_FOUND, detail)


class UpstreamFailure(CatalogError):
    """The identity provider or the data store reported an error."""

    def __init__(self, detail: str) -> None:
        super().__init__(ErrorKind.UPSTREAM_FAILURE, detail)


class CredentialRejected(RuntimeError):
    """The identity provider refused a credential or a password grant."""
