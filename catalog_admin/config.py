"""Configuration for the catalog admin service."""

import os
from typing import List, Optional

from pydantic import BaseModel

SUPABASE_URL = os.environ.get('SUPABASE_URL', 'http://localhost:54321')
"""Base URL of the identity provider (GoTrue-compatible auth API)."""

SUPABASE_SERVICE_KEY = os.environ.get('SUPABASE_SERVICE_KEY', '')
"""API key sent to the identity provider with every call."""

SUPABASE_JWT_SECRET = os.environ.get('SUPABASE_JWT_SECRET', '')
"""When set, access tokens are verified locally instead of by a round trip."""

IDP_TIMEOUT = os.environ.get('IDP_TIMEOUT', '10')

DATABASE_URL = os.environ.get('DATABASE_URL', 'sqlite:///./catalog.db')
ECHO_SQL = os.environ.get('ECHO_SQL', 'false')

AUTH_SESSION_COOKIE_NAME = os.environ.get('AUTH_SESSION_COOKIE_NAME', 'token')
SECURE = os.environ.get('SECURE', 'true')
DOMAIN = os.environ.get('DOMAIN')

CORS_ORIGINS = os.environ.get('CORS_ORIGINS', 'http://127.0.0.1:5500')
SERVER_ROOT_PATH = os.environ.get('SERVER_ROOT_PATH', '')
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


def _flag(value: Optional[str], default: bool = False) -> bool:
    if value is None or value == '':
        return default
    return value.lower() not in ['false', 'no', '0', 'off']


class Settings(BaseModel):
    """Runtime settings, built once at startup and handed to the app."""

    supabase_url: str = SUPABASE_URL
    supabase_service_key: str = SUPABASE_SERVICE_KEY
    supabase_jwt_secret: str = SUPABASE_JWT_SECRET
    idp_timeout: float = 10.0

    database_url: str = DATABASE_URL
    echo_sql: bool = False

    cookie_name: str = AUTH_SESSION_COOKIE_NAME
    secure: bool = True
    samesite: str = 'lax'
    domain: Optional[str] = None

    cors_origins: List[str] = []
    root_path: str = SERVER_ROOT_PATH
    log_level: str = LOG_LEVEL

    @classmethod
    def from_env(cls) -> 'Settings':
        """Read settings from ``os.environ`` at call time."""
        domain = os.environ.get('DOMAIN', DOMAIN)
        if domain and domain[0] != '.':
            domain = '.' + domain
        origins = os.environ.get('CORS_ORIGINS', CORS_ORIGINS)
        return cls(
            supabase_url=os.environ.get('SUPABASE_URL', SUPABASE_URL),
            supabase_service_key=os.environ.get('SUPABASE_SERVICE_KEY',
                                                SUPABASE_SERVICE_KEY),
            supabase_jwt_secret=os.environ.get('SUPABASE_JWT_SECRET',
                                               SUPABASE_JWT_SECRET),
            idp_timeout=float(os.environ.get('IDP_TIMEOUT', IDP_TIMEOUT)),
            database_url=os.environ.get('DATABASE_URL', DATABASE_URL),
            echo_sql=_flag(os.environ.get('ECHO_SQL', ECHO_SQL)),
            cookie_name=os.environ.get('AUTH_SESSION_COOKIE_NAME',
                                       AUTH_SESSION_COOKIE_NAME),
            secure=_flag(os.environ.get('SECURE', SECURE), default=True),
            domain=domain or None,
            cors_origins=[o.strip() for o in origins.split(',') if o.strip()],
            root_path=os.environ.get('SERVER_ROOT_PATH', SERVER_ROOT_PATH),
            log_level=os.environ.get('LOG_LEVEL', LOG_LEVEL),
        )
