"""Special pytest fixture configuration file.

This file automatically provides all fixtures defined in it to all
pytest tests in this directory and sub directories.

The app under test gets an in-memory SQLite database and a fake identity
provider; nothing leaves the process.
"""
import secrets
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from catalog_admin.config import Settings
from catalog_admin.domain import Identity, ProviderSession
from catalog_admin.exceptions import CredentialRejected
from catalog_admin.main import create_app
from catalog_admin.services.database import DBProduct, make_engine


class FakeIdentityProvider:
    """Stands in for :class:`.SupabaseAuthClient`."""

    def __init__(self, expires_in: int = 3600) -> None:
        self.expires_in = expires_in
        self.tokens: Dict[str, Identity] = {}
        self.accounts: Dict[str, Tuple[str, Identity]] = {}
        self.calls: List[str] = []

    def add_user(self, user_id: str, email: str, password: str = 'secret') -> str:
        """Register an account and return a valid token for it."""
        identity = Identity(id=user_id, email=email)
        self.accounts[email] = (password, identity)
        token = secrets.token_hex(16)
        self.tokens[token] = identity
        return token

    def get_user(self, token: str) -> Optional[Identity]:
        self.calls.append(token)
        if token not in self.tokens:
            raise CredentialRejected('invalid JWT')
        return self.tokens[token]

    def sign_in_with_password(self, email: str, password: str) -> ProviderSession:
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise CredentialRejected('Invalid login credentials')
        token = secrets.token_hex(16)
        self.tokens[token] = account[1]
        return ProviderSession(access_token=token, expires_in=self.expires_in,
                               user=account[1])


@pytest.fixture
def settings():
    return Settings(database_url='sqlite://', supabase_url='http://idp.test',
                    supabase_service_key='testing-key', cookie_name='token',
                    cors_origins=[], log_level='DEBUG')


@pytest.fixture
def engine():
    return make_engine('sqlite://')


@pytest.fixture
def idp():
    return FakeIdentityProvider()


@pytest.fixture
def app(settings, idp, engine):
    return create_app(settings, idp=idp, engine=engine)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def session_factory(app):
    return app.extra['SessionLocal']


@pytest.fixture
def profiles(app):
    return app.extra['profiles']


@pytest.fixture
def admin_token(idp, profiles):
    token = idp.add_user('admin-1', 'admin@example.com', 'adminpass')
    profiles.create_profile('admin-1', email='admin@example.com', role='admin')
    return token


@pytest.fixture
def member_token(idp, profiles):
    token = idp.add_user('member-1', 'member@example.com', 'memberpass')
    profiles.create_profile('member-1', email='member@example.com', role='customer')
    return token


@pytest.fixture
def admin_client(client, admin_token):
    client.cookies.set('token', admin_token)
    return client


@pytest.fixture
def seeded(session_factory):
    """Product A (active, two images) and B (inactive, one image)."""
    base = datetime(2024, 5, 1, 12, 0, 0)
    with session_factory() as db:
        a = DBProduct(name='A', description='first', status='active',
                      images=['x', 'y'], price=10.0,
                      created_at=base, updated_at=base + timedelta(days=3))
        b = DBProduct(name='B', description='second', status='inactive',
                      images=['z'], price=20.0,
                      created_at=base + timedelta(days=1),
                      updated_at=base + timedelta(days=1))
        db.add_all([a, b])
        db.commit()
        return {'A': a.id, 'B': b.id,
                'last_updated': base + timedelta(days=3)}
