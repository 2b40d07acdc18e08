"""Lookup of the role attribute stored for an identity."""

import logging
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ..domain import Profile, Role
from .database import DBProfile

log = logging.getLogger(__name__)


class ProfileStore():
    """Profiles keyed by identity-provider user id.

    ``session_factory`` is called once per lookup so that concurrent
    requests never share a ``Session``.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_profile(self, identity_id: str) -> Optional[Profile]:
        """Gets the profile for ``identity_id`` or None."""
        with self.session_factory() as db:
            row = db.query(DBProfile) \
                .filter(DBProfile.supabase_id == identity_id) \
                .first()
            if row is None:
                log.debug("no profile for identity %s", identity_id)
                return None
            return Profile.model_validate(row)

    def create_profile(self, identity_id: str, email: Optional[str] = None,
                       name: str = '', phone: str = '',
                       role: Optional[str] = Role.ADMIN.value) -> Profile:
        """Provision a profile row for an identity."""
        with self.session_factory() as db:
            row = DBProfile(supabase_id=identity_id, email=email, name=name,
                            phone=phone, role=role)
            try:
                db.add(row)
                db.commit()
            except Exception:
                db.rollback()
                raise
            return Profile.model_validate(row)
