"""Request dependencies shared by the routers."""
from logging import getLogger
from typing import Iterator

from fastapi import Request
from sqlalchemy.orm import Session

from .domain import Authorization

__version__ = '0.1.0'


def get_db(request: Request) -> Iterator[Session]:
    """Dependency for fastapi routes"""
    db: Session = request.app.extra['SessionLocal']()
    try:
        yield db
    except Exception:
        logger = getLogger(__name__)
        logger.warning('Request failed, rolling back', exc_info=1)
        db.rollback()
        raise
    finally:
        db.close()


async def require_admin(request: Request) -> Authorization:
    """Dependency that lets only admins through."""
    return await request.app.extra['gateway'](request)
