"""SQLAlchemy models and engine helpers for the catalog database."""

from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, Text, \
    create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def now() -> datetime:
    """Current time in UTC."""
    return datetime.now(tz=timezone.utc)


class DBProduct(Base):
    """Persistence for :class:`.domain.Product`."""

    __tablename__ = 'products'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255))
    description = Column(Text)
    status = Column(String(64), index=True)
    """``active`` is the only value the public listing shows."""
    images = Column(JSON)
    """Ordered list of image URLs, though any JSON value is tolerated."""
    price = Column(Float)
    created_at = Column(DateTime(timezone=True), default=now, index=True)
    updated_at = Column(DateTime(timezone=True), default=now)


class DBProfile(Base):
    """Role attribute of an identity-provider user.

    +-------------+--------------+------+-----+
    | Field       | Type         | Null | Key |
    +-------------+--------------+------+-----+
    | id          | int          | NO   | PRI |
    | supabase_id | varchar(64)  | NO   | UNI |
    | email       | varchar(255) | YES  |     |
    | name        | varchar(255) | YES  |     |
    | phone       | varchar(32)  | YES  |     |
    | role        | varchar(32)  | YES  |     |
    | created_at  | datetime     | YES  |     |
    +-------------+--------------+------+-----+
    """

    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, autoincrement=True)
    supabase_id = Column(String(64), nullable=False, unique=True, index=True)
    email = Column(String(255))
    name = Column(String(255))
    phone = Column(String(32))
    role = Column(String(32))
    created_at = Column(DateTime(timezone=True), default=now)


def make_engine(url: str, echo: bool = False) -> Engine:
    """Build the engine shared by every request."""
    kwargs: Dict[str, Any] = {'echo': echo}
    if 'sqlite' in url:
        kwargs['connect_args'] = {'check_same_thread': False}
        if ':memory:' in url or url.rstrip('/') == 'sqlite:':
            # One connection, otherwise each thread sees its own empty db.
            kwargs['poolclass'] = StaticPool
    return create_engine(url, **kwargs)


def create_all(engine: Engine) -> None:
    """Create all tables in the database."""
    Base.metadata.create_all(engine)


def drop_all(engine: Engine) -> None:
    """Drop all tables in the database."""
    Base.metadata.drop_all(engine)
