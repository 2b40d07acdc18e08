"""Provides access to the products data store."""

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..domain import Product, ProductFields
from ..exceptions import NotFound, UpstreamFailure
from .database import DBProduct, now

logger = logging.getLogger(__name__)

ACTIVE = 'active'


def _newest_first(query):
    return query.order_by(DBProduct.created_at.desc(), DBProduct.id.desc())


def list_public(db: Session) -> List[Product]:
    """
    Products visible on the storefront.

    Only products whose status is ``active`` are returned, newest first.

    Raises
    ------
    :class:`.UpstreamFailure`
        When there is a problem querying the database.
    """
    try:
        rows = _newest_first(
            db.query(DBProduct).filter(DBProduct.status == ACTIVE)
        ).all()
    except SQLAlchemyError as e:
        logger.error('Public product listing failed', exc_info=True)
        raise UpstreamFailure(str(e)) from e
    return [Product.model_validate(row) for row in rows]


def list_admin(db: Session) -> List[Product]:
    """All products regardless of status, newest first."""
    try:
        rows = _newest_first(db.query(DBProduct)).all()
    except SQLAlchemyError as e:
        logger.error('Admin product listing failed', exc_info=True)
        raise UpstreamFailure(str(e)) from e
    return [Product.model_validate(row) for row in rows]


def create(db: Session, fields: ProductFields) -> Product:
    """
    Create a new product record.

    Fields are stored as given; nothing is required, so an absent field is
    stored as null.

    Parameters
    ----------
    db : :class:`sqlalchemy.orm.Session`
    fields : :class:`.ProductFields`

    Returns
    -------
    :class:`.Product`
        The stored record, with its generated id and timestamps.

    Raises
    ------
    :class:`.UpstreamFailure`
        When the database refuses the write.
    """
    row = DBProduct(**fields.model_dump())
    try:
        db.add(row)
        db.commit()
        db.refresh(row)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error('Could not create product', exc_info=True)
        raise UpstreamFailure(str(e)) from e
    return Product.model_validate(row)


def update(db: Session, product_id: int, fields: ProductFields) -> Product:
    """
    Merge ``fields`` into an existing product and refresh ``updated_at``.

    Only the fields present in the request are written. There is no upsert:
    an unknown id raises :class:`.NotFound`.

    Raises
    ------
    :class:`.NotFound`
        When no product has ``product_id``.
    :class:`.UpstreamFailure`
        When there is a problem talking to the database.
    """
    try:
        row = db.get(DBProduct, product_id)
    except SQLAlchemyError as e:
        raise UpstreamFailure(str(e)) from e
    if row is None:
        raise NotFound()

    for key, value in fields.model_dump(exclude_unset=True).items():
        setattr(row, key, value)
    row.updated_at = now()
    try:
        db.commit()
        db.refresh(row)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error('Could not update product %s', product_id, exc_info=True)
        raise UpstreamFailure(str(e)) from e
    return Product.model_validate(row)


def delete(db: Session, product_id: int) -> None:
    """
    Remove a product.

    Raises
    ------
    :class:`.NotFound`
        When no product has ``product_id``; this is never treated as success.
    :class:`.UpstreamFailure`
        When there is a problem talking to the database.
    """
    try:
        count = db.query(DBProduct) \
            .filter(DBProduct.id == product_id) \
            .delete()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error('Could not delete product %s', product_id, exc_info=True)
        raise UpstreamFailure(str(e)) from e
    if count == 0:
        raise NotFound()
