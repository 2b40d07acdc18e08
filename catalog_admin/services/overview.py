"""Summary statistics over the product collection."""

from datetime import datetime
from typing import Any, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..domain import Overview
from ..exceptions import UpstreamFailure
from .database import DBProduct
from .products import ACTIVE


def summarize(rows: Iterable[Any]) -> Overview:
    """Fold rows having ``status``, ``images`` and ``updated_at``.

    An ``images`` value that is not a list counts as zero images.
    """
    total = 0
    active = 0
    images = 0
    last_updated: Optional[datetime] = None
    for row in rows:
        total += 1
        if row.status == ACTIVE:
            active += 1
        if isinstance(row.images, list):
            images += len(row.images)
        if row.updated_at is not None and (
                last_updated is None or row.updated_at > last_updated):
            last_updated = row.updated_at
    return Overview(total_products=total, active_products=active,
                    total_images=images, last_updated=last_updated)


def overview(db: Session) -> Overview:
    """Recompute the overview from the current collection."""
    try:
        rows = db.query(DBProduct.status, DBProduct.images,
                        DBProduct.created_at, DBProduct.updated_at).all()
    except SQLAlchemyError as e:
        raise UpstreamFailure(str(e)) from e
    return summarize(rows)
