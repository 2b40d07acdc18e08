"""Product and overview endpoints."""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from . import get_db, require_admin
from .domain import Authorization, Overview, Product, ProductFields
from .exceptions import NotFound
from .services import overview as overview_service
from .services import products

router = APIRouter()


def _parse_id(product_id: str) -> int:
    """An id that cannot name a product is simply not found."""
    try:
        return int(product_id)
    except ValueError:
        raise NotFound() from None


@router.get('/products', response_model=List[Product])
def list_public_products(db: Session = Depends(get_db)) -> List[Product]:
    """Storefront listing: active products only."""
    return products.list_public(db)


@router.get('/api/products', response_model=List[Product])
def list_products(_auth: Authorization = Depends(require_admin),
                  db: Session = Depends(get_db)) -> List[Product]:
    return products.list_admin(db)


@router.post('/api/products', response_model=Product,
             status_code=status.HTTP_201_CREATED)
def create_product(fields: ProductFields,
                   _auth: Authorization = Depends(require_admin),
                   db: Session = Depends(get_db)) -> Product:
    return products.create(db, fields)


@router.put('/api/products/{product_id}', response_model=Product)
def update_product(product_id: str, fields: ProductFields,
                   _auth: Authorization = Depends(require_admin),
                   db: Session = Depends(get_db)) -> Product:
    return products.update(db, _parse_id(product_id), fields)


@router.delete('/api/products/{product_id}')
def delete_product(product_id: str,
                   _auth: Authorization = Depends(require_admin),
                   db: Session = Depends(get_db)) -> dict:
    products.delete(db, _parse_id(product_id))
    return {'success': True}


@router.get('/api/overview', response_model=Overview)
def get_overview(_auth: Authorization = Depends(require_admin),
                 db: Session = Depends(get_db)) -> Overview:
    return overview_service.overview(db)
