"""
Route definitions for the products API.

Endpoints under /products:
- GET   /products               : list every product
- GET   /products/{product_id}  : get one product (id matched ignoring case)
- PATCH /products               : add a 1..5 rating to a product
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from ..exceptions import PersistenceError
from ..models import RatingRequest, StatusMessage
from .schemas import Product
from .store import CatalogStore

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5

router = APIRouter(prefix="/products", tags=["products"])


def get_store(request: Request) -> CatalogStore:
    """Return the store attached to the running application."""
    return request.app.state.store


@router.get("", response_model=List[Product])
def list_products(store: CatalogStore = Depends(get_store)) -> List[Product]:
    try:
        return store.list()
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{product_id}", response_model=Product)
def get_product(product_id: str, store: CatalogStore = Depends(get_store)) -> Product:
    try:
        product = store.get_by_id(product_id)
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.patch("", response_model=StatusMessage)
def rate_product(req: RatingRequest, store: CatalogStore = Depends(get_store)) -> StatusMessage:
    """Add a rating to a product.

    Rating bounds are enforced here; the store accepts any integer.
    """
    if not (req.product_id or "").strip():
        raise HTTPException(status_code=400, detail="ProductId cannot be empty")
    if req.rating < MIN_RATING:
        raise HTTPException(status_code=400, detail=f"Rating must be at least {MIN_RATING}")
    if req.rating > MAX_RATING:
        raise HTTPException(status_code=400, detail=f"Rating must be at most {MAX_RATING}")

    try:
        added = store.add_rating(req.product_id, req.rating)
    except PersistenceError as e:
        logger.error("Rating for %s not saved: %s", req.product_id, e)
        raise HTTPException(status_code=500, detail="Rating could not be saved")
    if not added:
        raise HTTPException(status_code=404, detail="Product not found")
    return StatusMessage(message=f"Rating added to {req.product_id}")
