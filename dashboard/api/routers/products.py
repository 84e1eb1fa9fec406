"""
Channel Hub — Products Router
===============================
Product reference list. Entries and targets refer to products by name.

Endpoints:
  GET    /api/products        - List products (by name)
  POST   /api/products        - Add a product
  DELETE /api/products/{id}   - Delete a product
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from dashboard.api.deps import current_session, get_store, http_error
from hub.lib.entity_store import EntityStore
from hub.lib.errors import HubError
from hub.lib.logger import setup_logger
from hub.lib.session import Session
from models.dashboard_models import CreatedResponse, NameCreate, StatusResponse

logger = setup_logger("products_router")

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("")
async def list_products(
    session: Session = Depends(current_session),
    store: EntityStore = Depends(get_store),
):
    """All products ordered by name."""
    try:
        products = store.list_products(session)
        return {"results": products, "count": len(products)}
    except HubError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("List products failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch products")


@router.post("", response_model=CreatedResponse, status_code=201)
async def create_product(
    body: NameCreate,
    session: Session = Depends(current_session),
    store: EntityStore = Depends(get_store),
):
    """Add a product."""
    name = body.name.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Product name is required")
    try:
        product_id = store.create_product(session, name)
        return CreatedResponse(id=product_id, message="Product added successfully!")
    except HubError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("Create product failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to add product")


@router.delete("/{product_id}", response_model=StatusResponse)
async def delete_product(
    product_id: str,
    session: Session = Depends(current_session),
    store: EntityStore = Depends(get_store),
):
    """Delete a product. Entries keep the product name they were saved with."""
    try:
        store.delete_product(session, product_id)
        return StatusResponse(status="deleted", message="Product deleted successfully!")
    except HubError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("Delete product failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to delete product")
