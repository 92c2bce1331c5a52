"""Product CRUD API endpoints."""
from typing import Optional, Union

from fastapi import APIRouter, Depends, Query

from suq.errors import NotFoundError, ValidationError, failure_message
from suq.schemas.product import (
    DiscoverResponse,
    MessageResponse,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from suq.services.catalog_views import discover
from suq.services.product_repository import ProductRepository, get_product_repository

router = APIRouter(prefix="/api/product", tags=["products"])
discover_router = APIRouter(prefix="/api/discover", tags=["products"])


def _require_id(product_id: Optional[str]) -> str:
    if not product_id:
        raise ValidationError("Missing product id")
    return product_id


def _fetch(repo: ProductRepository, product_id: str) -> dict:
    with failure_message("Failed to fetch product"):
        product = repo.get(product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


def _update(repo: ProductRepository, product_id: str, updates: ProductUpdate) -> MessageResponse:
    with failure_message("Failed to update product"):
        repo.update(product_id, updates.to_document())
    return MessageResponse(message="Product updated successfully")


def _delete(repo: ProductRepository, product_id: str) -> MessageResponse:
    with failure_message("Failed to delete product"):
        repo.delete(product_id)
    return MessageResponse(message="Product deleted successfully")


@router.get("", response_model=Union[list[ProductResponse], ProductResponse])
def list_products(
    product_id: Optional[str] = Query(None, alias="id", description="Fetch a single product"),
    repo: ProductRepository = Depends(get_product_repository),
):
    """
    List all products.

    With ``?id=`` the single matching product is returned instead.
    """
    if product_id:
        return _fetch(repo, product_id)

    with failure_message("Failed to fetch products"):
        return repo.list()


@router.post("", response_model=ProductResponse, status_code=201)
def create_product(
    product: ProductCreate, repo: ProductRepository = Depends(get_product_repository)
):
    """Create a new product. Status defaults to available."""
    with failure_message("Failed to add product"):
        return repo.create(product.to_document())


@router.put("", response_model=MessageResponse)
def update_product_by_query(
    updates: ProductUpdate,
    product_id: Optional[str] = Query(None, alias="id"),
    repo: ProductRepository = Depends(get_product_repository),
):
    """Update the product named by ``?id=``."""
    return _update(repo, _require_id(product_id), updates)


@router.delete("", response_model=MessageResponse)
def delete_product_by_query(
    product_id: Optional[str] = Query(None, alias="id"),
    repo: ProductRepository = Depends(get_product_repository),
):
    """Delete the product named by ``?id=``."""
    return _delete(repo, _require_id(product_id))


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: str, repo: ProductRepository = Depends(get_product_repository)):
    """Get a single product by ID."""
    return _fetch(repo, product_id)


@router.put("/{product_id}", response_model=MessageResponse)
def update_product(
    product_id: str,
    updates: ProductUpdate,
    repo: ProductRepository = Depends(get_product_repository),
):
    """
    Update a product.

    Only provided fields are changed; a textual sellerId is stored as an
    ObjectId.
    """
    return _update(repo, product_id, updates)


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(product_id: str, repo: ProductRepository = Depends(get_product_repository)):
    """Delete a product. Deleting an unknown product still succeeds."""
    return _delete(repo, product_id)


@discover_router.get("", response_model=DiscoverResponse)
def discover_products(repo: ProductRepository = Depends(get_product_repository)):
    """New arrivals, top ranked and top selling products for the home page."""
    with failure_message("Failed to fetch products"):
        products = repo.list()
    return discover(products)
