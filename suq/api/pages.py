"""Data for the signed-in seller's dashboard and order pages."""
from fastapi import APIRouter, Depends, Request

from suq.errors import AuthError, NotFoundError, failure_message
from suq.schemas.auth import UserResponse
from suq.schemas.product import (
    OrderSummaryResponse,
    ProductResponse,
    SellerDashboardResponse,
)
from suq.services.catalog_views import sales_stats, seller_listings, seller_sales
from suq.services.product_repository import ProductRepository, get_product_repository

router = APIRouter(tags=["pages"])


def current_user(request: Request) -> UserResponse:
    """User attached by the access guard; redirects to login when missing."""
    user = getattr(request.state, "user", None)
    if user is None:
        raise AuthError()
    return user


def _all_products(repo: ProductRepository) -> list[dict]:
    with failure_message("Failed to fetch products"):
        return repo.list()


@router.get("/seller", response_model=SellerDashboardResponse)
def seller_dashboard(
    user: UserResponse = Depends(current_user),
    repo: ProductRepository = Depends(get_product_repository),
):
    """Listings owned by the signed-in seller."""
    products = seller_listings(_all_products(repo), user.id)
    return SellerDashboardResponse(user=user, products=products)


@router.get("/order", response_model=OrderSummaryResponse)
def order_summary(
    user: UserResponse = Depends(current_user),
    repo: ProductRepository = Depends(get_product_repository),
):
    """Reserved and sold listings of the signed-in seller, with totals."""
    sales = seller_sales(_all_products(repo), user.id)
    return {"sales": sales, "stats": sales_stats(sales)}


@router.get("/order/{product_id}", response_model=ProductResponse)
def order_detail(
    product_id: str,
    user: UserResponse = Depends(current_user),
    repo: ProductRepository = Depends(get_product_repository),
):
    """One of the signed-in seller's sales."""
    with failure_message("Failed to fetch product"):
        product = repo.get(product_id)
    if product is None or not seller_sales([product], user.id):
        raise NotFoundError("Order not found")
    return product
