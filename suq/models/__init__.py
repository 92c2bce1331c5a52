"""Database models."""
from suq.models.product import PRODUCTS_COLLECTION, ProductStatus
from suq.models.user import AccessToken, User

__all__ = ["AccessToken", "PRODUCTS_COLLECTION", "ProductStatus", "User"]
