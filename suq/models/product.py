"""Product document definitions for the MongoDB catalog."""
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from bson import ObjectId

from suq.errors import InvalidIdError

PRODUCTS_COLLECTION = "products"

OBJECT_ID_PATTERN = r"^[a-fA-F0-9]{24}$"
_OBJECT_ID_RE = re.compile(OBJECT_ID_PATTERN)

# Server-assigned keys that callers may never write
IMMUTABLE_FIELDS = ("_id", "createdAt")


class ProductStatus(str, Enum):
    """Listing status of a product."""

    AVAILABLE = "available"
    SOLD = "sold"
    RESERVED = "reserved"


# A seller's "orders" are their listings in one of these states
SALE_STATUSES = (ProductStatus.RESERVED.value, ProductStatus.SOLD.value)


def is_object_id(value: Any) -> bool:
    if isinstance(value, ObjectId):
        return True
    return isinstance(value, str) and bool(_OBJECT_ID_RE.fullmatch(value))


def to_object_id(value: Any, message: str = "Invalid product id") -> ObjectId:
    """Parse a 24-hex string (or pass through an ObjectId)."""
    if isinstance(value, ObjectId):
        return value
    if not is_object_id(value):
        raise InvalidIdError(message)
    return ObjectId(value)


def utc_now() -> datetime:
    """Current UTC time truncated to what BSON dates can hold (milliseconds)."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)
