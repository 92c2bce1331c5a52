"""Data access for the products collection."""
import logging
from typing import Any, Dict, List, Optional

from fastapi import Request
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from suq.errors import NotFoundError, PersistenceError, ValidationError
from suq.models.product import (
    IMMUTABLE_FIELDS,
    PRODUCTS_COLLECTION,
    ProductStatus,
    to_object_id,
    utc_now,
)

logger = logging.getLogger(__name__)


class ProductRepository:
    """
    CRUD over the products collection.

    Documents are plain dicts keyed the way they are stored (camelCase,
    ``_id`` as ObjectId). Every driver failure surfaces as PersistenceError.
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    def list(self) -> List[Dict[str, Any]]:
        """Return every product, in the store's natural order."""
        try:
            return list(self.collection.find({}))
        except PyMongoError as exc:
            raise PersistenceError() from exc

    def get(self, product_id: Any) -> Optional[Dict[str, Any]]:
        """Return one product, or None when no document has this id."""
        oid = to_object_id(product_id)
        try:
            return self.collection.find_one({"_id": oid})
        except PyMongoError as exc:
            raise PersistenceError() from exc

    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a new product.

        Timestamps are assigned here, status defaults to available and a
        textual sellerId is stored as an ObjectId.

        Returns:
            The persisted document including its generated ``_id``
        """
        _reject_immutable(fields)
        document = _normalize(dict(fields))
        now = utc_now()
        document["createdAt"] = now
        document["updatedAt"] = now
        if document.get("status") is None:
            document["status"] = ProductStatus.AVAILABLE.value

        try:
            result = self.collection.insert_one(document)
        except PyMongoError as exc:
            raise PersistenceError() from exc

        document["_id"] = result.inserted_id
        logger.info(f"Created product {result.inserted_id} for seller {document.get('sellerId')}")
        return document

    def update(self, product_id: Any, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge the supplied fields into an existing product.

        Raises:
            ValidationError: when trying to change the id or creation time
            NotFoundError: when no product has this id
        """
        oid = to_object_id(product_id)
        _reject_immutable(fields)

        updates = _normalize(dict(fields))
        updates["updatedAt"] = utc_now()

        try:
            document = self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": updates},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            raise PersistenceError() from exc

        if document is None:
            raise NotFoundError("Product not found")

        logger.info(f"Updated product {oid}: {sorted(updates)}")
        return document

    def delete(self, product_id: Any) -> bool:
        """Remove a product. Deleting a missing product is not an error."""
        oid = to_object_id(product_id)
        try:
            result = self.collection.delete_one({"_id": oid})
        except PyMongoError as exc:
            raise PersistenceError() from exc

        deleted = result.deleted_count > 0
        logger.info(f"Deleted product {oid}" if deleted else f"Product {oid} already absent")
        return deleted


def _reject_immutable(fields: Dict[str, Any]) -> None:
    forbidden = [key for key in IMMUTABLE_FIELDS if key in fields]
    if forbidden:
        raise ValidationError(f"Cannot set {', '.join(forbidden)}")


def _normalize(fields: Dict[str, Any]) -> Dict[str, Any]:
    if fields.get("sellerId") is not None:
        fields["sellerId"] = to_object_id(fields["sellerId"], "Invalid seller id")
    if isinstance(fields.get("status"), ProductStatus):
        fields["status"] = fields["status"].value
    return fields


def get_product_repository(request: Request) -> ProductRepository:
    """Dependency building a repository on the shared MongoDB handle."""
    return ProductRepository(request.app.state.mongo.collection(PRODUCTS_COLLECTION))
