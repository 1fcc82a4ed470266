"""
Storefront Gateway: Product Service (Firestore adapter)
==========================================================

What:  CRUD over the Firestore "products" collection.
Why:   Products are schema-less documents; the gateway passes client fields
       straight through and only adds the document id on the way out.
How:   Uses the Admin SDK's native async client, so handlers suspend on
       Firestore I/O instead of blocking the event loop.

Response shapes:
    list_products()  → [{"id": <doc id>, **stored fields}, ...]
    create_product() → {"id": <new id>, **submitted fields}
    update_product() → {"id": <id>, **submitted fields}
                       (echo of the request, NOT the merged document)
"""

import logging
from typing import Any, Dict, List

import firebase_admin
from firebase_admin import credentials, firestore_async
from google.api_core.exceptions import NotFound

from storefront.config import Settings
from storefront.exceptions import (
    ConfigurationError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class ProductService:
    """
    Adapter over a Firestore collection reference.

    The collection is injected so tests can hand in an in-memory double with
    the same stream/add/document surface.
    """

    def __init__(self, collection: Any):
        self.collection = collection

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProductService":
        """
        Initialize the Firebase Admin app and return a service bound to the
        products collection.

        Raises:
            ConfigurationError: The credential document is missing or invalid.
        """
        try:
            cred = credentials.Certificate(settings.firebase_credentials_path)
        except (OSError, ValueError) as e:
            raise ConfigurationError(
                message=f"Could not load Firebase credentials from '{settings.firebase_credentials_path}'",
                context={"error": str(e)},
            ) from e

        options = {}
        if settings.firebase_database_url:
            options["databaseURL"] = settings.firebase_database_url

        try:
            firebase_app = firebase_admin.get_app()
        except ValueError:
            firebase_app = firebase_admin.initialize_app(cred, options or None)

        client = firestore_async.client(firebase_app)
        logger.info(
            "Firestore client initialized (collection=%s)",
            settings.products_collection,
        )
        return cls(client.collection(settings.products_collection))

    async def list_products(self) -> List[Dict[str, Any]]:
        """Every document in the collection, each augmented with its id."""
        products: List[Dict[str, Any]] = []
        try:
            async for snapshot in self.collection.stream():
                products.append({"id": snapshot.id, **(snapshot.to_dict() or {})})
        except Exception as e:
            logger.error("Failed to list products: %s", str(e))
            raise DatabaseError(context={"operation": "list", "error": str(e)}) from e

        logger.debug("Listed %d products", len(products))
        return products

    async def create_product(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Create a document with exactly the submitted fields."""
        try:
            # add() returns (update_time, document_reference)
            _, doc_ref = await self.collection.add(dict(fields))
        except Exception as e:
            logger.error("Failed to create product: %s", str(e))
            raise DatabaseError(context={"operation": "create", "error": str(e)}) from e

        logger.info("Product created: %s", doc_ref.id)
        return {"id": doc_ref.id, **fields}

    async def update_product(self, product_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge the submitted fields into an existing document.

        Fields not included in `fields` keep their stored values. The return
        value echoes the request; callers must not treat it as the stored
        document.
        """
        if not fields:
            # Firestore refuses an empty update document
            raise ValidationError(message="No fields to update.", context={"product_id": product_id})

        try:
            await self.collection.document(product_id).update(dict(fields))
        except NotFound as e:
            raise NotFoundError(resource="Product", resource_id=product_id) from e
        except Exception as e:
            logger.error("Failed to update product %s: %s", product_id, str(e))
            raise DatabaseError(
                context={"operation": "update", "product_id": product_id, "error": str(e)}
            ) from e

        logger.info("Product updated: %s (%d fields)", product_id, len(fields))
        return {"id": product_id, **fields}

    async def delete_product(self, product_id: str) -> None:
        """Remove the document. Deleting a missing id is not an error."""
        try:
            await self.collection.document(product_id).delete()
        except Exception as e:
            logger.error("Failed to delete product %s: %s", product_id, str(e))
            raise DatabaseError(
                context={"operation": "delete", "product_id": product_id, "error": str(e)}
            ) from e

        logger.info("Product deleted: %s", product_id)
