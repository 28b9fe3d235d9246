"""
Base repository with generic operations for MongoDB.
Entity-specific repositories inherit from this.
"""
from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
import logging

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from bson import ObjectId
from bson.errors import InvalidId

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseRepository:
    """
    Generic repository for MongoDB operations.

    Documents are returned with `_id` converted to its string form, so they
    can be serialized straight into a JSON response.
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        """
        Initialize repository with MongoDB collection.

        Args:
            collection: Motor AsyncIOMotorCollection instance
        """
        self.collection = collection

    @staticmethod
    def to_object_id(doc_id: Any) -> Optional[ObjectId]:
        """Parse an identifier; None when it is not a valid ObjectId."""
        if isinstance(doc_id, ObjectId):
            return doc_id
        try:
            return ObjectId(doc_id)
        except (InvalidId, TypeError):
            return None

    @staticmethod
    def serialize(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if document and isinstance(document.get("_id"), ObjectId):
            document["_id"] = str(document["_id"])
        return document

    async def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a document, stamping createdAt/updatedAt.

        Args:
            document: Document data

        Returns:
            The stored document including its assigned `_id`
        """
        now = utcnow()
        document.setdefault("createdAt", now)
        document.setdefault("updatedAt", now)

        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        logger.info(f"Documento creado en {self.collection.name}: {result.inserted_id}")
        return self.serialize(document)

    async def find_all(self, filter_query: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Every document matching the filter, in the store's natural order.

        Args:
            filter_query: MongoDB filter query (None for all documents)

        Returns:
            List of documents
        """
        cursor = self.collection.find(filter_query or {})
        documents = await cursor.to_list(length=None)
        return [self.serialize(doc) for doc in documents]

    async def find_by_id(
        self,
        doc_id: str,
        projection: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Find document by ID.

        Args:
            doc_id: Document ID (string or ObjectId)
            projection: Optional MongoDB projection

        Returns:
            Document data or None if the id is malformed or unknown
        """
        object_id = self.to_object_id(doc_id)
        if object_id is None:
            return None
        document = await self.collection.find_one({"_id": object_id}, projection)
        return self.serialize(document)

    async def exists(self, filter_query: Dict[str, Any]) -> bool:
        return await self.collection.find_one(filter_query, {"_id": 1}) is not None

    async def find_by_id_and_update(
        self,
        doc_id: str,
        update_data: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """
        `$set` fields on a document and return it as it is after the update.

        Args:
            doc_id: Document ID
            update_data: Fields to set

        Returns:
            Updated document, or None if the id is malformed or unknown
        """
        object_id = self.to_object_id(doc_id)
        if object_id is None:
            return None

        update_data = {**update_data, "updatedAt": utcnow()}
        document = await self.collection.find_one_and_update(
            {"_id": object_id},
            {"$set": update_data},
            return_document=ReturnDocument.AFTER
        )
        if document:
            logger.info(f"Documento actualizado en {self.collection.name}: {doc_id}")
        return self.serialize(document)
