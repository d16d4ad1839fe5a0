"""Base repository pattern for MongoDB operations"""

from abc import ABC
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database


class CollectionName(str, Enum):
    USERS = "users"
    ORDERS = "orders"
    PRODUCTS = "products"


T = TypeVar("T", bound=BaseModel)


class BaseRepository(ABC, Generic[T]):
    """Base repository providing common CRUD operations for MongoDB collections"""

    def __init__(
        self,
        db: Database,
        collection_name: Union[CollectionName, str],
        model_class: Type[T],
    ):
        self.db = db
        self.collection_name: str = (
            collection_name.value
            if isinstance(collection_name, CollectionName)
            else collection_name
        )
        self.collection: Collection = db[self.collection_name]
        self.model_class = model_class

    def find_by_id(self, entity_id: str | ObjectId) -> Optional[T]:
        """Find a document by its ID"""
        identifier = self._to_object_id(entity_id)
        if identifier is None:
            return None
        doc = self.collection.find_one({"_id": identifier})
        return self._to_model(doc)

    def find_one(self, query: Dict[str, Any]) -> Optional[T]:
        """Find a single document matching the query"""
        doc = self.collection.find_one(query)
        return self._to_model(doc)

    def find_many(
        self,
        query: Dict[str, Any],
        sort: Optional[List[tuple]] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[T]:
        """Find multiple documents matching the query"""
        cursor = self.collection.find(query)
        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return [self._to_model(doc) for doc in cursor if doc]

    def insert_one(self, document: Union[T, Dict[str, Any]]) -> T:
        """Insert a single document"""
        if isinstance(document, BaseModel):
            doc_dict = document.model_dump(by_alias=True, exclude_none=True)
        else:
            doc_dict = document

        result = self.collection.insert_one(doc_dict)
        doc_dict["_id"] = result.inserted_id
        return self._to_model(doc_dict)

    def update_one(
        self,
        entity_id: str | ObjectId,
        updates: Dict[str, Any],
        unset: Optional[List[str]] = None,
    ) -> Optional[T]:
        """Update a document by ID and return the updated model"""
        identifier = self._to_object_id(entity_id)
        if identifier is None:
            return None
        operations: Dict[str, Any] = {
            "$set": {**updates, "updated_at": datetime.now(timezone.utc)}
        }
        if unset:
            operations["$unset"] = {field: "" for field in unset}
        doc = self.collection.find_one_and_update(
            {"_id": identifier},
            operations,
            return_document=ReturnDocument.AFTER,
        )
        return self._to_model(doc)

    def increment(
        self, entity_id: str | ObjectId, amounts: Dict[str, int]
    ) -> Optional[T]:
        """Atomically increment numeric fields and return the updated model"""
        identifier = self._to_object_id(entity_id)
        if identifier is None:
            return None
        doc = self.collection.find_one_and_update(
            {"_id": identifier},
            {"$inc": amounts},
            return_document=ReturnDocument.AFTER,
        )
        return self._to_model(doc)

    def count(self, query: Dict[str, Any] = None) -> int:
        """Count documents matching the query"""
        if query is None:
            query = {}
        return self.collection.count_documents(query)

    def _to_model(self, doc: Optional[Dict[str, Any]]) -> Optional[T]:
        """Convert a dictionary to a model instance"""
        if not doc:
            return None
        return self.model_class.model_validate(doc)

    @staticmethod
    def _to_object_id(value: str | ObjectId | None) -> ObjectId | None:
        """Convert a string ID to ObjectId"""
        if value is None:
            return None
        if isinstance(value, ObjectId):
            return value
        if isinstance(value, str):
            try:
                return ObjectId(value)
            except (InvalidId, TypeError):
                return None
        return None
