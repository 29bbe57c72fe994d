from typing import Generic, Optional, List, Dict, Any, Type, Tuple
from bson.objectid import ObjectId
from data_layer.models.base_model import T
from data_layer.mongodb.connection import get_collection
from pymongo.collection import Collection
from pymongo.results import InsertOneResult, UpdateResult, DeleteResult
from pymongo import ReturnDocument
from core.exceptions import AuthorizationError, NetworkError, NotFoundError
from utils.datetime_utils import get_utc_now
import logging

logger = logging.getLogger(__name__)


def to_object_id(id: str) -> Optional[ObjectId]:
    """Convert a string id to ObjectId, or None when it is not one."""
    if isinstance(id, ObjectId):
        return id
    if isinstance(id, str) and ObjectId.is_valid(id):
        return ObjectId(id)
    logger.warning(f"Invalid ObjectId format: {id}")
    return None


class BaseMongoRepository(Generic[T]):
    """Base repository for MongoDB operations with generic CRUD functionality."""

    def __init__(self, model_class: Type[T]):
        """Initialize the repository with a model class."""
        self.model_class = model_class
        self.collection_name = model_class.collection_name

    @property
    def model(self) -> Type[T]:
        """Get the model class for this repository."""
        return self.model_class

    def get_collection(self) -> Collection:
        """Get the MongoDB collection for this repository."""
        collection = get_collection(self.collection_name)
        if collection is None:
            logger.error(
                f"Failed to get MongoDB collection: {self.collection_name}")
            raise NetworkError("Storage is unavailable",
                               details={"collection": self.collection_name})
        return collection

    def find_by_id(self, id: str) -> Optional[T]:
        """Find document by ID."""
        obj_id = to_object_id(id)
        if obj_id is None:
            return None

        result = self.get_collection().find_one({"_id": obj_id})
        if result:
            return self.model_class.from_mongodb(result)
        return None

    def find_owned(self, id: str, user_id: str) -> T:
        """Find a document the caller owns, raising when missing or foreign."""
        document = self.find_by_id(id)
        if document is None:
            raise NotFoundError(f"{self.model_class.__name__} not found",
                                details={"id": id})
        if getattr(document, "user_id", None) != user_id:
            logger.warning(
                f"User {user_id} attempted to access {self.collection_name}/{id}")
            raise AuthorizationError("Not authorized",
                                     details={"id": id})
        return document

    def find_one(self, filter: Dict[str, Any]) -> Optional[T]:
        """Find one document by filter."""
        result = self.get_collection().find_one(filter)
        if result:
            return self.model_class.from_mongodb(result)
        return None

    def find_many(self,
                  filter: Optional[Dict[str, Any]] = None,
                  skip: int = 0,
                  limit: int = 0,
                  sort: Optional[List[Tuple[str, int]]] = None) -> List[T]:
        """Find multiple documents with pagination and sorting. A limit of 0 means no limit."""
        cursor = self.get_collection().find(filter or {})

        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)

        return [self.model_class.from_mongodb(doc) for doc in cursor]

    def find_by_user(self, user_id: str,
                     sort: Optional[List[Tuple[str, int]]] = None) -> List[T]:
        return self.find_many({"user_id": user_id}, sort=sort)

    def count(self, filter: Optional[Dict[str, Any]] = None) -> int:
        """Count documents matching filter."""
        return self.get_collection().count_documents(filter or {})

    def insert(self, model: T) -> str:
        """Insert a new document."""
        data = model.dict_for_mongodb()

        # Remove _id if it's None
        if "_id" in data and data["_id"] is None:
            del data["_id"]

        result: InsertOneResult = self.get_collection().insert_one(data)
        return str(result.inserted_id)

    def create(self, model: T) -> T:
        """Insert a document and read it back."""
        inserted_id = self.insert(model)
        created = self.find_by_id(inserted_id)
        if created is None:
            raise NetworkError(f"Failed to create {self.model_class.__name__}")
        return created

    def update(self, id: str, data: Dict[str, Any]) -> Optional[T]:
        """Update document by ID."""
        obj_id = to_object_id(id)
        if obj_id is None:
            return None

        if "updated_at" not in data:
            data["updated_at"] = get_utc_now()

        result = self.get_collection().find_one_and_update(
            {"_id": obj_id},
            {"$set": data},
            return_document=ReturnDocument.AFTER
        )

        if result:
            return self.model_class.from_mongodb(result)
        return None

    def update_fields(self, document: T, changes: Dict[str, Any]) -> T:
        """Validate changes against the model, then persist only the changed fields."""
        merged = self.model_class.validated(**{**document.model_dump(), **changes})

        data = {field: getattr(merged, field) for field in changes}
        updated = self.update(document.id, data)
        if updated is None:
            raise NotFoundError(f"{self.model_class.__name__} not found",
                                details={"id": document.id})
        return updated

    def apply_update(self, id: str, update: Dict[str, Any]) -> Optional[T]:
        """Run a raw update document ($addToSet, $pull, ...) and return the result."""
        obj_id = to_object_id(id)
        if obj_id is None:
            return None

        update = dict(update)
        update.setdefault("$set", {})["updated_at"] = get_utc_now()
        result = self.get_collection().find_one_and_update(
            {"_id": obj_id},
            update,
            return_document=ReturnDocument.AFTER
        )
        if result:
            return self.model_class.from_mongodb(result)
        return None

    def update_by_filter(self, filter: Dict[str, Any], data: Dict[str, Any]) -> int:
        """Update documents by filter, return number of documents modified."""
        if "updated_at" not in data:
            data["updated_at"] = get_utc_now()

        result: UpdateResult = self.get_collection().update_many(
            filter,
            {"$set": data}
        )

        return result.modified_count

    def delete(self, id: str) -> bool:
        """Delete document by ID."""
        obj_id = to_object_id(id)
        if obj_id is None:
            return False

        result: DeleteResult = self.get_collection().delete_one({"_id": obj_id})
        return result.deleted_count > 0

    def delete_many(self, filter: Dict[str, Any]) -> int:
        """Delete documents by filter, return number of documents deleted."""
        result: DeleteResult = self.get_collection().delete_many(filter)
        return result.deleted_count
