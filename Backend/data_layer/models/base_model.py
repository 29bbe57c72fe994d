from typing import Optional, Any, Dict, ClassVar, TypeVar
from pydantic import BaseModel, Field, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from datetime import datetime
from bson.objectid import ObjectId
from core.exceptions import ValidationError
from utils.datetime_utils import get_utc_now, normalize_calendar_day


class MongoBaseModel(BaseModel):
    """Base model for MongoDB documents with automatic ID generation and timestamps."""

    id: Optional[str] = Field(
        default_factory=lambda: str(ObjectId()), alias="_id")
    created_at: datetime = Field(default_factory=get_utc_now)
    updated_at: datetime = Field(default_factory=get_utc_now)

    # Metadata for the collection name
    collection_name: ClassVar[str] = "base"

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        validate_assignment=True,
        str_strip_whitespace=True,
        use_enum_values=True,
    )

    def dict_for_mongodb(self) -> Dict[str, Any]:
        """Convert to a MongoDB-friendly dict with ObjectId and proper field names."""
        data = self.model_dump(by_alias=True)

        if "_id" in data and isinstance(data["_id"], str) and ObjectId.is_valid(data["_id"]):
            data["_id"] = ObjectId(data["_id"])

        return data

    @classmethod
    def from_mongodb(cls, data: Optional[Dict[str, Any]]):
        """Create model instance from MongoDB document."""
        if not data:
            return None

        data = dict(data)
        if "_id" in data and isinstance(data["_id"], ObjectId):
            data["_id"] = str(data["_id"])

        return cls(**data)

    @classmethod
    def validated(cls, **data):
        """Build from user input, reporting bad fields as a domain ValidationError."""
        try:
            return cls(**data)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid {cls.__name__}",
                details={"errors": e.errors(include_url=False, include_context=False, include_input=False)})


class OwnedModel(MongoBaseModel):
    """Document owned by exactly one user."""

    user_id: str = Field(..., description="Owner user ID")


def calendar_day_field(value: Any) -> str:
    """Validator helper: coerce a value to a YYYY-MM-DD string or fail."""
    day = normalize_calendar_day(value)
    if day is None:
        raise ValueError("date must be a calendar day in YYYY-MM-DD format")
    return day


def optional_calendar_day_field(value: Any) -> Optional[str]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return calendar_day_field(value)


# Type variable for generic repositories
T = TypeVar('T', bound=MongoBaseModel)
