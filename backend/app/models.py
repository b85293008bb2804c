from datetime import datetime
from typing import Annotated, Generic, Optional, TypeVar
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from .config import settings

T = TypeVar("T")


def serialize_datetime(value: datetime) -> str:
    """Renders a datetime as ISO 8601 in the configured application timezone."""
    if value.tzinfo is None:
        # naive values come back from SQLite and are stored as UTC
        value = value.replace(tzinfo=ZoneInfo("UTC"))
    return value.astimezone(ZoneInfo(settings.APP_TIMEZONE)).isoformat()


# datetime field type used by every response schema
LocalDatetime = Annotated[datetime, PlainSerializer(serialize_datetime, return_type=str)]


class CustomModel(BaseModel):
    """
    Common base model for every Pydantic schema of the project.
    Centralizes the API data policy: camelCase on the wire, snake_case in Python.
    """
    model_config = ConfigDict(
        # Fields are exposed under camelCase aliases; Python names still work on input.
        alias_generator=to_camel,
        populate_by_name=True,

        # Lets schemas be built from SQLAlchemy model instances.
        from_attributes=True,

        # Unknown fields are rejected instead of silently dropped.
        extra="forbid",
    )


class ApiResponse(BaseModel, Generic[T]):
    """Uniform envelope wrapping every response body."""
    success: bool = True
    message: str
    data: Optional[T] = None
