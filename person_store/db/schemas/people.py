"""
Pydantic schemas for person records.

These models are the declarative constraint table consulted before every
write: required text fields must not be the empty string and ``age``, when
given, must be at least 18 and fit the integer column. Record field names
(``_id``, ``lastName``, ``createdAt``, ``updatedAt``) are accepted as aliases
of the snake_case attributes.
"""
import uuid
from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from person_store.db.models.people import MAX_AGE, MIN_AGE


def _not_empty(value: str) -> str:
    if not value:
        raise ValueError("must not be empty")
    return value


RequiredText = Annotated[str, AfterValidator(_not_empty)]

REQUIRED_FIELDS = ("name", "address", "gender")


class PersonBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: RequiredText
    last_name: Optional[str] = Field(default=None, alias="lastName")
    address: RequiredText
    gender: RequiredText
    job: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=MIN_AGE, le=MAX_AGE)


class PersonCreate(PersonBase):
    pass


class PersonUpdate(BaseModel):
    """Partial update. Only fields explicitly set are applied."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[RequiredText] = None
    last_name: Optional[str] = Field(default=None, alias="lastName")
    address: Optional[RequiredText] = None
    gender: Optional[RequiredText] = None
    job: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=MIN_AGE, le=MAX_AGE)

    @field_validator(*REQUIRED_FIELDS)
    @classmethod
    def _required_fields_cannot_be_cleared(cls, value):
        if value is None:
            raise ValueError("required field cannot be cleared")
        return value


class Person(PersonBase):
    id: uuid.UUID = Field(alias="_id")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    def to_record(self) -> dict:
        """Return the stored representation keyed by record field names."""
        return self.model_dump(by_alias=True)
