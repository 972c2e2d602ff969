from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class RequestModel(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def _not_blank(v):
    if not v or not v.strip():
        raise ValueError("must not be empty")
    return v.strip()


class RubricRequest(RequestModel):
    text: str = Field(..., min_length=1)


class UserCreate(RequestModel):
    username: str
    password: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def username_not_empty(cls, v):
        return _not_blank(v)


class ProjectCreate(RequestModel):
    name: str
    description: Optional[str] = None
    user_id: int
    due_date: date

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v):
        return _not_blank(v)


class ProjectUpdate(RequestModel):
    name: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[date] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v):
        if v is None:
            return v
        return _not_blank(v)


class DeliverableCreate(RequestModel):
    project_id: int
    name: str
    description: Optional[str] = None
    points: Optional[int] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v):
        return _not_blank(v)


class TaskCreate(RequestModel):
    deliverable_id: int
    name: str
    description: Optional[str] = None
    due_date: date
    priority: int = Field(1, ge=1, le=3)
    estimated_minutes: Optional[int] = Field(None, ge=0)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v):
        return _not_blank(v)


class AvailabilityFields(RequestModel):
    monday: bool = True
    tuesday: bool = True
    wednesday: bool = True
    thursday: bool = True
    friday: bool = True
    saturday: bool = False
    sunday: bool = False
    hours_per_day: int = Field(2, ge=1, le=24)


class AvailabilityCreate(AvailabilityFields):
    project_id: int


class PreviewDeliverable(RequestModel):
    name: str
    description: Optional[str] = None
    points: Optional[int] = None


class TimelinePreviewRequest(RequestModel):
    text: Optional[str] = None
    deliverables: Optional[List[PreviewDeliverable]] = None
    due_date: date
    availability: Optional[AvailabilityFields] = None
