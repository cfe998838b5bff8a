"""
Topic schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class TopicResponse(BaseModel):
    """Topic response schema."""
    id: int
    title: str
    user_id: int
    subject_id: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CreateTopicRequest(BaseModel):
    """Request schema for creating a topic."""
    title: str
    user_id: int
    subject_id: Optional[int] = None


class TopicsResponse(BaseModel):
    """Response schema for topics list."""
    topics: List[TopicResponse]


class CardResponse(BaseModel):
    """Card response schema."""
    id: int
    topic_id: int
    front: str
    back: str

    class Config:
        from_attributes = True


class CreateCardRequest(BaseModel):
    """Request schema for adding a card to a topic."""
    front: str = ""
    back: str = ""


class TopicConfigResponse(BaseModel):
    """Per-user topic config response schema."""
    topic_id: int
    user_id: int
    archived: bool
    reviewing: bool
    recall_threshold: float

    class Config:
        from_attributes = True


class UpdateTopicConfigRequest(BaseModel):
    """Request schema for updating a per-user topic config. Omitted fields are unchanged."""
    archived: Optional[bool] = None
    reviewing: Optional[bool] = None
    recall_threshold: Optional[float] = Field(None, description="Must be greater than 0 and at most 1")


class SubjectArchivedRequest(BaseModel):
    """Request schema for archiving or restoring a subject."""
    archived: bool
