"""
Collaboration schemas.
"""
from pydantic import BaseModel
from typing import Optional


class ShareRequest(BaseModel):
    """Request schema for copying a topic to another user."""
    recipient_id: int
    subject_id: Optional[int] = None


class AddCollaboratorRequest(BaseModel):
    """Request schema for adding a collaborator to a topic."""
    recipient_id: int


class CollaboratorResponse(BaseModel):
    """Outcome of adding or removing a collaborator."""
    topic_id: int
    user_id: int
    config_changed: bool
    progress_changed: int


class ResetResponse(BaseModel):
    """Outcome of resetting a user's progress on a topic."""
    topic_id: int
    user_id: int
    reset_count: int
