"""
Topic model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class Topic(SQLModel, table=True):
    """Topic table - a titled collection of cards owned by a user."""
    __tablename__ = "topic"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    user_id: int = Field(foreign_key="user.id", index=True)  # Owner of the topic
    subject_id: Optional[int] = Field(default=None, foreign_key="subject.id", index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
