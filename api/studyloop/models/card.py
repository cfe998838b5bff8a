"""
Card model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class Card(SQLModel, table=True):
    """Card table - a front/back study item belonging to one topic."""
    __tablename__ = "card"

    id: Optional[int] = Field(default=None, primary_key=True)
    topic_id: int = Field(foreign_key="topic.id", index=True)
    front: str = ""
    back: str = ""
    created_time: datetime = Field(default_factory=datetime.utcnow)
