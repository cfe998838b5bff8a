"""
TopicConfig model - per-user settings of a topic.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional


class TopicConfig(SQLModel, table=True):
    """TopicConfig table - one row per (topic, user) taking part in the topic."""
    __tablename__ = "topic_config"
    __table_args__ = (
        UniqueConstraint("topic_id", "user_id", name="uq_topic_config_topic_user"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    topic_id: int = Field(foreign_key="topic.id", index=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    archived: bool = Field(default=False)
    reviewing: bool = Field(default=False)
    recall_threshold: float = Field(default=0.8)  # Must be in (0, 1]
