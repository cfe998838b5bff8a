"""
CardProgress model.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from datetime import datetime


class CardProgress(SQLModel, table=True):
    """CardProgress table - tracks one user's progress with one card."""
    __tablename__ = "card_progress"
    __table_args__ = (
        UniqueConstraint("card_id", "user_id", name="uq_card_progress_card_user"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    card_id: int = Field(foreign_key="card.id", index=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    level: int = Field(default=1)  # Starts at 1, grows with each correct answer
    due_at: datetime = Field(default_factory=datetime.utcnow, index=True)  # Calculated by the projector
    estimated_answer_seconds: float = Field(default=0.0)
    last_review_time: Optional[datetime] = None
