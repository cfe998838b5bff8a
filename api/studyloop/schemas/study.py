"""
Study scheduling schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime

from studyloop.schemas.topic import CardResponse, TopicResponse


class TopicDueResponse(BaseModel):
    """A topic with its due workload for one day."""
    topic: TopicResponse
    cards_count: int = Field(..., description="Number of cards due in the topic")
    approx_time: int = Field(..., description="Estimated seconds needed to answer them")


class TopicsDueResponse(BaseModel):
    """Response schema for the topics due on a day."""
    day: date
    topics: List[TopicDueResponse]


class CardsDueResponse(BaseModel):
    """Response schema for the cards due now."""
    cards: List[CardResponse]


class AnswerRequest(BaseModel):
    """Request schema for recording an answer to a card."""
    user_id: int
    card_id: int
    correct: bool
    answer_seconds: Optional[float] = Field(None, description="Time spent answering, in seconds")

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": 1,
                "card_id": 12,
                "correct": True,
                "answer_seconds": 8.5
            }
        }


class ProgressResponse(BaseModel):
    """Progress of one user on one card."""
    card_id: int
    user_id: int
    level: int
    due_at: datetime
    estimated_answer_seconds: float
    last_review_time: Optional[datetime] = None

    class Config:
        from_attributes = True
