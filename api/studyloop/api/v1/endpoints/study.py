"""
Study endpoints.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportCallIssue=false
# pyright: reportArgumentType=false
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from typing import Optional
from datetime import date, datetime

from studyloop.core.database import get_session
from studyloop.schemas.study import (
    AnswerRequest,
    CardsDueResponse,
    ProgressResponse,
    TopicDueResponse,
    TopicsDueResponse
)
from studyloop.schemas.topic import CardResponse, TopicResponse
from studyloop.services.scheduler_service import topics_due, cards_due_now
from studyloop.services.srs_service import advance_on_answer
from studyloop.services.topic_service import get_user

router = APIRouter(prefix="/study", tags=["study"])


@router.get("/topics-due", response_model=TopicsDueResponse)
async def get_topics_due(
    user_id: int,
    day: Optional[date] = Query(None, alias="date"),
    session: Session = Depends(get_session)
):
    """
    Get the topics a user has to study on a day, with card counts and
    approximate answer time. Defaults to today. Past days and today include
    overdue cards; future days are previewed by projecting current progress.
    """
    get_user(session, user_id)
    day = day or datetime.utcnow().date()

    study_topics = topics_due(session, user_id, day)
    return TopicsDueResponse(
        day=day,
        topics=[
            TopicDueResponse(
                topic=TopicResponse.model_validate(item['topic']),
                cards_count=item['cards_count'],
                approx_time=item['approx_time']
            )
            for item in study_topics
        ]
    )


@router.get("/cards-due", response_model=CardsDueResponse)
async def get_cards_due(
    user_id: int,
    topic_id: Optional[int] = None,
    session: Session = Depends(get_session)
):
    """Get every card the user has due right now, optionally within one topic."""
    get_user(session, user_id)
    cards = cards_due_now(session, user_id, topic_id=topic_id)
    return CardsDueResponse(cards=[CardResponse.model_validate(card) for card in cards])


@router.post("/answer", response_model=ProgressResponse)
async def answer_card(
    request: AnswerRequest,
    session: Session = Depends(get_session)
):
    """Record an answer to a card and return the updated progress."""
    progress = advance_on_answer(
        session,
        request.user_id,
        request.card_id,
        correct=request.correct,
        answer_seconds=request.answer_seconds
    )
    return ProgressResponse.model_validate(progress)
