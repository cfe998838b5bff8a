"""
Topics endpoint.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportCallIssue=false
# pyright: reportArgumentType=false
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from studyloop.core.database import get_session
from studyloop.schemas.topic import (
    CardResponse,
    CreateCardRequest,
    CreateTopicRequest,
    SubjectArchivedRequest,
    TopicConfigResponse,
    TopicResponse,
    TopicsResponse,
    UpdateTopicConfigRequest
)
from studyloop.services import topic_service

router = APIRouter(tags=["topics"])


@router.get("/topics", response_model=TopicsResponse)
async def get_topics(
    user_id: int,
    session: Session = Depends(get_session)
):
    """Get the topics owned by a user, ordered by id."""
    topics = topic_service.topics_for_user(session, user_id)
    return TopicsResponse(topics=[TopicResponse.model_validate(topic) for topic in topics])


@router.post("/topics", response_model=TopicResponse, status_code=status.HTTP_201_CREATED)
async def create_topic(
    request: CreateTopicRequest,
    session: Session = Depends(get_session)
):
    """Create a topic; the owner gets a default config."""
    topic = topic_service.create_topic(
        session,
        request.user_id,
        request.title,
        subject_id=request.subject_id
    )
    return TopicResponse.model_validate(topic)


@router.delete("/topics/{topic_id}")
async def delete_topic(
    topic_id: int,
    session: Session = Depends(get_session)
):
    """Delete a topic with its cards, progress records and configs."""
    counts = topic_service.delete_topic(session, topic_id)
    return {"message": f"Topic {topic_id} deleted", **counts}


@router.post(
    "/topics/{topic_id}/cards",
    response_model=CardResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_card(
    topic_id: int,
    request: CreateCardRequest,
    session: Session = Depends(get_session)
):
    """Add a card to a topic and start progress on it for every participant."""
    card = topic_service.add_card(session, topic_id, request.front, request.back)
    return CardResponse.model_validate(card)


@router.delete("/cards/{card_id}")
async def delete_card(
    card_id: int,
    session: Session = Depends(get_session)
):
    """Delete a card and all progress on it."""
    progress_deleted = topic_service.delete_card(session, card_id)
    return {"message": f"Card {card_id} deleted", "progress_deleted": progress_deleted}


@router.put("/topics/{topic_id}/config/{user_id}", response_model=TopicConfigResponse)
async def update_topic_config(
    topic_id: int,
    user_id: int,
    request: UpdateTopicConfigRequest,
    session: Session = Depends(get_session)
):
    """Update a user's archived/reviewing flags or recall threshold on a topic."""
    config = topic_service.update_config(
        session,
        topic_id,
        user_id,
        archived=request.archived,
        reviewing=request.reviewing,
        recall_threshold=request.recall_threshold
    )
    return TopicConfigResponse.model_validate(config)


@router.put("/subjects/{subject_id}/archived")
async def set_subject_archived(
    subject_id: int,
    request: SubjectArchivedRequest,
    session: Session = Depends(get_session)
):
    """Archive or restore a subject together with the topics filed under it."""
    updated = topic_service.set_subject_archived(session, subject_id, request.archived)
    return {"subject_id": subject_id, "archived": request.archived, "configs_updated": updated}
