"""
Collaboration endpoints.
"""
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from studyloop.core.database import get_session
from studyloop.schemas.collaboration import (
    AddCollaboratorRequest,
    CollaboratorResponse,
    ResetResponse,
    ShareRequest
)
from studyloop.schemas.topic import TopicResponse
from studyloop.services import collaboration_service

router = APIRouter(prefix="/topics", tags=["collaboration"])


@router.post("/{topic_id}/reset", response_model=ResetResponse)
async def reset_topic(
    topic_id: int,
    user_id: int,
    session: Session = Depends(get_session)
):
    """Move every card of the topic back to level 1 for the user."""
    reset_count = collaboration_service.reset_all(session, topic_id, user_id)
    return ResetResponse(topic_id=topic_id, user_id=user_id, reset_count=reset_count)


@router.post(
    "/{topic_id}/share",
    response_model=TopicResponse,
    status_code=status.HTTP_201_CREATED
)
async def share_topic(
    topic_id: int,
    request: ShareRequest,
    session: Session = Depends(get_session)
):
    """Give another user an independent copy of the topic."""
    new_topic = collaboration_service.share(
        session,
        topic_id,
        request.recipient_id,
        subject_id=request.subject_id
    )
    return TopicResponse.model_validate(new_topic)


@router.post("/{topic_id}/collaborators", response_model=CollaboratorResponse)
async def add_collaborator(
    topic_id: int,
    request: AddCollaboratorRequest,
    session: Session = Depends(get_session)
):
    """Let another user study this topic with their own progress."""
    result = collaboration_service.add_collaborator(session, topic_id, request.recipient_id)
    return CollaboratorResponse(
        topic_id=topic_id,
        user_id=request.recipient_id,
        config_changed=result['config_created'],
        progress_changed=result['progress_created']
    )


@router.delete("/{topic_id}/collaborators/{user_id}", response_model=CollaboratorResponse)
async def remove_collaborator(
    topic_id: int,
    user_id: int,
    session: Session = Depends(get_session)
):
    """Remove a collaborator's config and progress from the topic."""
    result = collaboration_service.remove_collaborator(session, topic_id, user_id)
    return CollaboratorResponse(
        topic_id=topic_id,
        user_id=user_id,
        config_changed=result['config_deleted'],
        progress_changed=result['progress_deleted']
    )
