"""
Collaboration service: copies topics between users and manages co-owners.

A shared copy is a new topic with duplicated cards. A collaborator studies the
same cards as the owner but keeps independent progress records. All steps are
"create if absent" / "delete if present", so a retried call after a failure
converges to the same end state.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlmodel import Session, select

from studyloop.core.database import transaction
from studyloop.core.exceptions import ValidationError
from studyloop.models import Card, CardProgress, Topic
from studyloop.services.filter_service import id_in
from studyloop.services.projector_service import Projector, get_projector
from studyloop.services.srs_service import ensure_progress, reset_progress
from studyloop.services.topic_service import (
    ensure_config,
    get_config,
    get_subject,
    get_topic,
    get_user,
    topic_card_ids,
)

logger = logging.getLogger(__name__)


def share(
    session: Session,
    topic_id: int,
    recipient_id: int,
    subject_id: Optional[int] = None
) -> Topic:
    """
    Give the recipient their own copy of a topic.

    Creates a new topic owned by the recipient with the same title, a config
    for the recipient, a copy of every card and a fresh progress record on
    each copy. The source topic, its cards and its progress are not touched.

    Args:
        session: Database session
        topic_id: Topic to copy
        recipient_id: User receiving the copy
        subject_id: Optional subject to file the copy under

    Returns:
        The new topic
    """
    source = get_topic(session, topic_id)
    get_user(session, recipient_id)
    if subject_id is not None:
        get_subject(session, subject_id)

    source_cards = session.exec(
        select(Card).where(Card.topic_id == topic_id).order_by(Card.id)  # type: ignore
    ).all()

    with transaction(session):
        new_topic = Topic(title=source.title, user_id=recipient_id, subject_id=subject_id)
        session.add(new_topic)
        session.flush()
        ensure_config(session, new_topic.id, recipient_id)

        for card in source_cards:
            new_card = Card(topic_id=new_topic.id, front=card.front, back=card.back)
            session.add(new_card)
            session.flush()
            ensure_progress(session, new_card.id, recipient_id)

    session.refresh(new_topic)
    logger.info(
        f"Shared topic {topic_id} with user {recipient_id} as topic {new_topic.id} "
        f"({len(source_cards)} cards copied)"
    )
    return new_topic


def add_collaborator(session: Session, topic_id: int, recipient_id: int) -> Dict[str, Any]:
    """
    Let another user study a topic's cards with independent progress.

    Ensures a config for the recipient and a progress record on every card.
    Calling it again creates nothing new, and completes any records a
    previous interrupted call left out.

    Returns:
        Dict with 'config_created' and 'progress_created' count
    """
    get_topic(session, topic_id)
    get_user(session, recipient_id)

    config_created = get_config(session, topic_id, recipient_id) is None
    card_ids = topic_card_ids(session, topic_id)

    with transaction(session):
        ensure_config(session, topic_id, recipient_id)

        existing = set(session.exec(
            select(CardProgress.card_id).where(
                CardProgress.user_id == recipient_id,
                id_in(CardProgress.card_id, card_ids)
            )
        ).all())
        missing = [card_id for card_id in card_ids if card_id not in existing]
        for card_id in missing:
            ensure_progress(session, card_id, recipient_id)

    if config_created or missing:
        logger.info(
            f"Added collaborator {recipient_id} to topic {topic_id}: "
            f"config_created={config_created}, {len(missing)} progress record(s) created"
        )
    else:
        logger.info(f"User {recipient_id} already collaborates on topic {topic_id}, nothing to do")

    return {
        'config_created': config_created,
        'progress_created': len(missing)
    }


def remove_collaborator(session: Session, topic_id: int, recipient_id: int) -> Dict[str, Any]:
    """
    Remove a collaborator's config and progress from a topic.

    Cards and other users' state are unaffected. Removing a user who does not
    collaborate is a no-op.

    Raises:
        ValidationError: If the recipient owns the topic
        NotFoundError: If the topic or user does not exist
    """
    topic = get_topic(session, topic_id)
    get_user(session, recipient_id)
    if topic.user_id == recipient_id:
        raise ValidationError("The owner of a topic cannot be removed as a collaborator")

    card_ids = topic_card_ids(session, topic_id)

    with transaction(session):
        config = get_config(session, topic_id, recipient_id)
        if config:
            session.delete(config)

        progress_records = session.exec(
            select(CardProgress).where(
                CardProgress.user_id == recipient_id,
                id_in(CardProgress.card_id, card_ids)
            )
        ).all()
        for progress in progress_records:
            session.delete(progress)

    logger.info(
        f"Removed collaborator {recipient_id} from topic {topic_id}: "
        f"config_deleted={config is not None}, {len(progress_records)} progress record(s) deleted"
    )
    return {
        'config_deleted': config is not None,
        'progress_deleted': len(progress_records)
    }


def reset_all(
    session: Session,
    topic_id: int,
    user_id: int,
    projector: Optional[Projector] = None,
    now: Optional[datetime] = None
) -> int:
    """
    Move every card of a topic back to level 1 for one user.

    Returns:
        Number of progress records reset

    Raises:
        NotFoundError: If the topic or user does not exist
    """
    get_topic(session, topic_id)
    get_user(session, user_id)
    projector = projector or get_projector()
    now = now or datetime.utcnow()
    card_ids = topic_card_ids(session, topic_id)

    with transaction(session):
        progress_records = session.exec(
            select(CardProgress).where(
                CardProgress.user_id == user_id,
                id_in(CardProgress.card_id, card_ids)
            )
        ).all()
        for progress in progress_records:
            reset_progress(progress, projector, now)
            session.add(progress)

    logger.info(f"Reset {len(progress_records)} card(s) of topic {topic_id} for user {user_id}")
    return len(progress_records)
