"""
Topic service for topic, card and config lifecycle.

Every function that creates or removes cards keeps progress records in step:
each user holding a TopicConfig on a topic has exactly one CardProgress per
card of that topic.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlmodel import Session, select

from studyloop.core.config import settings
from studyloop.core.database import transaction
from studyloop.core.exceptions import ConflictError, NotFoundError, ValidationError
from studyloop.models import Card, CardProgress, Subject, Topic, TopicConfig, User
from studyloop.services.filter_service import id_in
from studyloop.services.srs_service import ensure_progress
from studyloop.utils.text_utils import normalize_title

logger = logging.getLogger(__name__)


# ============================================================================
# Lookups
# ============================================================================

def get_user(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if not user:
        raise NotFoundError(f"User with id {user_id} not found")
    return user


def get_topic(session: Session, topic_id: int) -> Topic:
    topic = session.get(Topic, topic_id)
    if not topic:
        raise NotFoundError(f"Topic with id {topic_id} not found")
    return topic


def get_card(session: Session, card_id: int) -> Card:
    card = session.get(Card, card_id)
    if not card:
        raise NotFoundError(f"Card with id {card_id} not found")
    return card


def get_subject(session: Session, subject_id: int) -> Subject:
    subject = session.get(Subject, subject_id)
    if not subject:
        raise NotFoundError(f"Subject with id {subject_id} not found")
    return subject


def get_config(session: Session, topic_id: int, user_id: int) -> Optional[TopicConfig]:
    return session.exec(
        select(TopicConfig).where(
            TopicConfig.topic_id == topic_id,
            TopicConfig.user_id == user_id
        )
    ).first()


def topic_card_ids(session: Session, topic_id: int) -> List[int]:
    """Return the ids of all cards in a topic, ascending."""
    return list(session.exec(
        select(Card.id).where(Card.topic_id == topic_id).order_by(Card.id)  # type: ignore
    ).all())


def topics_for_user(session: Session, user_id: int) -> List[Topic]:
    """Get all topics owned by a user, ordered by id."""
    get_user(session, user_id)
    return list(session.exec(
        select(Topic).where(Topic.user_id == user_id).order_by(Topic.id)  # type: ignore
    ).all())


# ============================================================================
# Validation
# ============================================================================

def validate_title(title: str) -> str:
    normalized = normalize_title(title)
    if not normalized:
        raise ValidationError("Topic title must be present")
    return normalized


def validate_recall_threshold(recall_threshold: float) -> float:
    if not 0 < recall_threshold <= 1:
        raise ValidationError(
            f"recall_threshold must be greater than 0 and at most 1, got {recall_threshold}"
        )
    return recall_threshold


# ============================================================================
# Mutations
# ============================================================================

def create_user(session: Session, username: str) -> User:
    """Create a user, rejecting duplicate usernames."""
    username = username.strip()
    if not username:
        raise ValidationError("Username must be present")

    existing = session.exec(select(User).where(User.username == username)).first()
    if existing:
        raise ConflictError(f"Username '{username}' is already taken")

    with transaction(session):
        user = User(username=username)
        session.add(user)
    session.refresh(user)
    return user


def ensure_config(session: Session, topic_id: int, user_id: int) -> TopicConfig:
    """
    Create a default TopicConfig for (topic, user) unless one already exists.

    A new config starts archived when the topic's subject is archived.
    """
    config = get_config(session, topic_id, user_id)
    if config:
        return config

    topic = get_topic(session, topic_id)
    subject = session.get(Subject, topic.subject_id) if topic.subject_id is not None else None

    config = TopicConfig(
        topic_id=topic_id,
        user_id=user_id,
        archived=bool(subject and subject.archived),
        recall_threshold=settings.default_recall_threshold
    )
    session.add(config)
    session.flush()
    return config


def create_topic(
    session: Session,
    user_id: int,
    title: str,
    subject_id: Optional[int] = None
) -> Topic:
    """
    Create a topic owned by a user, together with the owner's config.

    Raises:
        ValidationError: If the title is empty
        NotFoundError: If the user or subject does not exist
    """
    title = validate_title(title)
    get_user(session, user_id)
    if subject_id is not None:
        get_subject(session, subject_id)

    with transaction(session):
        topic = Topic(title=title, user_id=user_id, subject_id=subject_id)
        session.add(topic)
        session.flush()
        ensure_config(session, topic.id, user_id)

    session.refresh(topic)
    logger.info(f"Created topic {topic.id} '{topic.title}' for user {user_id}")
    return topic


def add_card(session: Session, topic_id: int, front: str, back: str) -> Card:
    """
    Add a card to a topic and start progress on it for every participant.

    Participants are the users holding a TopicConfig on the topic.
    """
    get_topic(session, topic_id)

    with transaction(session):
        card = Card(topic_id=topic_id, front=front, back=back)
        session.add(card)
        session.flush()

        configs = session.exec(
            select(TopicConfig).where(TopicConfig.topic_id == topic_id)
        ).all()
        for config in configs:
            ensure_progress(session, card.id, config.user_id)

    session.refresh(card)
    logger.info(f"Added card {card.id} to topic {topic_id} for {len(configs)} participant(s)")
    return card


def delete_card(session: Session, card_id: int) -> int:
    """
    Delete a card and every progress record on it.

    Returns:
        Number of progress records deleted
    """
    card = get_card(session, card_id)

    with transaction(session):
        progress_records = session.exec(
            select(CardProgress).where(CardProgress.card_id == card_id)
        ).all()
        for progress in progress_records:
            session.delete(progress)
        session.flush()
        session.delete(card)

    logger.info(f"Deleted card {card_id} and {len(progress_records)} progress record(s)")
    return len(progress_records)


def delete_topic(session: Session, topic_id: int) -> Dict[str, Any]:
    """
    Delete a topic with its cards, their progress records and its configs.

    Deletes in foreign key order:
    1. CardProgress rows on the topic's cards
    2. Cards
    3. TopicConfigs
    4. The topic itself

    Returns:
        Dict with counts of deleted items
    """
    topic = get_topic(session, topic_id)

    with transaction(session):
        card_ids = topic_card_ids(session, topic_id)

        progress_records = session.exec(
            select(CardProgress).where(id_in(CardProgress.card_id, card_ids))
        ).all()
        for progress in progress_records:
            session.delete(progress)
        session.flush()

        cards = session.exec(select(Card).where(Card.topic_id == topic_id)).all()
        for card in cards:
            session.delete(card)

        configs = session.exec(
            select(TopicConfig).where(TopicConfig.topic_id == topic_id)
        ).all()
        for config in configs:
            session.delete(config)
        session.flush()

        session.delete(topic)

    logger.info(
        f"Deleted topic {topic_id}: {len(cards)} cards, "
        f"{len(progress_records)} progress records, {len(configs)} configs"
    )
    return {
        'cards_deleted': len(cards),
        'progress_deleted': len(progress_records),
        'configs_deleted': len(configs)
    }


def update_config(
    session: Session,
    topic_id: int,
    user_id: int,
    archived: Optional[bool] = None,
    reviewing: Optional[bool] = None,
    recall_threshold: Optional[float] = None
) -> TopicConfig:
    """
    Update a user's config on a topic. Only provided fields are changed.

    Raises:
        ValidationError: If recall_threshold is outside (0, 1]
        NotFoundError: If the user has no config on the topic
    """
    if recall_threshold is not None:
        validate_recall_threshold(recall_threshold)

    config = get_config(session, topic_id, user_id)
    if not config:
        raise NotFoundError(f"User {user_id} has no config on topic {topic_id}")

    with transaction(session):
        if archived is not None:
            config.archived = archived
        if reviewing is not None:
            config.reviewing = reviewing
        if recall_threshold is not None:
            config.recall_threshold = recall_threshold
        session.add(config)

    session.refresh(config)
    return config


def set_subject_archived(session: Session, subject_id: int, archived: bool) -> int:
    """
    Archive or restore a subject and every config of the topics under it.

    Returns:
        Number of configs updated
    """
    subject = get_subject(session, subject_id)

    with transaction(session):
        subject.archived = archived
        session.add(subject)

        topic_ids = session.exec(
            select(Topic.id).where(Topic.subject_id == subject_id)
        ).all()
        configs = session.exec(
            select(TopicConfig).where(id_in(TopicConfig.topic_id, topic_ids))
        ).all()
        for config in configs:
            config.archived = archived
            session.add(config)

    logger.info(
        f"Subject {subject_id} archived={archived}: updated {len(configs)} config(s) "
        f"across {len(topic_ids)} topic(s)"
    )
    return len(configs)
