"""
Models package - imports all models so they register with SQLModel.
"""
# Import enums first
from studyloop.models.enums import ProjectorAlgorithm

# Import all models
from studyloop.models.user import User
from studyloop.models.subject import Subject
from studyloop.models.topic import Topic
from studyloop.models.card import Card
from studyloop.models.topic_config import TopicConfig
from studyloop.models.card_progress import CardProgress

__all__ = [
    'ProjectorAlgorithm',
    'User',
    'Subject',
    'Topic',
    'Card',
    'TopicConfig',
    'CardProgress',
]
