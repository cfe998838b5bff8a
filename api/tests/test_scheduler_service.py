from datetime import timedelta

import pytest

from conftest import NOW, TODAY, StepProjector, StuckProjector
from studyloop.core.exceptions import ProjectorInvariantError
from studyloop.services import collaboration_service, topic_service
from studyloop.services.scheduler_service import cards_due_now, lands_on_day, topics_due
from studyloop.services.srs_service import get_progress


def test_catch_up_includes_overdue_and_due_today(session, alice, make_topic, set_progress):
    topic, cards = make_topic(alice.id, n_cards=3)
    set_progress(cards[0].id, alice.id, due_at=NOW - timedelta(days=3), estimated_answer_seconds=12)
    set_progress(cards[1].id, alice.id, due_at=NOW.replace(hour=23), estimated_answer_seconds=8.6)
    set_progress(cards[2].id, alice.id, due_at=NOW + timedelta(days=1))

    result = topics_due(session, alice.id, TODAY, today=TODAY)

    assert len(result) == 1
    assert result[0]['topic'].id == topic.id
    assert result[0]['cards_count'] == 2
    assert result[0]['approx_time'] == 20


def test_card_due_tomorrow_is_not_due_today(session, alice, make_topic, set_progress):
    topic, cards = make_topic(alice.id, n_cards=1)
    set_progress(cards[0].id, alice.id, due_at=NOW + timedelta(days=1))

    assert topics_due(session, alice.id, TODAY, today=TODAY) == []


def test_past_day_counts_cards_due_up_to_that_day(session, alice, make_topic, set_progress):
    topic, cards = make_topic(alice.id, n_cards=2)
    set_progress(cards[0].id, alice.id, due_at=NOW - timedelta(days=5))
    set_progress(cards[1].id, alice.id, due_at=NOW - timedelta(days=1))

    result = topics_due(session, alice.id, TODAY - timedelta(days=2), today=TODAY)

    assert result[0]['cards_count'] == 1


def test_only_reviewing_unarchived_topics_are_listed(session, alice, make_topic, set_progress):
    studying, studying_cards = make_topic(alice.id, title="Studying")
    paused, paused_cards = make_topic(alice.id, title="Paused", reviewing=False)
    archived, archived_cards = make_topic(alice.id, title="Archived")
    topic_service.update_config(session, archived.id, alice.id, archived=True)
    for card in studying_cards + paused_cards + archived_cards:
        set_progress(card.id, alice.id, due_at=NOW - timedelta(days=1))

    result = topics_due(session, alice.id, TODAY, today=TODAY)

    assert [item['topic'].id for item in result] == [studying.id]


def test_topics_are_ordered_by_id(session, alice, make_topic, set_progress):
    first, first_cards = make_topic(alice.id, title="First")
    second, second_cards = make_topic(alice.id, title="Second")
    for card in first_cards + second_cards:
        set_progress(card.id, alice.id, due_at=NOW - timedelta(hours=1))

    result = topics_due(session, alice.id, TODAY, today=TODAY)

    assert [item['topic'].id for item in result] == sorted([first.id, second.id])


def test_future_day_includes_cards_due_that_day(session, alice, make_topic, set_progress):
    topic, cards = make_topic(alice.id, n_cards=2)
    target = TODAY + timedelta(days=3)
    set_progress(cards[0].id, alice.id, due_at=NOW + timedelta(days=3))
    set_progress(cards[1].id, alice.id, due_at=NOW + timedelta(days=4))

    result = topics_due(session, alice.id, target, today=TODAY, projector=StepProjector({}))

    assert result[0]['cards_count'] == 1


def test_future_preview_follows_projected_chain(session, alice, make_topic, set_progress):
    # project(D0, 4) = D0 + 2d, project(D0 + 2d, 5) = D0 + 5d
    projector = StepProjector({4: 2, 5: 3, 6: 10})
    topic, cards = make_topic(alice.id, n_cards=1)
    d0 = NOW - timedelta(days=1)
    set_progress(cards[0].id, alice.id, level=3, due_at=d0)

    landing = topics_due(session, alice.id, (d0 + timedelta(days=5)).date(), today=TODAY, projector=projector)
    skipped = topics_due(session, alice.id, (d0 + timedelta(days=4)).date(), today=TODAY, projector=projector)

    assert [item['cards_count'] for item in landing] == [1]
    assert skipped == []


def test_future_preview_unions_due_and_projected_cards(session, alice, make_topic, set_progress):
    projector = StepProjector({2: 1})
    topic, cards = make_topic(alice.id, n_cards=2)
    target = TODAY + timedelta(days=2)
    set_progress(cards[0].id, alice.id, level=1, due_at=NOW + timedelta(days=1))
    set_progress(cards[1].id, alice.id, due_at=NOW + timedelta(days=2))

    result = topics_due(session, alice.id, target, today=TODAY, projector=projector)

    assert result[0]['cards_count'] == 2


def test_stuck_projector_is_detected(session, alice, make_topic, set_progress):
    topic, cards = make_topic(alice.id, n_cards=1)
    set_progress(cards[0].id, alice.id, due_at=NOW - timedelta(days=1))

    with pytest.raises(ProjectorInvariantError):
        topics_due(session, alice.id, TODAY + timedelta(days=7), today=TODAY, projector=StuckProjector())


def test_projection_step_limit(session, alice, make_topic, set_progress):
    topic, cards = make_topic(alice.id, n_cards=1)
    progress = set_progress(cards[0].id, alice.id, level=1, due_at=NOW)

    with pytest.raises(ProjectorInvariantError):
        lands_on_day(progress, TODAY + timedelta(days=100), StepProjector({}, default_days=1), max_steps=5)


def test_zero_step_limit_is_honoured(session, alice, make_topic, set_progress):
    topic, cards = make_topic(alice.id, n_cards=1)
    progress = set_progress(cards[0].id, alice.id, level=1, due_at=NOW)
    projector = StepProjector({}, default_days=1)

    assert lands_on_day(progress, TODAY + timedelta(days=100), projector) is True
    with pytest.raises(ProjectorInvariantError):
        lands_on_day(progress, TODAY + timedelta(days=100), projector, max_steps=0)


def test_approx_time_uses_the_requesting_users_estimates(session, alice, bob, make_topic, set_progress):
    topic, cards = make_topic(alice.id, n_cards=1)
    collaboration_service.add_collaborator(session, topic.id, bob.id)
    topic_service.update_config(session, topic.id, bob.id, reviewing=True)
    set_progress(cards[0].id, alice.id, due_at=NOW, estimated_answer_seconds=5)
    set_progress(cards[0].id, bob.id, due_at=NOW, estimated_answer_seconds=40)

    assert topics_due(session, alice.id, TODAY, today=TODAY)[0]['approx_time'] == 5
    assert topics_due(session, bob.id, TODAY, today=TODAY)[0]['approx_time'] == 40


def test_cards_due_now(session, alice, make_topic, set_progress):
    topic, cards = make_topic(alice.id, n_cards=3)
    set_progress(cards[0].id, alice.id, due_at=NOW - timedelta(days=2))
    set_progress(cards[1].id, alice.id, due_at=NOW)
    set_progress(cards[2].id, alice.id, due_at=NOW + timedelta(minutes=1))

    due = cards_due_now(session, alice.id, now=NOW)

    assert [card.id for card in due] == [cards[0].id, cards[1].id]


def test_cards_due_now_by_topic(session, alice, make_topic):
    first, first_cards = make_topic(alice.id, title="First")
    second, second_cards = make_topic(alice.id, title="Second")

    due = cards_due_now(session, alice.id, topic_id=second.id)

    assert [card.id for card in due] == [card.id for card in second_cards]


def test_cards_due_now_is_within_todays_topics(session, alice, make_topic, set_progress):
    first, first_cards = make_topic(alice.id, title="First", n_cards=3)
    second, second_cards = make_topic(alice.id, title="Second", n_cards=2)
    set_progress(first_cards[0].id, alice.id, due_at=NOW - timedelta(days=1))
    set_progress(first_cards[1].id, alice.id, due_at=NOW.replace(hour=22))
    set_progress(first_cards[2].id, alice.id, due_at=NOW + timedelta(days=2))
    set_progress(second_cards[0].id, alice.id, due_at=NOW)
    set_progress(second_cards[1].id, alice.id, due_at=NOW + timedelta(days=1))

    due_now = cards_due_now(session, alice.id, now=NOW)
    counts = {item['topic'].id: item['cards_count'] for item in topics_due(session, alice.id, TODAY, today=TODAY)}

    by_topic = {}
    for card in due_now:
        by_topic[card.topic_id] = by_topic.get(card.topic_id, 0) + 1
    for topic_id, count in by_topic.items():
        assert count <= counts[topic_id]


def test_other_users_progress_is_ignored(session, alice, bob, make_topic, set_progress):
    topic, cards = make_topic(alice.id, n_cards=1)
    collaboration_service.add_collaborator(session, topic.id, bob.id)
    topic_service.update_config(session, topic.id, bob.id, reviewing=True)
    set_progress(cards[0].id, alice.id, due_at=NOW + timedelta(days=10))
    set_progress(cards[0].id, bob.id, due_at=NOW - timedelta(days=1))

    assert topics_due(session, alice.id, TODAY, today=TODAY) == []
    assert len(topics_due(session, bob.id, TODAY, today=TODAY)) == 1
    assert get_progress(session, cards[0].id, alice.id).due_at == NOW + timedelta(days=10)


def test_cards_due_now_skips_topics_not_under_review(session, alice, make_topic, set_progress):
    reviewing, reviewing_cards = make_topic(alice.id, title="Reviewing", n_cards=1)
    paused, paused_cards = make_topic(alice.id, title="Paused", n_cards=1, reviewing=False)
    archived, archived_cards = make_topic(alice.id, title="Archived", n_cards=1)
    topic_service.update_config(session, archived.id, alice.id, archived=True)
    for card in reviewing_cards + paused_cards + archived_cards:
        set_progress(card.id, alice.id, due_at=NOW - timedelta(days=1))

    due_now = cards_due_now(session, alice.id, now=NOW)
    todays_topics = [item['topic'].id for item in topics_due(session, alice.id, TODAY, today=TODAY)]

    assert [card.id for card in due_now] == [reviewing_cards[0].id]
    assert todays_topics == [reviewing.id]
    assert cards_due_now(session, alice.id, now=NOW, topic_id=paused.id) == []
