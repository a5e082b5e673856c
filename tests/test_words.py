"""Tests for manual word addition, the word list and word detail."""
from __future__ import annotations

import warnings
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.exc import SADeprecationWarning

from blinkvocab.db.models import LearningRecord, ReviewEvent, Word
from blinkvocab.services.words import WordService, parse_status_filter
from blinkvocab.utils.exceptions import NotFoundError, ValidationError

NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


def test_adding_same_word_twice_keeps_one_record(db_session, learner) -> None:
    service = WordService(db_session)

    first = service.add_manual_word(
        user_id=learner.id, text="  Serendipity ", url="https://example.com/a", now=NOW
    )
    second = service.add_manual_word(
        user_id=learner.id, text="SERENDIPITY", context="a happy accident", now=NOW + timedelta(minutes=5)
    )

    assert first.is_new_word is True
    assert first.is_new_user_word is True
    assert second.is_new_word is False
    assert second.is_new_user_word is False
    assert first.word.id == second.word.id
    assert first.record.id == second.record.id

    assert db_session.scalar(select(func.count(Word.id))) == 1
    assert db_session.scalar(select(func.count(LearningRecord.id))) == 1
    events = list(
        db_session.scalars(
            select(ReviewEvent).where(ReviewEvent.type == "added_manual").order_by(ReviewEvent.created_at)
        )
    )
    assert len(events) == 2
    assert events[0].payload == {"lemma": "serendipity", "url": "https://example.com/a"}
    assert events[1].payload == {"lemma": "serendipity", "context": "a happy accident"}


def test_new_manual_word_starts_as_new_and_due(db_session, learner) -> None:
    addition = WordService(db_session).add_manual_word(user_id=learner.id, text="gleam", now=NOW)

    assert addition.word.source == "custom"
    assert addition.word.language == "en"
    assert addition.record.status == "new"
    assert addition.record.stage == 0
    assert addition.record.next_due_at == NOW


def test_existing_catalog_word_is_reused(db_session, learner, other_learner, make_word) -> None:
    word = make_word("apple")
    service = WordService(db_session)

    mine = service.add_manual_word(user_id=learner.id, text="Apple", now=NOW)
    theirs = service.add_manual_word(user_id=other_learner.id, text="apple", now=NOW)

    assert mine.word.id == word.id
    assert mine.is_new_word is False
    assert mine.is_new_user_word is True
    assert theirs.is_new_user_word is True
    assert mine.record.id != theirs.record.id
    assert word.source == "seed"


@pytest.mark.parametrize("text", ["a", "two words", "x" * 31, "naïve"])
def test_invalid_text_writes_nothing(db_session, learner, text: str) -> None:
    with pytest.raises(ValidationError):
        WordService(db_session).add_manual_word(user_id=learner.id, text=text, now=NOW)

    assert db_session.scalar(select(func.count(Word.id))) == 0
    assert db_session.scalar(select(func.count(ReviewEvent.id))) == 0


def test_parse_status_filter() -> None:
    assert parse_status_filter(None) == []
    assert parse_status_filter("new, Learning,new") == ["new", "learning"]
    with pytest.raises(ValidationError):
        parse_status_filter("new,forgotten")


@pytest.fixture()
def word_list(db_session, learner, make_word, make_record, essentials):
    words = {word.lemma: word for word in db_session.scalars(select(Word))}
    records = {
        "apple": make_record(
            learner, words["apple"], status="learning", stage=1,
            next_due_at=NOW + timedelta(hours=2), created_at=NOW - timedelta(days=3),
        ),
        "bread": make_record(
            learner, words["bread"], status="review", stage=3,
            next_due_at=NOW - timedelta(hours=1), created_at=NOW - timedelta(days=2),
        ),
        "orbit": make_record(
            learner, make_word("orbit"), next_due_at=None, created_at=NOW - timedelta(days=1),
        ),
    }
    db_session.add_all(
        [
            ReviewEvent(
                user_id=learner.id, word_id=records["apple"].word_id,
                learning_record_id=records["apple"].id, type="answer_wrong",
                created_at=NOW - timedelta(days=1),
            ),
            ReviewEvent(
                user_id=learner.id, word_id=records["apple"].word_id,
                learning_record_id=records["apple"].id, type="answer_wrong",
                created_at=NOW - timedelta(days=2),
            ),
            ReviewEvent(
                user_id=learner.id, word_id=records["bread"].word_id,
                learning_record_id=records["bread"].id, type="answer_wrong",
                created_at=NOW - timedelta(days=40),
            ),
            ReviewEvent(
                user_id=learner.id, word_id=records["orbit"].word_id,
                learning_record_id=records["orbit"].id, type="view",
                created_at=NOW - timedelta(minutes=5),
            ),
        ]
    )
    db_session.commit()
    return records


def _lemmas(result) -> list[str]:
    return [item["lemma"] for item in result["items"]]


@pytest.mark.parametrize(
    ("sort", "expected"),
    [
        ("next_due", ["bread", "apple", "orbit"]),
        ("added", ["orbit", "bread", "apple"]),
        ("recent", ["orbit", "apple", "bread"]),
        ("wrong_most", ["apple", "bread", "orbit"]),
    ],
)
def test_list_words_sorting(db_session, learner, word_list, sort: str, expected: list[str]) -> None:
    result = WordService(db_session).list_words(user_id=learner.id, sort=sort, now=NOW)

    assert _lemmas(result) == expected


def test_list_words_filters_and_labels(db_session, learner, word_list, essentials) -> None:
    service = WordService(db_session)

    by_status = service.list_words(user_id=learner.id, statuses=["learning", "review"], now=NOW)
    by_dictionary = service.list_words(user_id=learner.id, dictionary_id=essentials.id, now=NOW)

    assert _lemmas(by_status) == ["bread", "apple"]
    assert _lemmas(by_dictionary) == ["bread", "apple"]
    apple = by_dictionary["items"][1]
    assert apple["dictionaries"] == [{"id": essentials.id, "name": "Essentials"}]
    assert [tag["name"] for tag in apple["tags"]] == ["daily"]
    assert apple["last_event_at"] is not None


def test_list_words_pagination(db_session, learner, word_list) -> None:
    result = WordService(db_session).list_words(user_id=learner.id, page=2, page_size=2, now=NOW)

    assert _lemmas(result) == ["orbit"]
    assert result["pagination"] == {"page": 2, "page_size": 2, "total": 3, "total_pages": 2}


def test_list_words_rejects_bad_paging(db_session, learner) -> None:
    with pytest.raises(ValidationError):
        WordService(db_session).list_words(user_id=learner.id, page_size=101)


def test_word_detail(db_session, learner, word_list, essentials) -> None:
    apple = word_list["apple"]

    detail = WordService(db_session).get_word_detail(user_id=learner.id, word_id=apple.word_id, limit=1)

    assert detail["word"]["lemma"] == "apple"
    assert [sense.definition for sense in detail["word"]["senses"]] == ["Definition of apple"]
    assert detail["word"]["dictionaries"][0]["name"] == "Essentials"
    assert detail["user"]["learning_record_id"] == apple.id
    assert len(detail["events"]) == 1
    assert detail["events"][0].type == "answer_wrong"


def test_word_detail_without_record(db_session, learner, make_word) -> None:
    word = make_word("comet")

    detail = WordService(db_session).get_word_detail(user_id=learner.id, word_id=word.id)

    assert detail["user"] is None
    assert detail["events"] == []


def test_word_detail_unknown_word(db_session, learner) -> None:
    with pytest.raises(NotFoundError):
        WordService(db_session).get_word_detail(user_id=learner.id, word_id=999)


def test_add_manual_endpoint_is_idempotent(client: TestClient, auth_headers) -> None:
    first = client.post(
        "/api/v1/words/add-manual",
        json={"text": "Lucid", "url": "https://example.com/article"},
        headers=auth_headers,
    )
    second = client.post("/api/v1/words/add-manual", json={"text": "lucid"}, headers=auth_headers)

    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["lemma"] == "lucid"
    assert first.json()["is_new_user_word"] is True
    assert second.json()["is_new_user_word"] is False
    assert first.json()["learning_record_id"] == second.json()["learning_record_id"]

    detail = client.get(f"/api/v1/words/{first.json()['word_id']}", headers=auth_headers)
    assert detail.status_code == 200
    assert [event["type"] for event in detail.json()["events"]] == ["added_manual", "added_manual"]


@pytest.mark.parametrize("payload", [{"text": "x"}, {"text": "hello world"}, {"text": "ok", "url": "not a url"}])
def test_add_manual_endpoint_validation(client: TestClient, auth_headers, payload) -> None:
    response = client.post("/api/v1/words/add-manual", json=payload, headers=auth_headers)

    assert response.status_code == 422


def test_words_endpoint(client: TestClient, learner, auth_headers, word_list) -> None:
    response = client.get(
        "/api/v1/words", params={"status": "learning", "sort": "added"}, headers=auth_headers
    )
    bad_status = client.get("/api/v1/words", params={"status": "lost"}, headers=auth_headers)
    bad_sort = client.get("/api/v1/words", params={"sort": "random"}, headers=auth_headers)
    missing = client.get("/api/v1/words/999", headers=auth_headers)

    assert response.status_code == 200
    assert [item["lemma"] for item in response.json()["items"]] == ["apple"]
    assert response.json()["pagination"]["total"] == 1
    assert bad_status.status_code == 422
    assert bad_sort.status_code == 422
    assert missing.status_code == 404


def test_manual_addition_flushes_without_deprecation_warnings(db_session, learner) -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error", SADeprecationWarning)
        addition = WordService(db_session).add_manual_word(user_id=learner.id, text="quiet", now=NOW)

    assert addition.event.learning_record_id == addition.record.id
