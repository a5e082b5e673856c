"""Word catalog services: manual additions, the learner's word list and word detail."""
from __future__ import annotations

import math
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload, selectinload

from blinkvocab.core.lemma import normalize_word_text
from blinkvocab.core.srs import LearningStatus
from blinkvocab.db.models.dictionary import Dictionary, DictionaryWord
from blinkvocab.db.models.progress import LearningRecord, ReviewEvent, ReviewEventType
from blinkvocab.db.models.word import Tag, Word, WordTag
from blinkvocab.db.session import transaction
from blinkvocab.utils.exceptions import NotFoundError, ValidationError

DEFAULT_LANGUAGE = "en"
WRONG_ANSWER_WINDOW_DAYS = 30
MAX_PAGE_SIZE = 100
MAX_EVENT_LIMIT = 200
SORT_OPTIONS = ("next_due", "recent", "added", "wrong_most")
KNOWN_STATUSES = frozenset(status.value for status in LearningStatus)


@dataclass(slots=True)
class ManualAddition:
    """Result of adding a word by hand."""

    word: Word
    record: LearningRecord
    event: ReviewEvent
    is_new_word: bool
    is_new_user_word: bool


def parse_status_filter(raw: str | None) -> list[str]:
    """Split a comma separated status filter, rejecting unknown statuses."""

    if not raw:
        return []
    statuses = [part.strip().lower() for part in raw.split(",") if part.strip()]
    unknown = sorted(set(statuses) - KNOWN_STATUSES)
    if unknown:
        raise ValidationError("Unknown status filter", details={"unknown": unknown})
    return list(dict.fromkeys(statuses))


class WordService:
    """Catalog operations scoped to one learner."""

    def __init__(self, db: Session) -> None:
        self.db = db

    # ------------------------------------------------------------------
    # Manual addition
    # ------------------------------------------------------------------
    def add_manual_word(
        self,
        *,
        user_id: uuid.UUID,
        text: str,
        url: str | None = None,
        context: str | None = None,
        now: datetime | None = None,
    ) -> ManualAddition:
        """Add a word typed by the learner.

        The word and the learning record are created once and left untouched
        afterwards, but every call appends a fresh ``added_manual`` event.
        """

        lemma = normalize_word_text(text)
        now = now or datetime.now(timezone.utc)

        with transaction(self.db, operation="manual word addition"):
            word = self.db.scalars(
                select(Word).where(Word.lemma == lemma, Word.language == DEFAULT_LANGUAGE)
            ).first()
            is_new_word = word is None
            if word is None:
                word = Word(lemma=lemma, language=DEFAULT_LANGUAGE, source="custom", created_at=now)
                self.db.add(word)
                self.db.flush()

            record = self.db.scalars(
                select(LearningRecord).where(
                    LearningRecord.user_id == user_id, LearningRecord.word_id == word.id
                )
            ).first()
            is_new_user_word = record is None
            if record is None:
                record = LearningRecord.acquire(user_id=user_id, word_id=word.id, now=now)
                self.db.add(record)
                self.db.flush()

            payload: dict[str, Any] = {"lemma": lemma}
            if url is not None:
                payload["url"] = str(url)
            if context is not None:
                payload["context"] = context
            event = ReviewEvent(
                user_id=user_id,
                word_id=word.id,
                learning_record_id=record.id,
                type=ReviewEventType.ADDED_MANUAL.value,
                payload=payload,
                created_at=now,
            )
            self.db.add(event)
            self.db.flush()

        logger.info(
            f"Manual word added user={user_id} lemma={lemma!r} "
            f"new_word={is_new_word} new_user_word={is_new_user_word}"
        )
        return ManualAddition(
            word=word,
            record=record,
            event=event,
            is_new_word=is_new_word,
            is_new_user_word=is_new_user_word,
        )

    # ------------------------------------------------------------------
    # Word list
    # ------------------------------------------------------------------
    def list_words(
        self,
        *,
        user_id: uuid.UUID,
        statuses: list[str] | None = None,
        dictionary_id: int | None = None,
        tag_id: int | None = None,
        sort: str = "next_due",
        page: int = 1,
        page_size: int = 20,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """Return one page of the learner's words with labels and pagination."""

        if sort not in SORT_OPTIONS:
            raise ValidationError("Unknown sort option", details={"sort": sort})
        if page < 1 or not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValidationError(
                "Invalid pagination", details={"page": page, "page_size": page_size}
            )
        now = now or datetime.now(timezone.utc)

        conditions = [LearningRecord.user_id == user_id]
        if statuses:
            conditions.append(LearningRecord.status.in_(statuses))
        if dictionary_id is not None:
            conditions.append(
                LearningRecord.word_id.in_(
                    select(DictionaryWord.word_id).where(DictionaryWord.dictionary_id == dictionary_id)
                )
            )
        if tag_id is not None:
            conditions.append(
                LearningRecord.word_id.in_(select(WordTag.word_id).where(WordTag.tag_id == tag_id))
            )

        total = int(
            self.db.scalar(select(func.count(LearningRecord.id)).where(*conditions)) or 0
        )

        last_event = (
            select(
                ReviewEvent.learning_record_id.label("record_id"),
                func.max(ReviewEvent.created_at).label("last_event_at"),
            )
            .where(ReviewEvent.user_id == user_id)
            .group_by(ReviewEvent.learning_record_id)
            .subquery()
        )
        stmt = (
            select(LearningRecord, last_event.c.last_event_at)
            .options(joinedload(LearningRecord.word))
            .outerjoin(last_event, last_event.c.record_id == LearningRecord.id)
            .where(*conditions)
        )

        if sort == "wrong_most":
            wrong_answers = (
                select(
                    ReviewEvent.learning_record_id.label("record_id"),
                    func.count(ReviewEvent.id).label("wrong_count"),
                )
                .where(ReviewEvent.user_id == user_id)
                .where(ReviewEvent.type == ReviewEventType.ANSWER_WRONG.value)
                .where(ReviewEvent.created_at >= now - timedelta(days=WRONG_ANSWER_WINDOW_DAYS))
                .group_by(ReviewEvent.learning_record_id)
                .subquery()
            )
            stmt = stmt.outerjoin(
                wrong_answers, wrong_answers.c.record_id == LearningRecord.id
            ).order_by(
                func.coalesce(wrong_answers.c.wrong_count, 0).desc(),
                LearningRecord.next_due_at.asc().nullslast(),
            )
        elif sort == "recent":
            stmt = stmt.order_by(
                last_event.c.last_event_at.desc().nullslast(),
                LearningRecord.updated_at.desc(),
            )
        elif sort == "added":
            stmt = stmt.order_by(LearningRecord.created_at.desc())
        else:
            stmt = stmt.order_by(
                LearningRecord.next_due_at.asc().nullslast(),
                LearningRecord.created_at.asc(),
            )
        stmt = stmt.order_by(LearningRecord.word_id.asc())
        stmt = stmt.offset((page - 1) * page_size).limit(page_size)

        rows = self.db.execute(stmt).all()
        word_ids = [record.word_id for record, _ in rows]
        dictionaries = self._dictionaries_by_word(word_ids)
        tags = self._tags_by_word(word_ids)

        items = [
            {
                "learning_record_id": record.id,
                "word_id": record.word_id,
                "lemma": record.word.lemma,
                "status": record.status,
                "stage": record.stage,
                "next_due_at": record.next_due_at,
                "last_event_at": last_event_at,
                "dictionaries": dictionaries.get(record.word_id, []),
                "tags": tags.get(record.word_id, []),
            }
            for record, last_event_at in rows
        ]
        return {
            "items": items,
            "pagination": {
                "page": page,
                "page_size": page_size,
                "total": total,
                "total_pages": math.ceil(total / page_size),
            },
        }

    def _dictionaries_by_word(self, word_ids: list[int]) -> dict[int, list[dict[str, Any]]]:
        if not word_ids:
            return {}
        rows = self.db.execute(
            select(DictionaryWord.word_id, Dictionary.id, Dictionary.name)
            .join(Dictionary, Dictionary.id == DictionaryWord.dictionary_id)
            .where(DictionaryWord.word_id.in_(word_ids))
            .order_by(Dictionary.name)
        ).all()
        grouped: dict[int, list[dict[str, Any]]] = {}
        for word_id, dictionary_id, name in rows:
            grouped.setdefault(word_id, []).append({"id": dictionary_id, "name": name})
        return grouped

    def _tags_by_word(self, word_ids: list[int]) -> dict[int, list[dict[str, Any]]]:
        if not word_ids:
            return {}
        rows = self.db.execute(
            select(WordTag.word_id, Tag.id, Tag.name, Tag.type)
            .join(Tag, Tag.id == WordTag.tag_id)
            .where(WordTag.word_id.in_(word_ids))
            .order_by(Tag.name)
        ).all()
        grouped: dict[int, list[dict[str, Any]]] = {}
        for word_id, tag_id, name, tag_type in rows:
            grouped.setdefault(word_id, []).append({"id": tag_id, "name": name, "type": tag_type})
        return grouped

    # ------------------------------------------------------------------
    # Word detail
    # ------------------------------------------------------------------
    def get_word_detail(
        self, *, user_id: uuid.UUID, word_id: int, limit: int = 50
    ) -> dict[str, Any]:
        """Return a word, the learner's record for it and their recent events on it."""

        if not 1 <= limit <= MAX_EVENT_LIMIT:
            raise ValidationError("Invalid event limit", details={"limit": limit})

        word = self.db.scalars(
            select(Word)
            .options(
                selectinload(Word.senses),
                selectinload(Word.tags).joinedload(WordTag.tag),
                selectinload(Word.dictionary_links).joinedload(DictionaryWord.dictionary),
            )
            .where(Word.id == word_id)
        ).first()
        if word is None:
            raise NotFoundError("Word not found", details={"word_id": word_id})

        record = self.db.scalars(
            select(LearningRecord).where(
                LearningRecord.user_id == user_id, LearningRecord.word_id == word_id
            )
        ).first()
        events = list(
            self.db.scalars(
                select(ReviewEvent)
                .where(ReviewEvent.user_id == user_id, ReviewEvent.word_id == word_id)
                .order_by(ReviewEvent.created_at.desc())
                .limit(limit)
            )
        )

        return {
            "word": {
                "word_id": word.id,
                "lemma": word.lemma,
                "language": word.language,
                "source": word.source,
                "senses": list(word.senses),
                "tags": sorted((link.tag for link in word.tags), key=lambda tag: tag.name),
                "dictionaries": sorted(
                    (
                        {
                            "id": link.dictionary.id,
                            "name": link.dictionary.name,
                            "description": link.dictionary.description,
                        }
                        for link in word.dictionary_links
                    ),
                    key=lambda item: item["name"],
                ),
            },
            "user": (
                {
                    "learning_record_id": record.id,
                    "status": record.status,
                    "stage": record.stage,
                    "next_due_at": record.next_due_at,
                }
                if record is not None
                else None
            ),
            "events": events,
        }
