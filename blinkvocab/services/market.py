"""Dictionary market: catalog listing and joining."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from blinkvocab.config import settings
from blinkvocab.db.models.dictionary import Dictionary, DictionaryWord, UserDictionary
from blinkvocab.db.models.progress import LearningRecord, ReviewEvent, ReviewEventType
from blinkvocab.db.session import transaction
from blinkvocab.utils.cache import build_cache_key, cache_backend
from blinkvocab.utils.exceptions import NotFoundError

CATALOG_NAMESPACE = "market:dictionaries"


def invalidate_catalog() -> None:
    """Drop the cached dictionary catalog after dictionaries or their words change."""

    cache_backend.invalidate(CATALOG_NAMESPACE)


class MarketService:
    """List dictionaries and subscribe learners to them."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def catalog(self) -> list[dict[str, Any]]:
        """Return every dictionary with its word count, served from cache when warm."""

        cache_key = build_cache_key(scope="catalog")
        cached = cache_backend.get(CATALOG_NAMESPACE, cache_key)
        if cached is not None:
            return cached

        word_counts = (
            select(
                DictionaryWord.dictionary_id.label("dictionary_id"),
                func.count(DictionaryWord.word_id).label("word_count"),
            )
            .group_by(DictionaryWord.dictionary_id)
            .subquery()
        )
        rows = self.db.execute(
            select(Dictionary, func.coalesce(word_counts.c.word_count, 0))
            .outerjoin(word_counts, word_counts.c.dictionary_id == Dictionary.id)
            .order_by(Dictionary.name)
        ).all()
        catalog = [
            {
                "id": dictionary.id,
                "name": dictionary.name,
                "description": dictionary.description,
                "language": dictionary.language,
                "word_count": int(word_count),
            }
            for dictionary, word_count in rows
        ]
        cache_backend.set(
            CATALOG_NAMESPACE, cache_key, catalog, ttl_seconds=settings.DICTIONARY_CACHE_TTL_SECONDS
        )
        return catalog

    def list_dictionaries(self, *, user_id: uuid.UUID) -> list[dict[str, Any]]:
        joined = set(
            self.db.scalars(
                select(UserDictionary.dictionary_id).where(UserDictionary.user_id == user_id)
            )
        )
        return [{**entry, "joined": entry["id"] in joined} for entry in self.catalog()]

    def join_dictionaries(
        self,
        *,
        user_id: uuid.UUID,
        dictionary_ids: list[int],
        now: datetime | None = None,
    ) -> list[dict[str, int]]:
        """Subscribe the learner and acquire every word they do not have yet.

        Dictionaries are processed in request order; a word shared by two
        dictionaries is counted as added by the first one only.
        """

        dictionary_ids = list(dict.fromkeys(dictionary_ids))
        now = now or datetime.now(timezone.utc)

        with transaction(self.db, operation="dictionary join"):
            found = set(
                self.db.scalars(select(Dictionary.id).where(Dictionary.id.in_(dictionary_ids)))
            )
            missing = [dictionary_id for dictionary_id in dictionary_ids if dictionary_id not in found]
            if missing:
                raise NotFoundError("Dictionary not found", details={"dictionary_ids": missing})

            results = []
            for dictionary_id in dictionary_ids:
                results.append(self._join_one(user_id=user_id, dictionary_id=dictionary_id, now=now))
                self.db.flush()

        for result in results:
            logger.info(
                f"Dictionary joined user={user_id} dictionary={result['dictionary_id']} "
                f"added={result['added_count']} already_had={result['already_had_count']}"
            )
        return results

    def _join_one(self, *, user_id: uuid.UUID, dictionary_id: int, now: datetime) -> dict[str, int]:
        subscription = self.db.get(UserDictionary, (user_id, dictionary_id))
        if subscription is None:
            self.db.add(UserDictionary(user_id=user_id, dictionary_id=dictionary_id, joined_at=now))

        word_ids = list(
            self.db.scalars(
                select(DictionaryWord.word_id)
                .where(DictionaryWord.dictionary_id == dictionary_id)
                .order_by(DictionaryWord.word_id)
            )
        )
        owned: set[int] = set()
        if word_ids:
            owned.update(
                self.db.scalars(
                    select(LearningRecord.word_id).where(
                        LearningRecord.user_id == user_id, LearningRecord.word_id.in_(word_ids)
                    )
                )
            )

        added = 0
        for word_id in word_ids:
            if word_id in owned:
                continue
            record = LearningRecord.acquire(user_id=user_id, word_id=word_id, now=now)
            record.id = uuid.uuid4()
            self.db.add(record)
            self.db.add(
                ReviewEvent(
                    user_id=user_id,
                    word_id=word_id,
                    learning_record_id=record.id,
                    type=ReviewEventType.ADDED_BY_DICTIONARY.value,
                    payload={"dictionary_id": dictionary_id},
                    created_at=now,
                )
            )
            added += 1

        if word_ids:
            self.db.add(
                ReviewEvent(
                    user_id=user_id,
                    word_id=None,
                    learning_record_id=None,
                    type=ReviewEventType.DICTIONARY_ADDED.value,
                    payload={"dictionary_id": dictionary_id, "total_words": len(word_ids)},
                    created_at=now,
                )
            )

        return {
            "dictionary_id": dictionary_id,
            "added_count": added,
            "already_had_count": len(word_ids) - added,
        }
