"""Seed the English essential vocabulary dictionary and a demo learner."""
from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

from sqlalchemy import select
from sqlalchemy.orm import Session

sys.path.append(str(Path(__file__).resolve().parent.parent))

from blinkvocab.core.security import get_password_hash
from blinkvocab.db.models import (
    Dictionary,
    DictionaryWord,
    LearningRecord,
    ReviewEvent,
    ReviewEventType,
    Tag,
    User,
    UserDictionary,
    Word,
    WordSense,
    WordTag,
)
from blinkvocab.db.session import SessionLocal, transaction
from blinkvocab.services.market import invalidate_catalog

SEED_EMAIL = "seed@blinkvocab.local"
DICTIONARY_NAME = "English Essential Vocabulary"
SAMPLE_RECORDS = 5

SEED_WORDS: list[tuple[str, str, str]] = [
    ("abundant", "adj", "existing or available in large quantities"),
    ("accommodate", "v", "to provide lodging or sufficient space"),
    ("achieve", "v", "to successfully bring about or reach a goal"),
    ("acknowledge", "v", "to recognize the existence or truth of"),
    ("acquire", "v", "to obtain or gain possession of"),
    ("adapt", "v", "to adjust to new conditions or environment"),
    ("adequate", "adj", "satisfactory or sufficient in quality or quantity"),
    ("adjacent", "adj", "next to or adjoining something else"),
    ("advance", "v", "to move forward or make progress"),
    ("advocate", "v", "to publicly support or recommend a cause"),
    ("affect", "v", "to influence or change something"),
    ("aggregate", "n", "a collection or combination of things"),
    ("agree", "v", "to have the same opinion or consent"),
    ("alert", "adj", "watchful and quick to notice danger"),
    ("allocate", "v", "to distribute or assign resources"),
    ("ally", "n", "a state or group formally associated with another"),
    ("ambiguous", "adj", "open to more than one interpretation"),
    ("amend", "v", "to change or modify something officially"),
    ("analog", "adj", "comparable in certain respects"),
    ("analyze", "v", "to examine something systematically"),
]


def get_or_create_word(db: Session, lemma: str, pos: str, definition: str) -> tuple[Word, bool]:
    word = db.scalar(select(Word).where(Word.lemma == lemma, Word.language == "en"))
    if word is not None:
        return word, False
    word = Word(lemma=lemma, language="en", source="seed")
    word.senses.append(
        WordSense(
            pos=pos,
            definition=definition,
            examples=[
                f'Example sentence for "{lemma}"',
                f'Another usage of "{lemma}" in context',
            ],
            order=0,
        )
    )
    db.add(word)
    db.flush()
    return word, True


def seed(db: Session, password: str = "blinkvocab-seed") -> dict[str, int]:
    """Create the seed data, leaving rows that already exist untouched."""

    now = datetime.now(timezone.utc)
    created = {"words": 0, "records": 0}

    with transaction(db, operation="vocabulary seed"):
        user = db.scalar(select(User).where(User.email == SEED_EMAIL))
        if user is None:
            user = User(email=SEED_EMAIL, hashed_password=get_password_hash(password), full_name="Seed Learner")
            db.add(user)
            db.flush()

        tag = db.scalar(select(Tag).where(Tag.name == "seed-dictionary"))
        if tag is None:
            tag = Tag(name="seed-dictionary", type="dictionary")
            db.add(tag)

        dictionary = db.scalar(select(Dictionary).where(Dictionary.name == DICTIONARY_NAME))
        if dictionary is None:
            dictionary = Dictionary(
                name=DICTIONARY_NAME,
                description="Essential vocabulary for language learners",
                language="en",
            )
            db.add(dictionary)
        db.flush()

        words = []
        for lemma, pos, definition in SEED_WORDS:
            word, is_new = get_or_create_word(db, lemma, pos, definition)
            created["words"] += int(is_new)
            if db.get(DictionaryWord, (dictionary.id, word.id)) is None:
                db.add(DictionaryWord(dictionary_id=dictionary.id, word_id=word.id))
            if db.get(WordTag, (word.id, tag.id)) is None:
                db.add(WordTag(word_id=word.id, tag_id=tag.id))
            words.append(word)

        if db.get(UserDictionary, (user.id, dictionary.id)) is None:
            db.add(UserDictionary(user_id=user.id, dictionary_id=dictionary.id))

        for word in words[:SAMPLE_RECORDS]:
            exists = db.scalar(
                select(LearningRecord.id).where(
                    LearningRecord.user_id == user.id, LearningRecord.word_id == word.id
                )
            )
            if exists is not None:
                continue
            record = LearningRecord.acquire(user_id=user.id, word_id=word.id, now=now)
            record.status = "learning"
            record.stage = 1
            record.next_due_at = now + timedelta(days=1)
            db.add(record)
            db.flush()
            created["records"] += 1
            if word is words[0]:
                db.add(
                    ReviewEvent(
                        user_id=user.id,
                        word_id=word.id,
                        learning_record_id=record.id,
                        type=ReviewEventType.VIEW.value,
                        payload={"page": "dictionary-list"},
                        created_at=now,
                    )
                )

    invalidate_catalog()
    return created


if __name__ == "__main__":  # pragma: no cover - CLI execution
    import argparse

    parser = argparse.ArgumentParser(description="Seed the essential vocabulary dictionary")
    parser.add_argument("--password", type=str, default="blinkvocab-seed", help="Seed learner password")
    args = parser.parse_args()

    session = SessionLocal()
    try:
        result = seed(session, password=args.password)
    finally:
        session.close()
    print(f"Seed complete: {result['words']} new words, {result['records']} new learning records")
