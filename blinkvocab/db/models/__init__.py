"""Database models package."""
from blinkvocab.db.models.user import User
from blinkvocab.db.models.word import Tag, Word, WordSense, WordTag
from blinkvocab.db.models.dictionary import Dictionary, DictionaryWord, UserDictionary
from blinkvocab.db.models.progress import LearningRecord, ReviewEvent, ReviewEventType

__all__ = [
    "User",
    "Word",
    "WordSense",
    "Tag",
    "WordTag",
    "Dictionary",
    "DictionaryWord",
    "UserDictionary",
    "LearningRecord",
    "ReviewEvent",
    "ReviewEventType",
]
