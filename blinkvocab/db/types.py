"""Custom column types shared by PostgreSQL and SQLite deployments."""
from __future__ import annotations

import json
from typing import Any

from sqlalchemy.dialects.postgresql import ARRAY as PG_ARRAY
from sqlalchemy.types import Text, TypeDecorator


class StringList(TypeDecorator):
    """Ordered list of strings, e.g. the usage examples of a word sense.

    PostgreSQL stores a native ``TEXT[]``; other dialects store a JSON
    document in a text column. ``NULL`` reads back as an empty list.
    """

    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect):  # type: ignore[override]
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PG_ARRAY(Text))
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value: Any, dialect):  # type: ignore[override]
        if value is None:
            return None
        items = [str(item) for item in value]
        if dialect.name == "postgresql":
            return items
        return json.dumps(items, ensure_ascii=False)

    def process_result_value(self, value: Any, dialect):  # type: ignore[override]
        if value is None:
            return []
        if dialect.name == "postgresql":
            return list(value)
        return json.loads(value)
