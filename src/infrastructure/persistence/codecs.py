"""
infrastructure.persistence.codecs - Column encoding shared by the repositories.

Array-valued fields live in a single TEXT column as JSON ("[]" for empty,
never NULL). Enums are stored by value. Partial-update patches are turned
into SET clauses through an explicit field -> column table, so only known
columns can ever be written.
"""

from __future__ import annotations

import json
import sqlite3
import uuid
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional

# Failures that repositories translate into RepositoryError.
STORAGE_ERRORS: tuple[type[Exception], ...] = (sqlite3.Error, json.JSONDecodeError)

ColumnMap = Mapping[str, tuple[str, Optional[Callable[[Any], Any]]]]


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def next_timestamp(previous: Optional[str]) -> str:
    """Current UTC time, bumped to stay strictly after ``previous``."""
    now = datetime.now(timezone.utc)
    if previous:
        try:
            before = datetime.fromisoformat(previous)
        except ValueError:
            before = None
        if before is not None and before.tzinfo is not None and now <= before:
            now = before + timedelta(microseconds=1)
    return now.isoformat(timespec="microseconds")


def encode_list(values: Optional[Iterable[str]]) -> str:
    return json.dumps(list(values or []))


def decode_list(raw: Optional[str]) -> list[str]:
    return list(json.loads(raw or "[]"))


def enum_value(value: Any) -> Any:
    """Store enums by value; raw strings pass through to the CHECK constraint."""
    return value.value if isinstance(value, Enum) else value


def encode_bool(value: Any) -> int:
    return 1 if value else 0


def build_assignments(
    changes: Mapping[str, Any],
    columns: ColumnMap,
) -> tuple[list[str], list[Any]]:
    """Translate present patch fields into ``col = ?`` fragments and params."""
    fragments: list[str] = []
    params: list[Any] = []
    for name, value in changes.items():
        if name not in columns:
            continue
        column, encode = columns[name]
        fragments.append(f"{column} = ?")
        params.append(encode(value) if encode else value)
    return fragments, params
