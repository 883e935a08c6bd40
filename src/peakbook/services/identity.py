"""Identifier generation for users and mountains."""

import uuid
from collections.abc import Iterable
from typing import Any


def new_user_id() -> str:
    """Return a fresh, random user id."""
    return uuid.uuid4().hex


def next_mountain_id(existing: Iterable[dict[str, Any]], floor: int = 0) -> int:
    """Return one more than the largest integer id in ``existing``.

    Ids that do not parse as integers are ignored. ``floor`` is the highest id
    ever handed out, so ids of deleted mountains are not reused.
    """
    max_id = floor
    for record in existing:
        try:
            current = int(record.get("id"))
        except (TypeError, ValueError):
            continue
        if current > max_id:
            max_id = current
    return max_id + 1
