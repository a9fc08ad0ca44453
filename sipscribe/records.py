"""
Record operations over the tastings table.

Every call opens its own short-lived session and commits before returning;
returned Tasting objects are detached and safe to read after the call.
"""

import datetime
import logging
import uuid
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import select

from sipscribe import db
from sipscribe.exceptions import InvalidTastingError, TastingNotFoundError
from sipscribe.models import (
    ATTR_MAP,
    GROUP_FIELDS,
    INTEGER_FIELDS,
    REQUIRED_FIELDS,
    BeverageType,
    Tasting,
)

__all__ = [
    "add_tasting",
    "get_tasting",
    "update_tasting",
    "delete_tasting",
    "list_all",
    "list_by_type",
    "overall_score",
]

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = ("id", "created_at")


def utc_now_iso() -> str:
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_id() -> str:
    return str(uuid.uuid4())


def overall_score(aroma: float, palate: float, finish: float) -> float:
    return (aroma + palate + finish) / 3


def beverage_type(value: Union[str, BeverageType]) -> str:
    try:
        return BeverageType(value).value
    except ValueError:
        raise InvalidTastingError(f"Unknown beverage type: {value!r}") from None


def clean_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    unknown = sorted(set(fields) - set(ATTR_MAP))
    if unknown:
        raise InvalidTastingError(f"Unknown tasting fields: {', '.join(unknown)}")
    cleaned = dict(fields)
    if cleaned.get("type") is not None:
        cleaned["type"] = beverage_type(cleaned["type"])
    return cleaned


def snapshot(t: Tasting) -> Dict[str, Any]:
    return {attr: getattr(t, attr) for attr in ATTR_MAP}


def check_required(values: Dict[str, Any]) -> None:
    missing = [name for name in REQUIRED_FIELDS if values.get(name) is None]
    if missing:
        raise InvalidTastingError(f"Missing required fields: {', '.join(missing)}")
    beverage_type(values["type"])

    for name in INTEGER_FIELDS:
        value = values.get(name)
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise InvalidTastingError(f"{name} must be an integer, got {value!r}")
    score = values["overall_score"]
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise InvalidTastingError(f"overall_score must be a number, got {score!r}")
    created = values.get("created_at")
    if created is not None and not isinstance(created, str):
        raise InvalidTastingError(f"created_at must be an ISO-8601 string, got {created!r}")


def add_tasting(**fields: Any) -> Tasting:
    """
    Store a new tasting. ``id`` and both timestamps are stamped here; any
    caller-supplied values for them are ignored.
    """
    for key in ("id", "created_at", "updated_at"):
        fields.pop(key, None)
    fields = clean_fields(fields)
    check_required(fields)

    now = utc_now_iso()
    t = Tasting(id=new_id(), created_at=now, updated_at=now, **fields)

    with db.SessionLocal() as s:
        s.add(t)
        s.commit()
    logger.debug("Added tasting %s", t.id)
    return t


def get_tasting(tid: str) -> Optional[Tasting]:
    with db.SessionLocal() as s:
        return s.get(Tasting, tid)


def update_tasting(tid: str, **updates: Any) -> Dict[str, Any]:
    """
    Merge ``updates`` into the stored tasting and refresh ``updated_at``.

    Returns the applied fields, including the new ``updated_at``.
    Raises TastingNotFoundError when ``tid`` is not stored.
    """
    for key in IMMUTABLE_FIELDS:
        updates.pop(key, None)
    applied = clean_fields(updates)
    applied["updated_at"] = utc_now_iso()

    with db.SessionLocal() as s:
        t = s.get(Tasting, tid)
        if t is None:
            raise TastingNotFoundError(tid)
        new_type = applied.get("type")
        if new_type is not None and new_type != t.type:
            # switching beverage drops the previous group's attributes
            for name in GROUP_FIELDS[t.type]:
                applied.setdefault(name, None)
        check_required({**snapshot(t), **applied})
        for key, value in applied.items():
            setattr(t, key, value)
        s.commit()
    logger.debug("Updated tasting %s", tid)
    return applied


def delete_tasting(tid: str) -> None:
    with db.SessionLocal() as s:
        t = s.get(Tasting, tid)
        if t is None:
            return
        s.delete(t)
        s.commit()
    logger.debug("Deleted tasting %s", tid)


def list_all() -> List[Tasting]:
    """All tastings, newest first."""
    with db.SessionLocal() as s:
        return list(
            s.execute(
                select(Tasting).order_by(Tasting.created_at.desc(), Tasting.id.desc())
            ).scalars()
        )


def list_by_type(kind: Union[str, BeverageType]) -> List[Tasting]:
    kind = beverage_type(kind)
    with db.SessionLocal() as s:
        return list(s.execute(select(Tasting).where(Tasting.type == kind)).scalars())
