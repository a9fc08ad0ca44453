"""
Bulk export and import of the tasting collection.

The interchange document is a versioned JSON envelope::

    {"version": 1, "timestamp": "<ISO-8601>", "tastings": [...]}

Import reconciles by ``id``: known ids are merged over the stored record,
unknown ones are inserted. The whole batch runs in one transaction and each
record in its own SAVEPOINT, so a bad record is counted and skipped while
the rest still commit.
"""

import datetime
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sipscribe import db
from sipscribe.exceptions import (
    ImportFileError,
    InvalidTastingError,
    SipScribeError,
    UnsupportedExportVersionError,
)
from sipscribe.models import Tasting, attrs_from_dict
from sipscribe.records import (
    beverage_type,
    check_required,
    list_all,
    new_id,
    snapshot,
    utc_now_iso,
)

__all__ = [
    "FORMAT_VERSION",
    "ImportResult",
    "build_export",
    "export_filename",
    "export_tastings",
    "parse_import",
    "import_records",
    "import_tastings",
]

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1

PARSE_ERROR = (
    "Failed to parse import file. "
    "Please make sure it is a valid SipScribe export file."
)


@dataclass
class ImportResult:
    added: int = 0
    updated: int = 0
    errors: int = 0

    def summary(self) -> str:
        return (
            f"Import complete: {self.added} added, "
            f"{self.updated} updated, {self.errors} errors"
        )


# ── Export ────────────────────────────────────────────────────────────────────

def build_export() -> Dict[str, Any]:
    return {
        "version": FORMAT_VERSION,
        "timestamp": utc_now_iso(),
        "tastings": [t.to_dict() for t in list_all()],
    }


def export_filename(day: Optional[datetime.date] = None) -> str:
    day = day or datetime.datetime.now(datetime.timezone.utc).date()
    return f"sipscribe-export-{day.isoformat()}.json"


def export_tastings(directory: Union[str, Path] = ".") -> Path:
    """Write the full collection to ``directory`` and return the file path."""
    out_dir = Path(directory).expanduser()
    out_dir.mkdir(parents=True, exist_ok=True)
    document = build_export()
    path = out_dir / export_filename()
    path.write_text(
        json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8"
    )
    logger.info("Exported %d tastings to %s", len(document["tastings"]), path)
    return path


# ── Import ────────────────────────────────────────────────────────────────────

def parse_import(text: Union[str, bytes]) -> List[Any]:
    """
    Validate the envelope and return the raw ``tastings`` list.

    Raises ImportFileError for anything that is not an export document, and
    UnsupportedExportVersionError for a version this build cannot read.
    """
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise ImportFileError(PARSE_ERROR) from exc

    if not isinstance(data, dict) or not isinstance(data.get("tastings"), list):
        raise ImportFileError(PARSE_ERROR)

    version = data.get("version")
    if version is not None and (
        isinstance(version, bool)
        or not isinstance(version, int)
        or not 1 <= version <= FORMAT_VERSION
    ):
        raise UnsupportedExportVersionError(
            f"Unsupported export version {version!r} "
            f"(this build reads version {FORMAT_VERSION})"
        )
    return data["tastings"]


def _merge_record(s: Session, record: Any) -> bool:
    """Stage one incoming record. Returns True for an update, False for an add."""
    if not isinstance(record, dict):
        raise InvalidTastingError("Tasting record must be a JSON object")

    attrs = attrs_from_dict(record)
    tid = attrs.pop("id", None)
    if tid is not None and not isinstance(tid, str):
        raise InvalidTastingError(f"Tasting id must be a string, got {tid!r}")
    if attrs.get("type") is not None:
        attrs["type"] = beverage_type(attrs["type"])

    now = utc_now_iso()
    attrs["updated_at"] = now

    existing = s.get(Tasting, tid) if tid else None
    if existing is not None:
        attrs.pop("created_at", None)
        check_required({**snapshot(existing), **attrs})
        for key, value in attrs.items():
            setattr(existing, key, value)
        return True

    attrs["id"] = tid or new_id()
    attrs["created_at"] = attrs.get("created_at") or now
    check_required(attrs)
    s.add(Tasting(**attrs))
    return False


def import_records(records: List[Any]) -> ImportResult:
    result = ImportResult()
    with db.SessionLocal() as s:
        with s.begin():
            for record in records:
                try:
                    with s.begin_nested():
                        updated = _merge_record(s, record)
                except (SipScribeError, SQLAlchemyError, TypeError, ValueError) as exc:
                    logger.warning("Error importing tasting: %s", exc)
                    result.errors += 1
                    continue
                if updated:
                    result.updated += 1
                else:
                    result.added += 1
    logger.info(result.summary())
    return result


def import_tastings(path: Union[str, Path]) -> ImportResult:
    """Read an export file and merge it into the store."""
    try:
        text = Path(path).expanduser().read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ImportFileError(PARSE_ERROR) from exc
    except OSError as exc:
        raise ImportFileError(f"Could not read import file {path}: {exc.strerror}") from exc
    return import_records(parse_import(text))
