"""
Exception hierarchy for sipscribe.
Everything raised on purpose derives from SipScribeError; SQLAlchemy
errors from the engine propagate unchanged.
"""

__all__ = [
    "SipScribeError",
    "InvalidTastingError",
    "TastingNotFoundError",
    "ImportFileError",
    "UnsupportedExportVersionError",
]


class SipScribeError(Exception):
    """Root exception for all sipscribe errors."""


# ── Records ───────────────────────────────────────────────────────────────────

class InvalidTastingError(SipScribeError):
    """Raised when a tasting misses a required field or has an unknown type."""


class TastingNotFoundError(SipScribeError):
    """Raised when updating a tasting id that is not in the store."""

    def __init__(self, tid: str) -> None:
        super().__init__(f"Tasting {tid!r} not found")
        self.tid = tid


# ── Interchange ───────────────────────────────────────────────────────────────

class ImportFileError(SipScribeError):
    """Raised when an import document cannot be used at all; nothing is written."""


class UnsupportedExportVersionError(ImportFileError):
    """Raised when an import document declares a format version we cannot read."""
