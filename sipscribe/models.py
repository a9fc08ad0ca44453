from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sipscribe.db import Base


class BeverageType(str, Enum):
    WINE = "wine"
    WHISKY = "whisky"


MASH_BILL_GRAINS = ("rye", "corn", "barley", "wheat")

# JSON key -> column attribute, in export order
FIELD_MAP: Dict[str, str] = {
    "id": "id",
    "type": "type",
    "name": "name",
    "imageBase64": "image_base64",
    "noseNotes": "nose_notes",
    "palateNotes": "palate_notes",
    "finishNotes": "finish_notes",
    "colorNotes": "color_notes",
    "pairingSuggestions": "pairing_suggestions",
    "aromaScore": "aroma_score",
    "palateScore": "palate_score",
    "finishScore": "finish_score",
    "overallScore": "overall_score",
    "vintage": "vintage",
    "varietal": "varietal",
    "region": "region",
    "distillery": "distillery",
    "ageStatement": "age_statement",
    "mashBill": "mash_bill",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}
ATTR_MAP: Dict[str, str] = {attr: key for key, attr in FIELD_MAP.items()}

REQUIRED_FIELDS: List[str] = [
    "type",
    "name",
    "nose_notes",
    "palate_notes",
    "finish_notes",
    "color_notes",
    "pairing_suggestions",
    "aroma_score",
    "palate_score",
    "finish_score",
    "overall_score",
]

WINE_FIELDS = ("vintage", "varietal", "region")
WHISKY_FIELDS = ("distillery", "age_statement", "mash_bill")
GROUP_FIELDS: Dict[str, tuple] = {"wine": WINE_FIELDS, "whisky": WHISKY_FIELDS}

INTEGER_FIELDS = ("aroma_score", "palate_score", "finish_score", "vintage", "age_statement")


class Tasting(Base):
    __tablename__ = "tastings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    type: Mapped[str] = mapped_column(String(16), index=True)
    name: Mapped[str] = mapped_column(String(255), index=True)

    image_base64: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # data URL
    nose_notes: Mapped[str] = mapped_column(Text)
    palate_notes: Mapped[str] = mapped_column(Text)
    finish_notes: Mapped[str] = mapped_column(Text)
    color_notes: Mapped[str] = mapped_column(Text)
    pairing_suggestions: Mapped[str] = mapped_column(Text)

    aroma_score: Mapped[int] = mapped_column(Integer)
    palate_score: Mapped[int] = mapped_column(Integer)
    finish_score: Mapped[int] = mapped_column(Integer)
    overall_score: Mapped[float] = mapped_column(Float, index=True)

    # wine
    vintage: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    varietal: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    region: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)

    # whisky
    distillery: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    age_statement: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    mash_bill: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    # ISO-8601 UTC strings, sortable as text
    created_at: Mapped[str] = mapped_column(String(32), index=True)
    updated_at: Mapped[str] = mapped_column(String(32))

    @property
    def title(self) -> str:
        parts: List[str] = [f"[{self.type}]", self.name]
        extra: List[str] = []
        if self.type == BeverageType.WINE.value:
            if self.vintage:
                extra.append(str(self.vintage))
            if self.region:
                extra.append(self.region)
        else:
            if self.distillery:
                extra.append(self.distillery)
            if self.age_statement:
                extra.append(f"{self.age_statement} yo")
        if extra:
            parts.append("(" + ", ".join(extra) + ")")
        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Interchange form: camelCase keys, unset optional fields omitted."""
        out: Dict[str, Any] = {}
        for key, attr in FIELD_MAP.items():
            value = getattr(self, attr)
            if value is None:
                continue
            out[key] = value
        return out

    def __repr__(self) -> str:
        return f"<Tasting(id={self.id!r}, type={self.type!r}, name={self.name!r})>"


def attrs_from_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """Map an interchange dict onto column attributes; unknown keys are dropped."""
    return {FIELD_MAP[key]: value for key, value in data.items() if key in FIELD_MAP}
