from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

SOURCE_SYSTEM = "system"
SOURCE_USER = "user"
SOURCE_MISSING = "missing"


@dataclass(slots=True, frozen=True)
class Label:
    id: str
    name: str

    @classmethod
    def from_api(cls, item: Mapping[str, Any]) -> "Label":
        return cls(id=item.get("id") or "", name=item.get("name") or "")


@dataclass(slots=True, frozen=True)
class LabelResolution:
    """Outcome of resolving a label name; ``label_id`` is None when not found."""

    label_id: Optional[str]
    source: str

    @property
    def found(self) -> bool:
        return self.label_id is not None

    @classmethod
    def missing(cls) -> "LabelResolution":
        return cls(label_id=None, source=SOURCE_MISSING)
