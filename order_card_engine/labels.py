from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

DEFAULT_COLOR = '#6b7280'


class LabelKind(str, Enum):
    FLORIST = 'florist'
    DIFFICULTY = 'difficulty'
    PRODUCT_TYPE = 'productType'


@dataclass(frozen=True)
class LabelEntry:
    id: str
    name: str
    color: str = DEFAULT_COLOR

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LabelEntry":
        return cls(
            id=str(data.get('id', '')),
            name=str(data.get('name', '')),
            color=data.get('color') or DEFAULT_COLOR,
        )


FALLBACK_LABELS = {
    LabelKind.FLORIST: LabelEntry('', 'Unassigned'),
    LabelKind.DIFFICULTY: LabelEntry('', 'Easy'),
    LabelKind.PRODUCT_TYPE: LabelEntry('', ''),
}


def _entries(items: Optional[Iterable[Any]]) -> List[LabelEntry]:
    out: List[LabelEntry] = []
    for item in items or ():
        if not isinstance(item, (LabelEntry, dict)):
            raise ValueError(f"label entry must be an object, got {type(item).__name__}")
        out.append(item if isinstance(item, LabelEntry) else LabelEntry.from_dict(item))
    return out


class LabelIndex:
    """Read-only id -> label lookup over the florist, difficulty and product-type tables.

    Build one per render pass; the tables are not watched for changes.
    """

    def __init__(self, florists=None, difficulty=None, product_types=None):
        self._tables: Dict[LabelKind, List[LabelEntry]] = {
            LabelKind.FLORIST: _entries(florists),
            LabelKind.DIFFICULTY: _entries(difficulty),
            LabelKind.PRODUCT_TYPE: _entries(product_types),
        }
        self._by_id: Dict[LabelKind, Dict[str, LabelEntry]] = {}
        self._by_name: Dict[LabelKind, Dict[str, LabelEntry]] = {}
        for kind, entries in self._tables.items():
            # First entry wins on duplicate ids or names.
            by_id: Dict[str, LabelEntry] = {}
            by_name: Dict[str, LabelEntry] = {}
            for e in entries:
                by_id.setdefault(e.id, e)
                by_name.setdefault(e.name, e)
            self._by_id[kind] = by_id
            self._by_name[kind] = by_name

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "LabelIndex":
        """Build from {"florists": [...], "difficultyLabels": [...], "productTypeLabels": [...]}."""
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError("label tables must be an object")
        return cls(
            florists=data.get('florists') or data.get('users'),
            difficulty=data.get('difficultyLabels') or data.get('difficulty'),
            product_types=data.get('productTypeLabels') or data.get('productTypes'),
        )

    def entries(self, kind: LabelKind) -> List[LabelEntry]:
        return list(self._tables[LabelKind(kind)])

    def find(self, kind: LabelKind, key: Any) -> Optional[LabelEntry]:
        """Look a label up by id, then by display name."""
        if key in (None, ''):
            return None
        kind = LabelKind(kind)
        key = str(key)
        return self._by_id[kind].get(key) or self._by_name[kind].get(key)

    def resolve_label(self, kind: LabelKind, label_id: Any) -> LabelEntry:
        kind = LabelKind(kind)
        if label_id in (None, ''):
            return FALLBACK_LABELS[kind]
        return self._by_id[kind].get(str(label_id), FALLBACK_LABELS[kind])
