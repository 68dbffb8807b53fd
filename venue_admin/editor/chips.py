# venue_admin/editor/chips.py
from typing import Iterable, Iterator, List, Optional, Union


class ChipEditor:
    """Ordered set of strings behind tag inputs (genres, amenities, cuisines, benefits)."""

    def __init__(self, items: Optional[Iterable[str]] = None):
        self._items: List[str] = []
        if items:
            self.extend(items)

    @staticmethod
    def parse(raw: Union[str, Iterable[str], None]) -> List[str]:
        """Accepts a list or a comma separated string ("jazz, soul")"""
        if raw is None:
            return []
        if isinstance(raw, str):
            return [x for x in raw.split(",")]
        return list(raw)

    def add(self, value: Optional[str]) -> bool:
        value = "" if value is None else str(value).strip()
        if not value or value in self._items:
            return False
        self._items.append(value)
        return True

    def remove(self, value: str) -> bool:
        if value not in self._items:
            return False
        self._items.remove(value)
        return True

    def extend(self, values: Iterable[str]) -> int:
        return sum(1 for v in values if self.add(v))

    def replace(self, raw: Union[str, Iterable[str], None]) -> None:
        self._items = []
        self.extend(self.parse(raw))

    def clear(self) -> None:
        self._items = []

    @property
    def items(self) -> List[str]:
        return list(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, value: object) -> bool:
        return value in self._items

    def __repr__(self):
        return f"<ChipEditor({self._items!r})>"
