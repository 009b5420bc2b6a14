"""Ordering of `Photo` lists for display and for renaming.

Display sorting is multi-key with per-key direction and tolerates None
values. Rename ordering is chronological: the taken date, falling back to
the file's creation time, determines each photo's sort-prefix ordinal.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from core.models import Photo


class SortService:
    """Provides sorting utilities for `Photo` lists."""

    def sort(self, photos: Iterable[Photo], sort_keys: list[tuple[str, bool]]) -> list[Photo]:
        """Return `photos` sorted by the provided keys.

        Args:
            photos: Photos to sort; the input is not modified.
            sort_keys: List of tuples (field_name, ascending).
        """
        items = list(photos)
        if not sort_keys:
            return items

        # Build a decorated list with adjusted values for per-key order
        decorated: list[tuple[tuple[Any, ...], Photo]] = []
        for item in items:
            row: list[Any] = []
            for field_name, ascending in sort_keys:
                value = getattr(item, field_name, None)
                if isinstance(value, (int, float)) and not isinstance(value, bool):
                    row.append(value if ascending else -value)
                    continue
                text = "" if value is None else _sortable_text(value)
                if ascending:
                    row.append(text)
                else:
                    # Invert code points so a plain ascending sort yields descending order
                    row.append(tuple(-ord(ch) for ch in text) + (1,))
            decorated.append((tuple(row), item))

        decorated.sort(key=lambda x: x[0])
        return [it for _, it in decorated]

    def order_for_renaming(
        self,
        photos: Iterable[Photo],
        creation_time: Callable[[str], datetime | None],
    ) -> list[Photo]:
        """Return photos in chronological order for sort-prefix assignment.

        Photos without a taken date use `creation_time(photo.path)`. Photos
        with neither go last, keeping their listing order.
        """
        decorated: list[tuple[tuple[int, datetime], int, Photo]] = []
        for index, photo in enumerate(photos):
            when = photo.taken_date or creation_time(photo.path)
            key = (0, when) if when is not None else (1, datetime.min)
            decorated.append((key, index, photo))
        decorated.sort(key=lambda x: (x[0], x[1]))
        return [photo for _, _, photo in decorated]


def _sortable_text(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value).casefold()
