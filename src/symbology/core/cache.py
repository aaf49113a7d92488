"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/core/cache.py

Per-dataset style memory for one styling session.

Entries are keyed by the dataset's display identity (layer title or job id).
`put` replaces, never merges; nothing expires until the cache is dropped.

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from dataclasses import dataclass
from typing import Dict, Optional

from symbology.domain.classify import ClassMethod
from symbology.domain.style import GeometryType, StyleOptions


@dataclass(frozen=True)
class DatasetStyleEntry:
    field: str
    class_count: int
    class_method: ClassMethod
    color_scheme: str
    scheme_index: int
    breaks: tuple[float, ...]
    colors: tuple[str, ...]
    style_options: StyleOptions
    geometry_type: GeometryType


class StyleCache:
    """Last-applied classification per dataset identity (last write wins)."""

    def __init__(self) -> None:
        self._entries: Dict[Hashable, DatasetStyleEntry] = {}

    def put(self, dataset_id: Hashable, entry: DatasetStyleEntry) -> None:
        self._entries[dataset_id] = entry

    def get(self, dataset_id: Hashable) -> Optional[DatasetStyleEntry]:
        return self._entries.get(dataset_id)

    def __contains__(self, dataset_id: object) -> bool:
        return dataset_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._entries)

    def clear(self) -> None:
        self._entries.clear()
