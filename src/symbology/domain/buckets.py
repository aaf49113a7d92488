"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/domain/buckets.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from symbology.domain.classify import is_numeric

FALLBACK_BUCKET = 0


def bucket_of(value: Any, breaks: Sequence[float]) -> int:
    """
    Index of the first closed interval [breaks[i], breaks[i+1]] containing `value`.

    A value sitting on an interior break belongs to the lower bucket. Values
    outside [breaks[0], breaks[-1]], nulls and non-numbers map to bucket 0;
    breaks are not recomputed when the data drifts between classification and
    rendering.
    """
    if not is_numeric(value):
        return FALLBACK_BUCKET
    for i in range(len(breaks) - 1):
        if breaks[i] <= value <= breaks[i + 1]:
            return i
    return FALLBACK_BUCKET
