"""
--------------------------------------------------------------------------------
<symbology project>
src/symbology/domain/classify.py

Class-break computation over one numeric attribute.

Methods
-------
equalInterval   (max - min) / n wide bins, distribution ignored.
quantile        breaks picked from the sorted sample at round(i/n * (N-1)).
naturalBreaks   fixed linear approximation:
                    step = (max - min) / (2n)
                    breaks[i] = min + step * (2i + 1)       for 0 < i < n
                This is *not* a variance-minimising Jenks partition and is kept
                that way so legends match previously published maps.

All methods return n + 1 non-decreasing breaks with breaks[0] == min(sample)
and breaks[n] == max(sample) exactly.

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from enum import Enum
from numbers import Real
from typing import Any

import numpy as np

from symbology.core.errors import ClassificationError, EmptySampleError
from symbology.domain.palette import round_half_up


class ClassMethod(str, Enum):
    EQUAL_INTERVAL = "equalInterval"
    QUANTILE = "quantile"
    NATURAL_BREAKS = "naturalBreaks"

    @property
    def label(self) -> str:
        # equalInterval -> "Equal Interval"
        words = []
        for ch in self.value:
            if ch.isupper():
                words.append(" ")
            words.append(ch)
        text = "".join(words)
        return text[:1].upper() + text[1:]

    @property
    def description(self) -> str:
        return METHOD_DESCRIPTIONS[self]


METHOD_DESCRIPTIONS: dict[ClassMethod, str] = {
    ClassMethod.EQUAL_INTERVAL: "Divides the range of values into equal sized intervals. Best for evenly distributed data.",
    ClassMethod.QUANTILE: "Creates classes with equal number of features in each. Good for unevenly distributed data.",
    ClassMethod.NATURAL_BREAKS: "Groups similar values and maximizes differences between classes. Best for clustered data.",
}

MIN_CLASSES = 2
MAX_CLASSES = 10


def is_numeric(value: Any) -> bool:
    """True for finite real numbers (bools, NaN and infinities excluded)."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(float(value))


def numeric_fields(features: Sequence[Any]) -> list[str]:
    """
    Attribute names usable for classification.

    Only the first feature is inspected: every property other than `geometry`
    whose value there is numeric.
    """
    if not features:
        return []
    props = features[0].get_properties()
    return [k for k, v in props.items() if k != "geometry" and is_numeric(v)]


def extract_sample(features: Iterable[Any], field: str) -> list[float]:
    """ValueSample for `field`: numeric values in feature order, nulls dropped."""
    return [float(v) for v in (f.get(field) for f in features) if is_numeric(v)]


def coerce_method(method: ClassMethod | str) -> ClassMethod:
    if isinstance(method, ClassMethod):
        return method
    try:
        return ClassMethod(method)
    except ValueError:
        valid = ", ".join(m.value for m in ClassMethod)
        raise ClassificationError(f"Unknown classification method {method!r} (valid: {valid})") from None


def classify(sample: Sequence[float], count: int, method: ClassMethod | str = ClassMethod.EQUAL_INTERVAL) -> list[float]:
    """Compute `count + 1` class breaks for `sample` with the given method."""
    method = coerce_method(method)
    if isinstance(count, bool) or not isinstance(count, int) or count < MIN_CLASSES:
        raise ClassificationError(f"Class count must be an integer >= {MIN_CLASSES}, got {count!r}")
    values = np.asarray(list(sample), dtype=float)
    if values.size == 0:
        raise EmptySampleError("Cannot classify an empty sample (no usable numeric values)")

    vmin = float(values.min())
    vmax = float(values.max())

    if method is ClassMethod.EQUAL_INTERVAL:
        interval = (vmax - vmin) / count
        breaks = [vmin + interval * i for i in range(count)]
    elif method is ClassMethod.QUANTILE:
        ordered = np.sort(values)
        n = ordered.size
        breaks = [vmin]
        for i in range(1, count):
            breaks.append(float(ordered[round_half_up(i / count * (n - 1))]))
    else:
        step = (vmax - vmin) / (count * 2)
        breaks = [vmin]
        for i in range(1, count):
            breaks.append(vmin + step * (i * 2 + 1))
    # last break pinned to the sample maximum (equal-interval float drift)
    breaks.append(vmax)
    return breaks
