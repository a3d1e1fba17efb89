from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd

from decoding_qc.annotator import DisplayLabel

LOGGER = logging.getLogger(__name__)


@dataclass
class MonitorObject:
    """Named object owned by the host; labels are attached back onto it."""

    name: str
    data: Any
    labels: list[DisplayLabel] = field(default_factory=list)


@dataclass(frozen=True)
class MonitoringSeries:
    name: str
    bins: tuple[int, ...]

    def __len__(self) -> int:
        return len(self.bins)

    @property
    def maximum(self) -> int:
        return max(self.bins) if self.bins else 0

    @property
    def total(self) -> int:
        return sum(self.bins)


def _as_count_array(payload: Any) -> np.ndarray | None:
    # Integer counters stay int64; converting through float loses counts above 2**53.
    if isinstance(payload, pd.Series):
        if pd.api.types.is_integer_dtype(payload.dtype):
            return payload.to_numpy(dtype=np.int64)
        return pd.to_numeric(payload, errors="coerce").to_numpy(dtype=float)
    if isinstance(payload, np.ndarray) or (
        isinstance(payload, Sequence) and not isinstance(payload, (str, bytes))
    ):
        try:
            values = np.asarray(payload)
            if values.dtype.kind in "iu":
                return values.astype(np.int64)
            return values.astype(float)
        except (TypeError, ValueError, OverflowError):
            return None
    return None


def read_series(obj: MonitorObject, n_kinds: int | None) -> MonitoringSeries | None:
    """Interpret a host object as a binned count vector.

    Anything that is not a one-dimensional, finite, non-negative numeric vector is
    logged and rejected with ``None``. When ``n_kinds`` is given the vector must
    also have exactly that many bins; aggregate plots pass ``None``.
    """
    values = _as_count_array(obj.data)
    if values is None:
        LOGGER.error(
            "Could not read %s as binned counts (payload type %s)",
            obj.name,
            type(obj.data).__name__,
        )
        return None
    if values.ndim != 1:
        LOGGER.error("Could not read %s as binned counts (shape %s)", obj.name, values.shape)
        return None
    if n_kinds is not None and values.size != n_kinds:
        LOGGER.error(
            "Could not read %s as binned counts (%d bins, expected %d)",
            obj.name,
            values.size,
            n_kinds,
        )
        return None
    if not np.all(np.isfinite(values)) or np.any(values < 0):
        LOGGER.error("Could not read %s as binned counts (non-finite or negative)", obj.name)
        return None
    if values.dtype.kind == "f":
        values = np.rint(values).astype(np.int64)
    return MonitoringSeries(name=obj.name, bins=tuple(int(value) for value in values))
