from __future__ import annotations

import threading
from collections.abc import Iterable


class SnapshotStore:
    """Bin vectors committed at the end of the previous cycle, keyed by series name.

    The store is only written by the cycle that owns it, once per series and after
    that series has been evaluated. A lock serialises reads and commits so a host
    that overlaps cycles cannot observe a half-written mapping.
    """

    def __init__(self) -> None:
        self._bins: dict[str, tuple[int, ...]] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> tuple[int, ...] | None:
        with self._lock:
            return self._bins.get(name)

    def commit(self, name: str, bins: Iterable[int]) -> None:
        frozen = tuple(int(value) for value in bins)
        with self._lock:
            self._bins[name] = frozen

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._bins)

    def clear(self) -> None:
        with self._lock:
            self._bins.clear()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._bins

    def __len__(self) -> int:
        with self._lock:
            return len(self._bins)
