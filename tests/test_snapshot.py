from __future__ import annotations

import threading

from decoding_qc.snapshot import SnapshotStore


def test_snapshot_store_returns_none_until_first_commit() -> None:
    store = SnapshotStore()
    assert store.get("General/LinkErrorPlots") is None
    assert "General/LinkErrorPlots" not in store

    store.commit("General/LinkErrorPlots", [1, 2, 3])

    assert store.get("General/LinkErrorPlots") == (1, 2, 3)
    assert len(store) == 1


def test_snapshot_commit_overwrites_and_copies_input() -> None:
    store = SnapshotStore()
    bins = [1, 2, 3]
    store.commit("a", bins)
    bins[0] = 99
    assert store.get("a") == (1, 2, 3)

    store.commit("a", [4, 5, 6])
    assert store.get("a") == (4, 5, 6)


def test_snapshot_series_are_independent() -> None:
    store = SnapshotStore()
    store.commit("a", [1])
    store.commit("b", [2])

    assert store.names() == ["a", "b"]
    assert store.get("a") == (1,)
    store.clear()
    assert len(store) == 0


def test_snapshot_store_tolerates_concurrent_commits() -> None:
    store = SnapshotStore()

    def _commit(offset: int) -> None:
        for value in range(200):
            store.commit(f"series-{offset}", [value, value])

    threads = [threading.Thread(target=_commit, args=(offset,)) for offset in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.names() == [f"series-{offset}" for offset in range(4)]
    assert all(store.get(name) == (199, 199) for name in store.names())
