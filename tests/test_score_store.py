from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from pexeso.services.scores import ConflictError, ScoreRecord, ScoreStore, StorageError


@pytest.fixture
def store():
    s = ScoreStore(":memory:")
    yield s
    s.close()


def _key(rows: list[ScoreRecord]) -> list[tuple[int, int]]:
    return [(r.score, r.time) for r in rows]


def test_all_scores_sorted_by_score_then_time(store: ScoreStore) -> None:
    store.add(ScoreRecord(name="Alice", score=3, time=50))
    store.add(ScoreRecord(name="Bob", score=3, time=40))
    store.add(ScoreRecord(name="Cyril", score=5, time=10))

    assert _key(store.all_scores().snapshot()) == [(3, 40), (3, 50), (5, 10)]


def test_add_round_trip(store: ScoreStore) -> None:
    when = datetime(2024, 5, 17, 12, 30, 15, tzinfo=timezone.utc)
    saved = store.add(ScoreRecord(name="Alice", score=12, time=95, date=when))

    assert saved.id is not None
    (row,) = store.all_scores().snapshot()
    assert row == saved
    assert (row.name, row.score, row.time, row.date) == ("Alice", 12, 95, when)


def test_ids_are_unique_and_increasing(store: ScoreStore) -> None:
    saved = store.add_batch(ScoreRecord(name="Alice", score=i, time=i) for i in range(5))
    ids = [r.id for r in saved]
    assert ids == sorted(ids)
    assert len(set(ids)) == 5


def test_forced_duplicate_id_conflicts(store: ScoreStore) -> None:
    first = store.add(ScoreRecord(name="Alice", score=1, time=1))
    with pytest.raises(ConflictError):
        store.add(ScoreRecord(name="Bob", score=2, time=2, id=first.id))


def test_add_batch_fails_fast_on_conflict(store: ScoreStore) -> None:
    taken = store.add(ScoreRecord(name="Alice", score=1, time=1))
    batch = [
        ScoreRecord(name="Bob", score=2, time=2),
        ScoreRecord(name="Bob", score=3, time=3, id=taken.id),
        ScoreRecord(name="Bob", score=4, time=4),
    ]
    with pytest.raises(ConflictError):
        store.add_batch(batch)
    assert _key(store.scores_for_player("Bob").snapshot()) == [(2, 2)]


def test_remove_single_record(store: ScoreStore) -> None:
    rec = store.add(ScoreRecord(name="Alice", score=1, time=1))
    assert store.remove(rec) == 1
    assert store.remove(rec) == 0
    assert store.all_scores().snapshot() == []


def test_remove_player_is_idempotent(store: ScoreStore) -> None:
    store.add(ScoreRecord(name="Alice", score=1, time=1))
    store.add(ScoreRecord(name="Alice", score=2, time=2))
    store.add(ScoreRecord(name="Bob", score=3, time=3))

    assert store.remove_player("Alice") == 2
    assert store.scores_for_player("Alice").snapshot() == []
    assert store.remove_player("Alice") == 0
    assert [r.name for r in store.all_scores().snapshot()] == ["Bob"]


def test_clear_all(store: ScoreStore) -> None:
    store.add_batch([ScoreRecord(name="A", score=1, time=1), ScoreRecord(name="B", score=1, time=1)])
    assert store.clear_all() == 2
    assert store.all_scores().snapshot() == []


def test_player_view_uses_same_order(store: ScoreStore) -> None:
    store.add(ScoreRecord(name="Alice", score=9, time=5))
    store.add(ScoreRecord(name="Alice", score=4, time=7))
    store.add(ScoreRecord(name="Bob", score=1, time=1))
    assert _key(store.scores_for_player("Alice").snapshot()) == [(4, 7), (9, 5)]


def test_live_view_delivers_current_then_changes(store: ScoreStore) -> None:
    store.add(ScoreRecord(name="Alice", score=5, time=5))
    deliveries: list[list[tuple[int, int]]] = []

    sub = store.all_scores().subscribe(lambda rows: deliveries.append(_key(rows)))
    assert deliveries == [[(5, 5)]]

    store.add(ScoreRecord(name="Bob", score=2, time=9))
    assert deliveries[-1] == [(2, 9), (5, 5)]

    store.remove_player("Nobody")
    assert len(deliveries) == 2

    store.remove_player("Alice")
    assert deliveries[-1] == [(2, 9)]

    sub.unsubscribe()
    sub.unsubscribe()
    store.clear_all()
    assert len(deliveries) == 3


def test_player_view_only_sees_that_player(store: ScoreStore) -> None:
    deliveries: list[list[str]] = []
    store.scores_for_player("Alice").subscribe(lambda rows: deliveries.append([r.name for r in rows]))

    store.add(ScoreRecord(name="Bob", score=1, time=1))
    store.add(ScoreRecord(name="Alice", score=1, time=1))

    assert deliveries == [[], [], ["Alice"]]


def test_scores_persist_across_reopen(tmp_path: Path) -> None:
    db = tmp_path / "userdata" / "scores.db"
    with ScoreStore(db) as s:
        s.add(ScoreRecord(name="Alice", score=7, time=30))
    with ScoreStore(db) as s:
        (row,) = s.all_scores().snapshot()
    assert (row.name, row.score, row.time) == ("Alice", 7, 30)


def test_corrupt_file_raises_storage_error(tmp_path: Path) -> None:
    db = tmp_path / "scores.db"
    db.write_bytes(b"this is definitely not a sqlite database" * 64)
    with pytest.raises(StorageError):
        ScoreStore(db)


def test_try_add_reports_failure_instead_of_raising() -> None:
    s = ScoreStore(":memory:")
    s.close()
    res = s.try_add(ScoreRecord(name="Alice", score=1, time=1))
    assert not res.ok
    assert res.record is None


def test_try_add_success(store: ScoreStore) -> None:
    res = store.try_add(ScoreRecord(name="Alice", score=1, time=1))
    assert res.ok
    assert res.record is not None and res.record.id is not None


def test_record_validation() -> None:
    with pytest.raises(ValueError):
        ScoreRecord(name="  ", score=1, time=1)
    with pytest.raises(ValueError):
        ScoreRecord(name="Alice", score=-1, time=1)


def test_sub_second_and_naive_dates_round_trip(store: ScoreStore) -> None:
    precise = datetime(2024, 5, 17, 12, 30, 15, 123456, tzinfo=timezone.utc)
    saved = store.add(ScoreRecord(name="Alice", score=1, time=1, date=precise))
    naive = datetime(2024, 5, 17, 12, 30, 15)
    saved_naive = store.add(ScoreRecord(name="Bob", score=2, time=2, date=naive))

    rows = store.all_scores().snapshot()
    assert rows == [saved, saved_naive]
    assert saved.date.microsecond == 123000
    assert saved_naive.date == naive.replace(tzinfo=timezone.utc)


def test_failing_subscriber_does_not_break_writes(store: ScoreStore) -> None:
    def explode(rows: list[ScoreRecord]) -> None:
        if rows:
            raise RuntimeError("render failed")

    deliveries: list[list[str]] = []
    store.all_scores().subscribe(explode)
    store.all_scores().subscribe(lambda rows: deliveries.append([r.name for r in rows]))

    res = store.try_add(ScoreRecord(name="Alice", score=1, time=1))
    assert res.ok
    store.add_batch([ScoreRecord(name="Bob", score=2, time=2), ScoreRecord(name="Cyril", score=3, time=3)])

    assert deliveries == [[], ["Alice"], ["Alice", "Bob"], ["Alice", "Bob", "Cyril"]]
    assert len(store.all_scores().snapshot()) == 3
