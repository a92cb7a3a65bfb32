from __future__ import annotations

import logging
import sqlite3
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS score (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date INTEGER NOT NULL,
        name TEXT NOT NULL,
        score INTEGER NOT NULL,
        time INTEGER NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS index_score_score_time ON score (score, time)",
)

_ORDER = "ORDER BY score, time, id"


class StorageError(RuntimeError):
    pass


class ConflictError(StorageError):
    pass


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MS = timedelta(milliseconds=1)


def _normalize_date(d: datetime) -> datetime:
    """UTC, truncated to the millisecond precision the table stores."""
    if d.tzinfo is None:
        d = d.replace(tzinfo=timezone.utc)
    d = d.astimezone(timezone.utc)
    return d.replace(microsecond=d.microsecond // 1000 * 1000)


def _to_millis(d: datetime) -> int:
    return (_normalize_date(d) - _EPOCH) // _MS


def _from_millis(ms: int) -> datetime:
    return _EPOCH + timedelta(milliseconds=ms)


@dataclass(frozen=True)
class ScoreRecord:
    """One finished game. `time` is elapsed seconds."""

    name: str
    score: int
    time: int
    date: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc).replace(microsecond=0))
    id: int | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Player name must not be blank.")
        if self.score < 0 or self.time < 0:
            raise ValueError("score and time must be non-negative.")
        object.__setattr__(self, "date", _normalize_date(self.date))

    @staticmethod
    def from_row(row: tuple[int, int, str, int, int]) -> "ScoreRecord":
        rid, date, name, score, time = row
        return ScoreRecord(id=rid, date=_from_millis(date), name=name, score=score, time=time)


@dataclass(frozen=True)
class SaveResult:
    ok: bool
    message: str
    record: ScoreRecord | None = None


Callback = Callable[[list[ScoreRecord]], None]


class Subscription:
    def __init__(self, view: "LiveView", callback: Callback) -> None:
        self._view = view
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self._view._detach(self)


class LiveView:
    """A query whose subscribers get the current rows, then every change."""

    def __init__(self, store: "ScoreStore", where: str = "", params: tuple[object, ...] = ()) -> None:
        self._store = store
        self._where = where
        self._params = params
        self._subs: list[Subscription] = []

    def snapshot(self) -> list[ScoreRecord]:
        sql = f"SELECT id, date, name, score, time FROM score {self._where} {_ORDER}"
        return [ScoreRecord.from_row(r) for r in self._store._query(sql, self._params)]

    def subscribe(self, callback: Callback) -> Subscription:
        sub = Subscription(self, callback)
        with self._store._lock:
            self._subs.append(sub)
            self._store._views.append(self)
            callback(self.snapshot())
        return sub

    def _detach(self, sub: Subscription) -> None:
        with self._store._lock:
            if sub in self._subs:
                self._subs.remove(sub)
            if self in self._store._views:
                self._store._views.remove(self)

    def _deliver(self) -> None:
        if not self._subs:
            return
        rows = self.snapshot()
        for sub in list(self._subs):
            if not sub.active:
                continue
            try:
                sub.callback(list(rows))
            except Exception:
                logger.exception("Score subscriber failed")


class ScoreStore:
    """Local score history backed by sqlite.

    Pass a file path, or ":memory:" for a throwaway store.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = path
        # RLock: live-view callbacks may read the store while a write notifies.
        self._lock = threading.RLock()
        self._views: list[LiveView] = []
        try:
            if isinstance(path, Path):
                path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(path), check_same_thread=False)
            with self._conn:
                for stmt in _SCHEMA:
                    self._conn.execute(stmt)
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Cannot open score store at {path}: {e}") from e

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __enter__(self) -> "ScoreStore":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # -------- Writes --------
    def add(self, record: ScoreRecord) -> ScoreRecord:
        with self._lock:
            try:
                with self._conn:
                    cur = self._conn.execute(
                        "INSERT INTO score (id, date, name, score, time) VALUES (?, ?, ?, ?, ?)",
                        (record.id, _to_millis(record.date), record.name, record.score, record.time),
                    )
            except sqlite3.IntegrityError as e:
                raise ConflictError(f"Score id {record.id} already exists.") from e
            except sqlite3.Error as e:
                raise StorageError(f"Cannot add score: {e}") from e
            saved = replace(record, id=cur.lastrowid)
            logger.debug("Score added: %s", saved)
            self._notify()
            return saved

    def add_batch(self, records: Iterable[ScoreRecord]) -> list[ScoreRecord]:
        return [self.add(r) for r in records]

    def try_add(self, record: ScoreRecord) -> SaveResult:
        try:
            saved = self.add(record)
        except StorageError as e:
            logger.exception("Error adding score to database")
            return SaveResult(ok=False, message=str(e))
        return SaveResult(ok=True, message="Score added successfully.", record=saved)

    def remove(self, record: ScoreRecord) -> int:
        if record.id is None:
            return 0
        return self._delete("WHERE id = ?", (record.id,))

    def remove_player(self, name: str) -> int:
        return self._delete("WHERE name = ?", (name,))

    def clear_all(self) -> int:
        return self._delete("", ())

    def _delete(self, where: str, params: tuple[object, ...]) -> int:
        with self._lock:
            try:
                with self._conn:
                    cur = self._conn.execute(f"DELETE FROM score {where}", params)
            except sqlite3.Error as e:
                raise StorageError(f"Cannot delete scores: {e}") from e
            removed = cur.rowcount
            if removed > 0:
                self._notify()
            return removed

    # -------- Reads --------
    def all_scores(self) -> LiveView:
        return LiveView(self)

    def scores_for_player(self, name: str) -> LiveView:
        return LiveView(self, "WHERE name = ?", (name,))

    def _query(self, sql: str, params: tuple[object, ...]) -> list[tuple[int, int, str, int, int]]:
        with self._lock:
            try:
                return self._conn.execute(sql, params).fetchall()
            except sqlite3.Error as e:
                raise StorageError(f"Cannot read scores: {e}") from e

    def _notify(self) -> None:
        # A view subscribed more than once is listed once per subscription.
        for view in dict.fromkeys(self._views):
            view._deliver()
