"""Leitner-style mastery records and the spaced-repetition selection engine."""

from __future__ import annotations

import json
import logging
import random
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import UTC, datetime

from .models import Outcome, WordHash
from .storage import StatisticsError, Storage
from .util import choose_avoiding

LOGGER = logging.getLogger(__name__)

STATS_KEY = "words-stats"
MIN_LEVEL = 0
MAX_LEVEL = 7
REPETITION_DAYS = {0: 1, 1: 2, 2: 3, 3: 5, 4: 10, 5: 30, 6: 60, 7: 90}

Clock = Callable[[], datetime]


def promote(level: int) -> int:
    return min(level + 1, MAX_LEVEL)


def demote(level: int) -> int:
    return max(level - 1, MIN_LEVEL)


def repetition_days(level: int) -> int:
    """Return how many days a word at level may rest before repeating."""
    return REPETITION_DAYS[level]


@dataclass
class Record:
    """Progress of one word."""

    last_occurred: datetime | None = None
    level: int = MIN_LEVEL

    def occurred(self, now: datetime) -> None:
        self.last_occurred = now

    def should_repeat(self, now: datetime) -> bool:
        """Return True when the word rested longer than its level allows."""
        if self.last_occurred is None or self.last_occurred > now:
            return False
        return (now - self.last_occurred).days > repetition_days(self.level)

    def to_dict(self) -> dict[str, object]:
        return {
            "last_occurred": self.last_occurred.isoformat() if self.last_occurred is not None else None,
            "level": self.level,
        }

    @classmethod
    def from_dict(cls, raw: object) -> Record:
        """Build a record from persisted JSON, defaulting unusable fields."""
        if not isinstance(raw, dict):
            return cls()
        level = _coerce_int(raw.get("level"), default=MIN_LEVEL) or MIN_LEVEL
        return cls(
            last_occurred=_coerce_datetime(raw.get("last_occurred")),
            level=max(MIN_LEVEL, min(MAX_LEVEL, level)),
        )


class Stats:
    """Mapping between word hashes and their progress, synced with storage.

    Synchronization is read-merge-write: the stored snapshot is read, local
    records are laid over it (local wins per key) and the result is written
    back and adopted. Records another session wrote for hashes this session
    has never held survive the merge.
    """

    def __init__(
        self,
        hashes: Iterable[WordHash],
        storage: Storage,
        *,
        rng: random.Random | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._storage = storage
        self._rng = rng or random.Random()
        self._clock = clock or (lambda: datetime.now(UTC))
        self._tracked: list[WordHash] = list(dict.fromkeys(hashes))
        self._last: WordHash | None = None
        self._records = self._decode(self._storage.get(STATS_KEY))
        for word_hash in self._tracked:
            self._records.setdefault(word_hash, Record())
        self.sync()

    def __len__(self) -> int:
        return len(self._tracked)

    def record(self, word_hash: WordHash) -> Record | None:
        """Return the live record for a hash."""
        return self._records.get(word_hash)

    def snapshot(self) -> dict[WordHash, Record]:
        """Return a copy of all in-memory records."""
        return {key: replace(value) for key, value in self._records.items()}

    def next(self) -> WordHash:
        """Pick the next word to ask, preferring words that are due again."""
        if not self._tracked:
            raise StatisticsError("No entries stored in statistics.")
        now = self._clock()
        candidates = [word_hash for word_hash in self._tracked if word_hash != self._last] or self._tracked
        due = [word_hash for word_hash in candidates if self._records[word_hash].should_repeat(now)]
        chosen = choose_avoiding(due or candidates, self._last, self._rng)
        self._records[chosen].occurred(now)
        self._last = chosen
        return chosen

    def passed(self, word_hash: WordHash, outcome: Outcome) -> None:
        """Move the word's level according to the outcome and persist it."""
        record = self._records.get(word_hash)
        if record is None:
            return
        if outcome is Outcome.SOLVED:
            record.level = promote(record.level)
        else:
            record.level = demote(record.level)
        self.sync()

    def level_counts(self) -> dict[int, int]:
        """Return number of tracked words per level."""
        counts = {level: 0 for level in range(MIN_LEVEL, MAX_LEVEL + 1)}
        for word_hash in self._tracked:
            counts[self._records[word_hash].level] += 1
        return counts

    def sync(self) -> None:
        """Merge in-memory records with stored ones and write back if the stored bytes differ."""
        raw = self._storage.get(STATS_KEY)
        merged = self._decode(raw)
        merged.update(self._records)
        encoded = self._encode(merged)
        if encoded != raw:
            self._storage.set(STATS_KEY, encoded)
            LOGGER.debug("Stats synced.")
        self._records = merged

    def _decode(self, raw: bytes | None) -> dict[WordHash, Record]:
        """Read stored records; absent or undecodable data means no records."""
        if raw is None:
            return {}
        try:
            payload: object = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            LOGGER.warning("Stored statistics are not decodable; starting from empty statistics.")
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Stored statistics have unexpected shape; starting from empty statistics.")
            return {}
        records: dict[WordHash, Record] = {}
        for key, value in payload.items():
            word_hash = _coerce_int(key, default=None)
            if word_hash is None:
                continue
            records[word_hash] = Record.from_dict(value)
        return records

    @staticmethod
    def _encode(records: dict[WordHash, Record]) -> bytes:
        payload = {str(key): value.to_dict() for key, value in records.items()}
        return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def _coerce_int(value: object, default: int | None = None) -> int | None:
    """Coerce value to int for stored statistics."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return default
    return default


def _coerce_datetime(value: object) -> datetime | None:
    """Parse an ISO-8601 timestamp, reading naive values as UTC."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
