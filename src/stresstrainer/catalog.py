"""Ordered collection of parsed words with rule relation queries."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Iterator

from .models import Word, WordHash
from .util import choose_avoiding

LOGGER = logging.getLogger(__name__)


class Catalog:
    """Words keyed by hash, in insertion order."""

    def __init__(self, words: Iterable[Word] = (), rng: random.Random | None = None) -> None:
        self._words: list[Word] = []
        self._by_hash: dict[WordHash, list[Word]] = {}
        self._rng = rng or random.Random()
        self._last: Word | None = None
        for word in words:
            self.add(word)

    def add(self, word: Word) -> bool:
        """Add a word; exact duplicates are ignored."""
        same_hash = self._by_hash.setdefault(word.hash, [])
        if word in same_hash:
            LOGGER.debug("Skipping duplicate word entry: %s", word)
            return False
        same_hash.append(word)
        self._words.append(word)
        return True

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[Word]:
        return iter(self._words)

    def hashes(self) -> list[WordHash]:
        """Return unique word hashes in first-seen order."""
        return list(self._by_hash)

    def words_for(self, word_hash: WordHash) -> list[Word]:
        """Return every word sharing a hash (homographs)."""
        return list(self._by_hash.get(word_hash, []))

    def get(self, word_hash: WordHash) -> Word | None:
        """Return the first word with the hash, if any."""
        same_hash = self._by_hash.get(word_hash)
        if not same_hash:
            return None
        return same_hash[0]

    def next(self) -> Word:
        """Return a random word, never the same word twice in a row."""
        if not self._words:
            raise LookupError("Word list is empty.")
        word = choose_avoiding(self._words, self._last, self._rng)
        self._last = word
        return word

    def seealso(self, word: Word) -> list[Word]:
        """Return other words that follow the same side of the same rule."""
        group = word.group
        if group is None:
            return []
        return [other for other in self._words if other.group == group and other != word]

    def opposite(self, word: Word) -> list[Word]:
        """Return other words on the contrasting side of the same rule."""
        group = word.group
        if group is None:
            return []
        return [
            other
            for other in self._words
            if other.group is not None and other.group.is_opposite_of(group) and other != word
        ]
