"""Application service tying the word catalog to spaced-repetition statistics."""

from __future__ import annotations

import logging
import random

from .catalog import Catalog
from .content_loader import ParseError, load_words, parse
from .models import Outcome, Variant, Word
from .progress import Clock, Stats
from .storage import Storage
from .util import choose_avoiding

LOGGER = logging.getLogger(__name__)


class TrainerService:
    """Coordinates word selection, answers and persisted progress."""

    def __init__(
        self,
        storage: Storage,
        source: str | None = None,
        *,
        rng: random.Random | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Parse words (bundled when source is None) and sync statistics."""
        if source is None:
            words, errors = load_words()
        else:
            words, errors = parse(source)
        self.errors: list[ParseError] = errors
        _log_errors(errors)
        self._rng = rng or random.Random()
        self.storage = storage
        self.catalog = Catalog(words, rng=self._rng)
        self.stats = Stats(self.catalog.hashes(), storage, rng=self._rng, clock=clock)
        self._last_word: Word | None = None

    def next(self) -> Word:
        """Return the next word to ask, never the previous one when avoidable."""
        if not len(self.catalog):
            raise LookupError("Word list is empty.")
        homographs = self.catalog.words_for(self.stats.next())
        word = choose_avoiding(homographs, self._last_word, self._rng)
        self._last_word = word
        return word

    def variants(self, word: Word) -> list[Variant]:
        return word.variants()

    def seealso(self, word: Word) -> list[Word]:
        return self.catalog.seealso(word)

    def opposite(self, word: Word) -> list[Word]:
        return self.catalog.opposite(word)

    def answer(self, word: Word, emphasis: int) -> Outcome:
        """Check a chosen emphasis and record the outcome."""
        outcome = Outcome.SOLVED if emphasis == word.emphasis else Outcome.FAILED
        self.passed(word, outcome)
        return outcome

    def skip(self, word: Word) -> Outcome:
        """Record a skipped word as failed."""
        self.passed(word, Outcome.FAILED)
        return Outcome.FAILED

    def passed(self, word: Word, outcome: Outcome) -> None:
        self.stats.passed(word.hash, outcome)

    def level_summary(self) -> dict[int, int]:
        """Return number of words per mastery level."""
        return self.stats.level_counts()

    def close(self) -> None:
        """Close resources."""
        close = getattr(self.storage, "close", None)
        if close is not None:
            close()


def _log_errors(errors: list[ParseError]) -> None:
    """Report parse diagnostics without aborting startup."""
    if not errors:
        LOGGER.info("Word data loaded with no errors.")
        return
    LOGGER.warning("Word data loaded with %d errors.", len(errors))
    for error in errors:
        LOGGER.warning("%s", error)
