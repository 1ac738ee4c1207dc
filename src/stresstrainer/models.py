"""Core domain models for stress placement practice."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from .util import uppercase_letter, vowel_positions, word_hash

WordHash = int


class Outcome(Enum):
    """Result of one answered card."""

    SOLVED = "solved"
    FAILED = "failed"


@dataclass(frozen=True)
class Group:
    """Rule membership: rule fingerprint plus the side of the rule."""

    inverted: bool
    rule: int

    def is_opposite_of(self, other: Group) -> bool:
        """Return whether other is the contrasting side of the same rule."""
        return self.rule == other.rule and self.inverted != other.inverted


@dataclass(frozen=True)
class Variant:
    """Possibly incorrect emphasis placement offered as an answer choice."""

    emphasis: int
    word: str
    detail: str | None = None

    def __str__(self) -> str:
        # `ё` is always stressed; variants must not reveal it.
        text = uppercase_letter(self.word.replace("ё", "е"), self.emphasis)
        if self.detail:
            return f"{text} {self.detail}"
        return text


@dataclass(frozen=True)
class Word:
    """Correct emphasis placement for one word."""

    text: str
    emphasis: int
    detail: str | None = None
    group: Group | None = None
    explanation: str | None = None
    hash: WordHash = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "hash", word_hash(self.text))

    @classmethod
    def new(cls, text: str, emphasis: int) -> Word:
        """Build a word from raw text; the text is lowercased."""
        return cls(text=text.lower(), emphasis=emphasis)

    def with_detail(self, detail: str) -> Word:
        """Return a copy carrying the trimmed detail text."""
        return replace(self, detail=detail.strip())

    def with_group(self, name: str, inverted: bool) -> Word:
        """Return a copy in the rule named name; the name is case-insensitive."""
        return replace(self, group=Group(inverted=inverted, rule=word_hash(name.lower())))

    def with_explanation(self, explanation: str) -> Word:
        return replace(self, explanation=explanation)

    def variants(self) -> list[Variant]:
        """Return one variant per vowel position, in position order.

        The correct position is always offered, even when the marked letter
        is not a vowel.
        """
        positions = set(vowel_positions(self.text))
        if 0 <= self.emphasis < len(self.text):
            positions.add(self.emphasis)
        return [Variant(emphasis=position, word=self.text, detail=self.detail) for position in sorted(positions)]

    def __str__(self) -> str:
        text = uppercase_letter(self.text, self.emphasis)
        if self.detail:
            return f"{text} {self.detail}"
        return text


@dataclass(frozen=True)
class Explanation:
    """Tag to text binding defined in the word database."""

    tag: str
    text: str

    @classmethod
    def new(cls, tag: str, text: str) -> Explanation:
        return cls(tag=tag.strip().lower(), text=text.strip())
