"""Text and selection helpers shared by the parser, model and statistics."""

from __future__ import annotations

import hashlib
import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

VOWELS = frozenset("ауоиэыяюеё")


def word_hash(text: str) -> int:
    """Return a stable 64-bit fingerprint of text."""
    digest = hashlib.blake2b(text.encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "big")


def first_uppercase_position(text: str) -> int | None:
    """Return codepoint index of the first uppercase letter."""
    for index, char in enumerate(text):
        if char.isupper():
            return index
    return None


def vowel_positions(text: str) -> list[int]:
    """Return codepoint indexes of all vowels in ascending order."""
    return [index for index, char in enumerate(text.lower()) if char in VOWELS]


def uppercase_letter(text: str, position: int) -> str:
    """Return text with the letter at position uppercased."""
    if not 0 <= position < len(text):
        return text
    return text[:position] + text[position].upper() + text[position + 1 :]


def subslice_tags(text: str, opening: str, closing: str) -> str | None:
    """Return the run of text between markers, or None when it is empty.

    With empty ``opening`` the run starts at the beginning of ``text``;
    otherwise it starts right after the first opening marker. The run ends
    before the next closing marker or at the end of ``text``. A missing
    opening marker yields None.
    """
    start = 0
    if opening:
        found = [index for index in (text.find(marker) for marker in opening) if index >= 0]
        if not found:
            return None
        start = min(found) + 1
    end = len(text)
    for index in range(start, len(text)):
        if text[index] in closing:
            end = index
            break
    result = text[start:end]
    return result or None


def choose_avoiding(items: Sequence[T], previous: T | None, rng: random.Random) -> T:
    """Pick a random item that differs from previous whenever possible."""
    if not items:
        raise LookupError("Nothing to choose from.")
    if previous is None or len(items) == 1:
        return rng.choice(items)
    candidates = [item for item in items if item != previous]
    if not candidates:
        return rng.choice(items)
    return rng.choice(candidates)
