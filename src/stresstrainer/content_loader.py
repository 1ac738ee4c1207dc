"""Parse the line-oriented word database into words and line errors."""

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from pathlib import Path

from .models import Explanation, Word
from .util import first_uppercase_position, subslice_tags

CONTENT_PACKAGE = "stresstrainer.content"
CONTENT_FILE = "words.txt"

COMMENT_PREFIX = "//"
EXPLANATION_PREFIX = ">"
GROUP_MARKERS = ":!"
EXPLANATION_MARKERS = "><"
DETAIL_STOP = GROUP_MARKERS + EXPLANATION_MARKERS


@dataclass(frozen=True)
class EmphasisNotFound:
    token: str

    def __str__(self) -> str:
        return f"Word '{self.token}' must contain emphasis specified by an uppercase letter."


@dataclass(frozen=True)
class MoreThanOneGroup:
    word: str

    def __str__(self) -> str:
        return f"Word '{self.word}' has more than one group; only one is allowed."


@dataclass(frozen=True)
class ExplanationNotDefined:
    tag: str
    word: str

    def __str__(self) -> str:
        return f"Explanation '{self.tag}' used by word '{self.word}' is not defined above it."


@dataclass(frozen=True)
class DelimiterNotFound:
    def __str__(self) -> str:
        return "Explanation definition must separate tag and text with ':'."


WordLineError = EmphasisNotFound | MoreThanOneGroup | ExplanationNotDefined
ErrorCause = WordLineError | DelimiterNotFound


@dataclass(frozen=True)
class ParseError:
    """One failed line of the word database."""

    line: int
    cause: ErrorCause

    def __str__(self) -> str:
        return f"{self.line}: {self.cause}"


class _LineFailure(Exception):
    """Carry a line error out of nested parsing helpers."""

    def __init__(self, cause: ErrorCause) -> None:
        super().__init__(str(cause))
        self.cause = cause


def parse(text: str, explanations: dict[str, str] | None = None) -> tuple[list[Word], list[ParseError]]:
    """Parse database text, collecting every line's outcome independently.

    Explanation definitions are visible only to the lines that follow them.
    Line numbers in errors are 1-based.
    """
    known = dict(explanations or {})
    words: list[Word] = []
    errors: list[ParseError] = []
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue
        try:
            if line.startswith(EXPLANATION_PREFIX):
                explanation = _parse_explanation(line[len(EXPLANATION_PREFIX) :])
                known[explanation.tag] = explanation.text
            else:
                words.append(_parse_word(line, known))
        except _LineFailure as exc:
            errors.append(ParseError(line=number, cause=exc.cause))
    return words, errors


def _parse_explanation(line: str) -> Explanation:
    """Build an explanation from `TAG: TEXT`."""
    tag, delimiter, body = line.strip().partition(":")
    if not delimiter:
        raise _LineFailure(DelimiterNotFound())
    return Explanation.new(tag, body)


def _parse_word(line: str, explanations: dict[str, str]) -> Word:
    """Build a word from `TOKEN [DETAIL] [:|! GROUP] [> TAG | < TEXT]`."""
    parts = line.split(None, 1)
    token = parts[0]
    rest = parts[1].strip() if len(parts) > 1 else ""

    emphasis = first_uppercase_position(token)
    if emphasis is None:
        raise _LineFailure(EmphasisNotFound(token))
    word = Word.new(token, emphasis)
    if not rest:
        return word

    detail = subslice_tags(rest, "", DETAIL_STOP)
    if detail is not None and detail.strip():
        word = word.with_detail(detail)

    # Markers are counted over the whole rest, explanation text included.
    if sum(rest.count(marker) for marker in GROUP_MARKERS) > 1:
        raise _LineFailure(MoreThanOneGroup(word.text))
    group = subslice_tags(rest, GROUP_MARKERS, EXPLANATION_MARKERS)
    if group is not None and group.strip():
        word = word.with_group(group.strip(), inverted="!" in rest)

    if ">" in rest:
        tag = (subslice_tags(rest, ">", "") or "").strip().lower()
        if tag:
            resolved = explanations.get(tag)
            if resolved is None:
                raise _LineFailure(ExplanationNotDefined(tag=tag, word=word.text))
            word = word.with_explanation(resolved)
    else:
        inline = (subslice_tags(rest, "<", "") or "").strip()
        if inline:
            word = word.with_explanation(inline)
    return word


def load_words() -> tuple[list[Word], list[ParseError]]:
    """Parse the bundled word database."""
    entry = resources.files(CONTENT_PACKAGE).joinpath(CONTENT_FILE)
    return parse(entry.read_text(encoding="utf-8-sig"))


def load_words_from_file(path: Path | str) -> tuple[list[Word], list[ParseError]]:
    """Parse a word database file for tests/tools."""
    return parse(Path(path).read_text(encoding="utf-8-sig"))
