"""CLI entrypoint for the stress placement trainer."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from collections.abc import Callable
from pathlib import Path

from .content_loader import ParseError, load_words, load_words_from_file
from .models import Outcome, Word
from .progress import MAX_LEVEL, MIN_LEVEL, repetition_days
from .service import TrainerService
from .storage import MemoryStorage, SqliteStorage, Storage, StorageError

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
TimerFn = Callable[[], float]
DEFAULT_DB_PATH = Path(".stresstrainer") / "stats.db"
QUIT_COMMANDS = {"q", ":q", ":quit", ":exit"}
SKIP_COMMANDS = {"s", "skip"}
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _service(words_path: Path | None = None, db_path: Path | None = DEFAULT_DB_PATH) -> TrainerService:
    """Create app service; without a database path progress is kept in memory."""
    source = None
    if words_path is not None:
        source = words_path.read_text(encoding="utf-8-sig")
    storage: Storage = SqliteStorage(db_path) if db_path is not None else MemoryStorage()
    return TrainerService(storage, source)


def run(argv: list[str] | None = None) -> int:
    """Run the CLI application."""
    parser = argparse.ArgumentParser(prog="stresstrainer", description="Practice stress placement in Russian words")
    parser.add_argument("command", nargs="?", default="play", choices=["play", "check", "status"])
    parser.add_argument("--words", type=Path, default=None, help="word database file (default: bundled words)")
    parser.add_argument("--db", type=Path, default=DEFAULT_DB_PATH, help="statistics database path")
    parser.add_argument("--no-save", action="store_true", help="keep statistics in memory only")
    parser.add_argument("--log-level", default="WARNING", choices=LOG_LEVELS)
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(message)s")

    db_path = None if args.no_save else args.db
    try:
        if args.command == "check":
            return check_words(args.words)
        if args.command == "status":
            return status(args.words, db_path)
        return play_shell(words_path=args.words, db_path=db_path)
    except StorageError as exc:
        print(f"Statistics storage failed: {exc}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"Could not read word database: {exc}", file=sys.stderr)
        return 1


def play_shell(
    input_fn: InputFn = input,
    print_fn: PrintFn = print,
    *,
    words_path: Path | None = None,
    db_path: Path | None = DEFAULT_DB_PATH,
    timer: TimerFn = time.monotonic,
) -> int:
    """Ask words until the user quits."""
    service = _service(words_path, db_path)
    try:
        if not len(service.catalog):
            print_fn("No words available.")
            return 1
        solved = 0
        started = timer()
        while True:
            word = service.next()
            print_fn(f"\n{_format_header(solved, timer() - started)}")
            outcome = _question_card(service, word, input_fn, print_fn)
            if outcome is None:
                return 0
            if outcome is Outcome.SOLVED:
                solved += 1
                print_fn("Верно!")
                continue
            _failure_card(service, word, print_fn)
            choice = input_fn("Продолжить? [Enter / q]: ").strip().lower()
            if choice in QUIT_COMMANDS:
                return 0
    finally:
        service.close()


def _question_card(service: TrainerService, word: Word, input_fn: InputFn, print_fn: PrintFn) -> Outcome | None:
    """Show variants and record the answer; None means the user quit."""
    variants = service.variants(word)
    for idx, variant in enumerate(variants, start=1):
        print_fn(f"{idx}) {variant}")
    print_fn("s) Пропустить")
    print_fn("q) Quit")
    while True:
        choice = input_fn("Choose: ").strip().lower()
        if choice in QUIT_COMMANDS:
            return None
        if choice in SKIP_COMMANDS:
            return service.skip(word)
        if choice.isdigit():
            index = int(choice) - 1
            if 0 <= index < len(variants):
                return service.answer(word, variants[index].emphasis)
        print_fn("Invalid choice.")


def _failure_card(service: TrainerService, word: Word, print_fn: PrintFn) -> None:
    """Show the correct word with its explanation and related words."""
    print_fn(f"Правильно: {word}")
    if word.explanation:
        print_fn(word.explanation)
    seealso = service.seealso(word)
    if seealso:
        print_fn("А также:")
        for other in seealso:
            print_fn(f"  {other}")
    opposite = service.opposite(word)
    if opposite:
        print_fn("Но:")
        for other in opposite:
            print_fn(f"  {other}")


def check_words(words_path: Path | None = None, print_fn: PrintFn = print) -> int:
    """Print every parse error of the word database."""
    if words_path is None:
        words, errors = load_words()
    else:
        words, errors = load_words_from_file(words_path)
    _print_errors(errors, print_fn)
    print_fn(f"{len(words)} words, {len(errors)} errors")
    return 1 if errors else 0


def _print_errors(errors: list[ParseError], print_fn: PrintFn) -> None:
    for error in errors:
        print_fn(f"line {error}")


def status(words_path: Path | None = None, db_path: Path | None = DEFAULT_DB_PATH, print_fn: PrintFn = print) -> int:
    """Print how many words sit at each mastery level."""
    service = _service(words_path, db_path)
    try:
        print_fn("\n=== Mastery ===")
        counts = service.level_summary()
        for level in range(MIN_LEVEL, MAX_LEVEL + 1):
            print_fn(f"Level {level} (every {repetition_days(level)} d): {counts.get(level, 0)}")
        print_fn(f"Total: {sum(counts.values())}")
        return 0
    finally:
        service.close()


def _format_header(solved: int, elapsed_seconds: float) -> str:
    return f"{solved} {words_ending(solved)} | {_format_elapsed(elapsed_seconds)}"


def _format_elapsed(seconds: float) -> str:
    """Format elapsed time as MM:SS, or HH:MM:SS from one hour."""
    total = max(0, int(seconds))
    hours = total // 3600
    minutes = total % 3600 // 60
    secs = total % 60
    if hours == 0:
        return f"{minutes:02}:{secs:02}"
    return f"{hours:02}:{minutes:02}:{secs:02}"


def words_ending(count: int) -> str:
    """Return the Russian plural form of `слово` agreeing with count."""
    if 11 <= count % 100 <= 19:
        return "слов"
    last = count % 10
    if last == 1:
        return "слово"
    if 2 <= last <= 4:
        return "слова"
    return "слов"


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
