"""Allow running the trainer as `python -m stresstrainer`."""

from __future__ import annotations

from .main import main_entry


def main() -> None:
    """Run the trainer CLI with process arguments."""
    main_entry()


if __name__ == "__main__":  # pragma: no cover
    main()
