import tomllib
from pathlib import Path
from typing import Any

import stresstrainer

PYPROJECT = Path(__file__).resolve().parents[1] / "pyproject.toml"


def test_package_version_matches_pyproject() -> None:
    with PYPROJECT.open("rb") as handle:
        project = tomllib.load(handle)["project"]
    assert stresstrainer.__version__ == project["version"]


def test_version_falls_back_to_metadata(monkeypatch: Any) -> None:
    monkeypatch.setattr(stresstrainer, "_version_from_pyproject", lambda: None)
    monkeypatch.setattr(stresstrainer, "version", lambda name: "9.9.9")
    assert stresstrainer._resolve_version() == "9.9.9"
