#!/usr/bin/env python3
"""Architecture boundary checks."""

from __future__ import annotations

from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PACKAGE = ROOT / "src/record_mapper"


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _assert_no_imports(path: Path, banned: list[str]) -> None:
    text = _read(path)
    for token in banned:
        if token in text:
            raise SystemExit(f"Architecture violation in {path}: found '{token}'")


def main() -> None:
    """Run repository architecture boundary checks."""
    library_paths = [
        *PACKAGE.glob("*.py"),
        *(PACKAGE / "mapping").glob("*.py"),
        *(PACKAGE / "converters").glob("*.py"),
    ]
    for path in library_paths:
        _assert_no_imports(path, ["import typer", "from typer", "record_mapper.cli"])

    print("Architecture checks passed.")


if __name__ == "__main__":
    main()
