"""End-to-end smoke test for CLI help output."""

from __future__ import annotations

import subprocess

import record_mapper


def test_package_import_smoke() -> None:
    """Ensure package can be imported in the test process."""
    assert record_mapper.__version__


def test_cli_help_smoke() -> None:
    """Ensure the installed CLI entrypoint responds to --help."""
    result = subprocess.run(
        ["record-mapper", "--help"],
        capture_output=True,
        text=True,
        check=False,
    )

    assert result.returncode == 0, result.stderr
    assert "Inspect record shapes" in result.stdout


def test_cli_fields_missing_module_fails_cleanly() -> None:
    """Ensure CLI returns a user-facing error for an unknown module."""
    result = subprocess.run(
        ["record-mapper", "fields", "definitely_missing_records_xyz:Row"],
        capture_output=True,
        text=True,
        check=False,
    )

    assert result.returncode != 0
    assert "unable to import" in result.stderr.lower()
