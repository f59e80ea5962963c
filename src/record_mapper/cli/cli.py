#!/usr/bin/env python3
"""
record_mapper.cli.cli

Typer-based CLI for inspecting how record types line up before mapping them.

Record types are referenced as ``MODULE:TYPE`` where ``MODULE`` is an import
path or a ``.py`` file and ``TYPE`` may be a dotted qualified name.

Examples
--------
Show the fields the mapper sees on a type:

    record-mapper fields myapp.rows:UserRow

Show how two types correspond:

    record-mapper match myapp.rows:UserRow myapp.api:User

List converters, including ones from a project module:

    record-mapper converters --converter-module myapp/converters.py
"""

from __future__ import annotations

import logging
import sys
import traceback
from typing import Any

import typer

from record_mapper.converters.registry import _import_module_or_path
from record_mapper.errors import RecordMapperError, UnmatchedFieldError

app = typer.Typer(
    name="record-mapper",
    help="Inspect record shapes, field correspondence and registered converters.",
    no_args_is_help=True,
)

TYPE_REF_HELP = "Record type as MODULE:TYPE (MODULE may be a .py file)."


def _resolve_type(reference: str) -> Any:
    """Resolve a ``MODULE:TYPE`` reference to the object it names.

    Parameters
    ----------
    reference : str
        Import path or file path, a colon, and a qualified attribute name.

    Returns
    -------
    Any
        Referenced object.

    Raises
    ------
    typer.BadParameter
        If the reference is malformed or cannot be resolved.
    """
    module_part, sep, qualname = reference.rpartition(":")
    if not sep or not module_part or not qualname:
        raise typer.BadParameter(
            f"Invalid type reference '{reference}'. Use MODULE:TYPE format."
        )
    try:
        target: Any = _import_module_or_path(module_part)
    except RecordMapperError as exc:
        raise typer.BadParameter(str(exc)) from exc
    for part in qualname.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise typer.BadParameter(
                f"'{qualname}' not found in '{module_part}'."
            ) from exc
    return target


def _print_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly error.

    Parameters
    ----------
    exc : Exception
        Exception raised by a command.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.echo(f"✗ {type(exc).__name__}: {exc}", err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo(
            "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            err=True,
        )
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _flags(descriptor: Any) -> str:
    flags = []
    if not descriptor.public:
        flags.append("private")
    elif not descriptor.settable:
        flags.append("read-only")
    if descriptor.has_default:
        flags.append("default")
    if descriptor.alias:
        flags.append(f"alias={descriptor.alias}")
    if descriptor.db_name != descriptor.name:
        flags.append(f"db={descriptor.db_name}")
    return ", ".join(flags)


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Show full tracebacks on error."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Initialize shared CLI state.

    Parameters
    ----------
    ctx : typer.Context
        Typer context object used to store shared state.
    debug : bool, default=False
        Whether to enable debug error output.
    verbose : bool, default=False
        Whether to log at DEBUG level.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )
    ctx.obj = {"debug": debug}


# -----------------------------
# Commands
# -----------------------------
@app.command("fields")
def fields_cmd(
    ctx: typer.Context,
    record: str = typer.Argument(..., help=TYPE_REF_HELP),
) -> None:
    """Print the fields the mapper sees on a record type."""
    from record_mapper.mapping.fields import describe_fields
    from record_mapper.mapping.typeinfo import record_kind, type_label

    debug = bool(ctx.obj and ctx.obj.get("debug"))
    record_type = _resolve_type(record)
    try:
        descriptors = describe_fields(record_type)
    except RecordMapperError as exc:
        raise typer.Exit(code=_print_error(exc, debug))

    typer.echo(f"{type_label(record_type)} ({record_kind(record_type)})")
    for descriptor in descriptors:
        line = f"  {descriptor.name}: {type_label(descriptor.annotation)}"
        flags = _flags(descriptor)
        if flags:
            line += f"  [{flags}]"
        typer.echo(line)


@app.command("match")
def match_cmd(
    ctx: typer.Context,
    source: str = typer.Argument(..., help=f"Source type. {TYPE_REF_HELP}"),
    dest: str = typer.Argument(..., help=f"Destination type. {TYPE_REF_HELP}"),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Fail when a source field has no destination counterpart.",
    ),
) -> None:
    """Print field correspondence between two record types."""
    from record_mapper.mapping.fields import match_fields
    from record_mapper.mapping.typeinfo import type_label

    debug = bool(ctx.obj and ctx.obj.get("debug"))
    source_type = _resolve_type(source)
    dest_type = _resolve_type(dest)
    try:
        correspondence = match_fields(source_type, dest_type)
        if strict and correspondence.unmatched:
            raise UnmatchedFieldError(
                f"no counterpart on {type_label(dest_type)}",
                path=(correspondence.unmatched[0],),
            )
    except RecordMapperError as exc:
        raise typer.Exit(code=_print_error(exc, debug))

    typer.echo(f"{type_label(source_type)} -> {type_label(dest_type)}")
    for source_field, dest_field in correspondence.pairs:
        typer.echo(f"  {source_field.name} -> {dest_field.name}")
    if correspondence.unmatched:
        typer.echo(f"unmatched: {', '.join(correspondence.unmatched)}")
    if correspondence.unsettable:
        typer.echo(f"unsettable: {', '.join(correspondence.unsettable)}")


@app.command("converters")
def converters_cmd(
    ctx: typer.Context,
    converter_module: list[str] | None = typer.Option(
        None,
        "--converter-module",
        help="Python module or .py file exposing converters (repeatable).",
    ),
) -> None:
    """List registered converter type pairs."""
    from record_mapper.converters.registry import create_default_registry

    debug = bool(ctx.obj and ctx.obj.get("debug"))
    try:
        registry = create_default_registry(converter_module or [])
    except RecordMapperError as exc:
        raise typer.Exit(code=_print_error(exc, debug))

    for source_key, dest_key in registry.keys():
        typer.echo(f"{source_key} -> {dest_key}")
    typer.echo(f"{len(registry)} converters")


@app.command("doctor")
def doctor_cmd() -> None:
    """Print installed dependency versions and the built-in converter count."""
    import importlib.metadata as metadata

    typer.echo(f"Python: {sys.version.split()[0]}")
    for module in ("record-mapper", "pydantic", "typer"):
        try:
            version = metadata.version(module)
            typer.echo(f"{module}: {version}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{module}: <not installed>")

    from record_mapper.converters.registry import create_default_registry

    typer.echo(f"built-in converters: {len(create_default_registry())}")


if __name__ == "__main__":
    app()
