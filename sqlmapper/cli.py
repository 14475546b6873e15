"""Command line interface for sqlmapper."""

import sys
from pathlib import Path
from typing import Annotated, Literal

from cyclopts import App, Parameter
from rich.console import Console
from rich.table import Table

from sqlmapper.config import config
from sqlmapper.services.sql_conversion import ConversionOrchestrator, SQLMapperError, convert_with_report
from sqlmapper.services.sql_conversion.dialects import DIALECTS, normalize_dialect
from sqlmapper.services.sql_conversion.utils.dialect_utils import detect_source_dialect
from sqlmapper.utils.file_utils import output_file_name, read_file_content, write_file_content

app = App(help="Convert SQL DDL between MySQL, PostgreSQL, SQLite, Oracle and SQL Server.")

console = Console()
err_console = Console(stderr=True)

QuotePolicy = Literal["needed", "always", "never"]
UnsupportedPolicy = Literal["review", "error"]


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[bold red]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print success message to stderr."""
    err_console.print(f"[bold green]✓[/] {message}")


def print_info(message: str) -> None:
    """Print info message to stderr."""
    err_console.print(f"[bold blue]i[/] {message}")


def resolve_dialect(tag: str) -> str:
    """Canonical dialect tag, or exit with an error."""
    try:
        return normalize_dialect(tag)
    except SQLMapperError as e:
        print_error(e.message)
        sys.exit(1)


@app.default
def convert(
    *,
    file: Path,
    to: str,
    from_: Annotated[str | None, Parameter(name="--from")] = None,
    output: Path | None = None,
    validate: bool = False,
    quote_identifiers: QuotePolicy | None = None,
    on_unsupported: UnsupportedPolicy | None = None,
    target_version: str | None = None,
) -> None:
    """Convert one DDL script.

    Parameters
    ----------
    file
        The script to convert.
    to
        Target dialect.
    from_
        Source dialect; sniffed from the script when omitted.
    output
        Output path (default: ``<basename>_<dialect>.sql`` next to the input).
    validate
        Re-parse the generated tables and indexes with sqlglot.
    """
    target = resolve_dialect(to)
    if not file.is_file():
        print_error(f"File does not exist: {file}")
        sys.exit(1)

    try:
        content = read_file_content(file)
    except (OSError, UnicodeDecodeError) as e:
        print_error(f"Cannot read {file}: {e}")
        sys.exit(1)

    if from_:
        source = resolve_dialect(from_)
    else:
        source = detect_source_dialect(content)
        if source is None:
            print_error("Could not detect the source dialect; pass --from")
            sys.exit(1)
        print_info(f"Detected source dialect: {DIALECTS[source].display_name}")

    try:
        report = convert_with_report(
            content, source, target, validate=validate, label=file.name,
            quote_identifiers=quote_identifiers, on_unsupported=on_unsupported, version=target_version,
        )
    except SQLMapperError as e:
        print_error(str(e))
        sys.exit(1)

    destination = output or file.with_name(output_file_name(str(file), target))
    try:
        write_file_content(destination, report.sql)
    except OSError as e:
        print_error(f"Cannot write to output path: {destination} ({e})")
        sys.exit(1)

    for item in report.review_items:
        print_info(f"[yellow]review[/] {item['object_name']} {item['issue_type']}: {item['message']}")
    for warning in report.warnings:
        print_info(f"[yellow]validation[/] {warning}")
    print_success(f"{DIALECTS[source].display_name} -> {DIALECTS[target].display_name}: {destination}")


@app.command
def batch(
    input_path: Path,
    *,
    to: str,
    from_: Annotated[str | None, Parameter(name="--from")] = None,
    output: Path | None = None,
    validate: bool = False,
    on_unsupported: UnsupportedPolicy | None = None,
) -> None:
    """Convert every .sql file under a directory."""
    target = resolve_dialect(to)
    source = resolve_dialect(from_) if from_ else None
    if not input_path.exists():
        print_error(f"Input path does not exist: {input_path}")
        sys.exit(1)

    orchestrator = ConversionOrchestrator(
        source, target, output_dir=str(output) if output else None, validate=validate,
        **({"on_unsupported": on_unsupported} if on_unsupported else {}),
    )
    result = orchestrator.convert(str(input_path))
    if not result.get("files"):
        print_error(result["message"])
        sys.exit(1)

    table = Table(title=f"Conversion to {DIALECTS[target].display_name}")
    table.add_column("File", style="bold cyan")
    table.add_column("Status")
    table.add_column("Review items", justify="right")
    table.add_column("Message")
    for file_result in result["files"]:
        table.add_row(
            file_result["file"],
            file_result["status"],
            str(file_result.get("review_items", 0)),
            file_result.get("message", ""),
        )
    console.print(table)

    if result["stats"]["files_failed"]:
        print_error(result["message"])
        sys.exit(1)
    print_success(f"{result['message']} Output: {result['output_dir']}")


@app.command
def dialects() -> None:
    """List supported dialects and their accepted tags."""
    table = Table()
    table.add_column("Tag", style="bold blue")
    table.add_column("Name")
    table.add_column("Default version")
    versions = (config.get("conversion") or {}).get("default_versions") or {}
    for name, descriptor in DIALECTS.items():
        table.add_row(name, descriptor.display_name, str(versions.get(name, "")))
    console.print(table)


@app.command
def serve(host: str | None = None, port: int | None = None) -> None:
    """Run the HTTP API."""
    import uvicorn

    api_cfg = config.get("api") or {}
    uvicorn.run(
        "sqlmapper.api:app",
        host=host or api_cfg.get("host", "127.0.0.1"),
        port=port or int(api_cfg.get("port", 5001)),
    )


def main() -> None:
    """Entry point for the ``sqlmapper`` script."""
    app()


if __name__ == "__main__":
    main()
