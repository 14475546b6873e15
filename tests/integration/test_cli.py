"""Tests for the sqlmapper command line."""

from pathlib import Path

import pytest

from sqlmapper.cli import app


def run_cli(*args: str) -> int:
    """Run the CLI and return its exit code."""
    try:
        app(list(args))
    except SystemExit as exc:
        return exc.code or 0
    return 0


@pytest.fixture(name="users_file")
def create_users_file(tmp_path: Path, mysql_users: str) -> Path:
    """The MySQL users script on disk."""
    path = tmp_path / "users.sql"
    path.write_text(mysql_users, encoding="utf-8")
    return path


def test_convert_writes_next_to_input(users_file: Path) -> None:
    """Output defaults to <basename>_<dialect>.sql beside the input."""
    assert run_cli("--file", str(users_file), "--to", "postgres", "--from", "mysql") == 0
    output = users_file.with_name("users_postgres.sql")
    assert output.read_text(encoding="utf-8") == (
        "CREATE TABLE users (\n"
        "  id SERIAL NOT NULL PRIMARY KEY,\n"
        "  name VARCHAR(50) NOT NULL\n"
        ");\n"
    )


def test_convert_detects_source_and_honours_output(users_file: Path, tmp_path: Path) -> None:
    """The source dialect is sniffed and --output picks the destination."""
    output = tmp_path / "converted" / "users.sql"
    assert run_cli("--file", str(users_file), "--to", "mssql", "--output", str(output)) == 0
    assert "IDENTITY(1,1)" in output.read_text(encoding="utf-8")


def test_convert_failure_writes_nothing(tmp_path: Path) -> None:
    """A conversion error exits non-zero and leaves no output file."""
    script = tmp_path / "broken.sql"
    script.write_text("CREATE TABLE t;", encoding="utf-8")
    assert run_cli("--file", str(script), "--to", "postgres", "--from", "mysql") == 1
    assert not (tmp_path / "broken_postgres.sql").exists()


def test_unknown_dialect_and_missing_file(users_file: Path, tmp_path: Path) -> None:
    """Bad dialect tags and missing inputs exit with status 1."""
    assert run_cli("--file", str(users_file), "--to", "db2") == 1
    assert run_cli("--file", str(tmp_path / "missing.sql"), "--to", "postgres") == 1


def test_unsupported_policy_error(tmp_path: Path) -> None:
    """--on-unsupported error turns a review item into a failure."""
    script = tmp_path / "seq.sql"
    script.write_text("CREATE SEQUENCE s;", encoding="utf-8")
    assert run_cli("--file", str(script), "--to", "mysql", "--from", "postgres",
                   "--on-unsupported", "error") == 1
    assert not (tmp_path / "seq_mysql.sql").exists()
    assert run_cli("--file", str(script), "--to", "mysql", "--from", "postgres") == 0
    assert (tmp_path / "seq_mysql.sql").read_text(encoding="utf-8").startswith("-- REVIEW [SEQUENCE_UNSUPPORTED]")


def test_batch_command(sql_dir: Path, tmp_path: Path) -> None:
    """The batch command converts a directory into the chosen output folder."""
    out = tmp_path / "out"
    assert run_cli("batch", str(sql_dir), "--to", "sqlite", "--from", "mysql", "--output", str(out)) == 0
    assert (out / "users_sqlite.sql").is_file()
    assert (out / "nested" / "shop_sqlite.sql").is_file()
    assert (out / "conversion_summary.json").is_file()


def test_dialects_command(capsys: pytest.CaptureFixture) -> None:
    """Every supported dialect is listed."""
    assert run_cli("dialects") == 0
    listing = capsys.readouterr().out
    for tag in ("mysql", "postgres", "sqlite", "oracle", "sqlserver"):
        assert tag in listing
