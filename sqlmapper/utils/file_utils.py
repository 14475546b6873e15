"""
File helpers shared by the CLI, the API batch endpoint and the orchestrator.
Covers SQL file discovery, reading and writing scripts, and output naming.
"""
import os
from datetime import datetime
from pathlib import Path
from typing import Dict, List

DEFAULT_EXCLUDE_DIRS = ['converted', 'logs', '__pycache__']


def find_sql_files(input_path: str, exclude_dirs: List[str] = None) -> List[str]:
    """
    Find all SQL files in a given path.

    Args:
        input_path: Path to a directory or a SQL file
        exclude_dirs: Directory names to skip while walking (default: converted, logs, __pycache__)

    Returns:
        Sorted list of paths to SQL files
    """
    if exclude_dirs is None:
        exclude_dirs = DEFAULT_EXCLUDE_DIRS

    sql_files = []
    normalized_input_path = os.path.normpath(input_path)

    if os.path.isdir(normalized_input_path):
        for root, dirs, files in os.walk(normalized_input_path):
            dirs[:] = [d for d in dirs if d not in exclude_dirs]
            for file in files:
                if file.lower().endswith('.sql'):
                    sql_files.append(os.path.join(root, file))
    elif os.path.isfile(normalized_input_path) and normalized_input_path.lower().endswith('.sql'):
        sql_files = [normalized_input_path]

    return sorted(sql_files)


def output_file_name(input_path: str, dialect: str) -> str:
    """``schema.sql`` converted to postgres becomes ``schema_postgres.sql``."""
    stem = Path(input_path).stem
    return f"{stem}_{dialect}.sql"


def timestamped_output_dir(base_dir: str) -> str:
    """``<base_dir>/<YYYYmmdd_HHMMSS>``, created if missing."""
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    output_dir = os.path.join(base_dir, timestamp)
    os.makedirs(output_dir, exist_ok=True)
    return output_dir


def create_processing_stats() -> Dict[str, int]:
    """Create the statistics dictionary tracked across a batch run."""
    return {
        'total_files': 0,
        'files_successful': 0,
        'files_failed': 0,
        'files_skipped': 0,
        'review_items': 0,
        'validation_warnings': 0,
    }


def make_relative_path(file_path: str, base_path: str) -> str:
    """
    Make a file path relative to a base path.

    Returns the original path when no relative form exists (e.g. another drive).
    """
    if not file_path or not base_path:
        return file_path

    try:
        return os.path.relpath(file_path, base_path)
    except (ValueError, OSError):
        return file_path


def read_file_content(file_path: str | Path) -> str:
    """Read a script as UTF-8 (a leading BOM is dropped)."""
    with open(file_path, 'r', encoding='utf-8-sig') as f:
        return f.read()


def write_file_content(file_path: str | Path, content: str) -> str:
    """Write *content*, creating parent directories; returns the path written."""
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        f.write(content)
    return str(file_path)
