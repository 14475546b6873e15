import json
from pathlib import Path
from typing import Dict, Any, Optional
from sqlmapper.config import config as app_global_config
import logging


def get_conversion_rules_dir() -> Path:
    """Directory holding the per-dialect JSON rule files."""
    rules_dir = app_global_config.get('base_dirs', {}).get('conversion_rules')
    if rules_dir:
        return Path(rules_dir)
    return Path(__file__).resolve().parent.parent.parent.parent / 'config' / 'conversion'


def load_json_from_conversion_config(
    logger: Any,
    dialect: str,
    config_filename: str,
    rules_subdirectory: Optional[str] = None,
) -> Dict:
    """
    Loads a JSON configuration file from the structured conversion config directory.
    Expected path structure: conversion_rules/{dialect}/[{rules_subdirectory}/]{config_filename}

    ``dialect`` is a dialect tag (``mysql``, ``postgres`` ...) or ``common`` for
    files shared by every dialect. Missing or unreadable files yield an empty
    dict so callers can fall back to built-in behaviour.
    """
    effective_logger = logger if logger is not None else logging.getLogger(__name__)
    full_config_path = "an unspecified path"
    try:
        d_name = dialect.lower() if dialect else ''
        if not d_name:
            effective_logger.error(f"Dialect is empty, cannot construct config path for {config_filename}.")
            return {}

        base_path = get_conversion_rules_dir() / d_name
        full_config_path = base_path / rules_subdirectory / config_filename if rules_subdirectory else base_path / config_filename

        if not full_config_path.exists():
            effective_logger.info(f"Configuration file not found (this may be expected): {full_config_path}")
            return {}

        with open(full_config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
            effective_logger.debug(f"Successfully loaded configuration from {full_config_path}")
            return data
    except json.JSONDecodeError as jde:
        effective_logger.error(f"Error decoding JSON from {str(full_config_path)}: {jde}", exc_info=True)
        return {}
    except (IOError, OSError) as ioe:
        effective_logger.error(f"File system error (IOError/OSError) loading configuration file {str(full_config_path)}: {ioe}", exc_info=True)
        return {}
