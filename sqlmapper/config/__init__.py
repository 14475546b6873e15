import yaml
from pathlib import Path
import os
import logging


def load_config():
    """Load configuration from settings.yaml located in the sqlmapper package directory."""
    try:
        package_dir = Path(__file__).parent.parent
        project_root = package_dir.parent

        settings_path = Path(os.getenv('SQLMAPPER_SETTINGS', package_dir / 'settings.yaml'))

        if not settings_path.exists():
            logging.error(f"Critical: settings.yaml not found at expected path: {settings_path}")
            raise FileNotFoundError(f"settings.yaml not found at {settings_path}")

        with open(settings_path) as f:
            config_data = yaml.safe_load(f)

        if not config_data:
            config_data = {}
            logging.warning(f"settings.yaml at {settings_path} is empty or invalid.")

        # Conversion rules ship inside the package; run artefacts (logs, output)
        # are resolved from the project root.
        resolved_base_dirs = {}
        for key, path_str in (config_data.get('base_dirs') or {}).items():
            if isinstance(path_str, str) and path_str and not os.path.isabs(path_str):
                anchor = package_dir if key == 'conversion_rules' else project_root
                resolved_base_dirs[key] = str((anchor / path_str).resolve())
            else:
                resolved_base_dirs[key] = path_str
        resolved_base_dirs.setdefault('conversion_rules', str(package_dir / 'config' / 'conversion'))
        config_data['base_dirs'] = resolved_base_dirs

        return config_data

    except FileNotFoundError as fnfe:
        logging.error(f"Configuration Error: {fnfe}", exc_info=True)
        raise
    except Exception as e:
        logging.error(f"Error loading configuration: {e}", exc_info=True)
        raise Exception(f"Failed to load application configuration: {e}") from e


# Load config at import time
try:
    config = load_config()
except Exception as e:
    logging.critical(f"CRITICAL FAILURE: Could not load sqlmapper settings. Error: {e}", exc_info=True)
    raise SystemExit(f"sqlmapper cannot start due to configuration load failure: {e}")
