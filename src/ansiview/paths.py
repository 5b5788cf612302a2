from pathlib import Path

import platformdirs


def get_config() -> Path:
    """Get the configuration directory, creating it if necessary."""
    path = Path(platformdirs.user_config_dir("ansiview", ensure_exists=True))
    return path


def get_settings_path() -> Path:
    return get_config() / "settings.json"
