from pathlib import Path

import platformdirs


CONFIG_FILE_NAMES = (".edge_ipinfo.toml", "edge_ipinfo.toml")


def get_config_dir() -> Path:
    """Get the per-user configuration directory for edge_ipinfo."""
    return Path(platformdirs.user_config_dir()) / "edge_ipinfo"


def find_toml_config_file(search_dir: Path | None = None) -> Path | None:
    """Find the TOML configuration file for edge_ipinfo.

    Searches in the following order:
    1. .edge_ipinfo.toml in the search directory (default: cwd)
    2. edge_ipinfo.toml in the search directory
    3. config.toml in the user config directory/edge_ipinfo/
    """
    base = search_dir or Path.cwd()
    candidates = [(base / name).resolve() for name in CONFIG_FILE_NAMES]
    candidates.append(get_config_dir() / "config.toml")

    for candidate in candidates:
        if candidate.exists() and candidate.is_file():
            return candidate

    return None
