"""Default path resolution for token-economics."""

from __future__ import annotations

import os
from pathlib import Path

SAVINGS_DB_ENV_VAR = "RTK_DB_PATH"
SPEND_JSON_ENV_VAR = "TOKEN_ECONOMICS_SPEND_JSON"


def get_default_savings_db_path() -> Path:
    """Return the savings history database path.

    `RTK_DB_PATH` wins when set; otherwise the path follows XDG data directory
    conventions.
    """
    env_db_path = os.environ.get(SAVINGS_DB_ENV_VAR)
    if env_db_path:
        return Path(env_db_path).expanduser()
    xdg_data_home = os.environ.get("XDG_DATA_HOME")
    if xdg_data_home:
        base_data_dir = Path(xdg_data_home).expanduser()
    else:
        base_data_dir = Path("~/.local/share").expanduser()
    return base_data_dir / "rtk" / "history.db"


def get_default_spend_json_paths() -> list[Path]:
    """Return spend exports listed in `TOKEN_ECONOMICS_SPEND_JSON` (os.pathsep separated)."""
    raw_paths = os.environ.get(SPEND_JSON_ENV_VAR, "")
    return [Path(item).expanduser() for item in raw_paths.split(os.pathsep) if item]
