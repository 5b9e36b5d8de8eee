"""Path resolution for hostpin – single source of truth for the known-hosts store."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

from hostpin.config.defaults import (
    ENV_STATE_DIR,
    ENV_XDG_STATE_HOME,
    KNOWN_HOSTS_FILENAME,
    PATH_MAX,
    STATE_DIR_NAME,
    XDG_STATE_DIR_NAME,
)
from hostpin.trust.errors import PathError


def get_state_dir() -> Path:
    """Return the per-user directory holding hostpin state.

    Checks HOSTPIN_STATE_DIR first, then XDG_STATE_HOME/hostpin; otherwise
    assumes ~/.hostpin. Nothing is created on disk.

    Raises:
        PathError: If the home directory cannot be determined.
    """
    env_path = os.environ.get(ENV_STATE_DIR)
    if env_path:
        return Path(env_path).expanduser()

    xdg_state = os.environ.get(ENV_XDG_STATE_HOME)
    if xdg_state:
        return Path(xdg_state).expanduser() / XDG_STATE_DIR_NAME

    try:
        home = Path.home()
    except (RuntimeError, KeyError) as e:
        raise PathError(f"Cannot determine home directory: {e}") from e
    return home / STATE_DIR_NAME


def default_store_path() -> Path:
    """Return <state dir>/known_hosts.

    Raises:
        PathError: If the path cannot be built within PATH_MAX.
    """
    path = get_state_dir() / KNOWN_HOSTS_FILENAME
    if len(os.fsencode(path)) >= PATH_MAX:
        raise PathError(
            f"Default known-hosts path exceeds {PATH_MAX} bytes: {str(path)[:64]}..."
        )
    return path


def resolve_store_path(override: Optional[Union[str, Path]] = None) -> Path:
    """Return the explicit store path if given, else the default one."""
    if override:
        return Path(override).expanduser()
    return default_store_path()
