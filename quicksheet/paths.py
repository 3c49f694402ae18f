# SPDX-License-Identifier: MIT
"""Centralized path resolution for quicksheet.

All path resolution should go through this module to ensure consistency.
"""
import os
from pathlib import Path


class PathResolver:
    """Resolves paths for quicksheet components."""

    @staticmethod
    def config_dir() -> Path:
        """Get the configuration directory (settings.json).

        Resolution order:
        1. QUICKSHEET_CONFIG env var
        2. XDG_CONFIG_HOME/quicksheet
        3. ~/.config/quicksheet
        """
        config = os.environ.get("QUICKSHEET_CONFIG")
        if config:
            return Path(config)
        xdg_config = os.environ.get("XDG_CONFIG_HOME")
        if xdg_config:
            return Path(xdg_config) / "quicksheet"
        return Path.home() / ".config" / "quicksheet"

    @staticmethod
    def state_dir() -> Path:
        """Get the state directory for mutable data (items, usage, logs).

        Resolution order:
        1. QUICKSHEET_STATE env var
        2. XDG_STATE_HOME/quicksheet
        3. ~/.local/state/quicksheet
        """
        state = os.environ.get("QUICKSHEET_STATE")
        if state:
            return Path(state)
        xdg_state = os.environ.get("XDG_STATE_HOME")
        if xdg_state:
            return Path(xdg_state) / "quicksheet"
        return Path.home() / ".local" / "state" / "quicksheet"

    @staticmethod
    def debug_log() -> Path:
        return PathResolver.state_dir() / "debug.log"
