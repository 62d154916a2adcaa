"""Remembered project and directory selection.

Selection state is owned by the caller as a ``SessionState`` value; a
``SessionStore`` only persists it to a YAML file at an injected path.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigFileError
from .exceptions import ConfigValidationError
from .utils import deep_merge

logger = logging.getLogger(__name__)

SELECTION_SECTION = "selection"


@dataclass(frozen=True)
class SessionState:
    """Caller-held selection.

    Attributes:
        project_dir: Selected project root, or None for global-only inspection
        target_dir: Selected directory inside the project, or None for the root
    """

    project_dir: str | None = None
    target_dir: str | None = None


class SessionStore:
    """Persists SessionState to a YAML file.

    Args:
        path: Location of the session file (e.g. ``~/.config/config-lens/session.yaml``)
    """

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> SessionState:
        """Read the remembered selection.

        Returns:
            Stored state, or an empty state if nothing is stored or the file
            cannot be read
        """
        data = self._read_yaml(self.path)
        selection = data.get(SELECTION_SECTION) if data else None
        if not isinstance(selection, dict):
            return SessionState()

        return SessionState(
            project_dir=_optional_str(selection.get("project")),
            target_dir=_optional_str(selection.get("target")),
        )

    def save(self, state: SessionState) -> None:
        """Replace the remembered selection.

        Raises:
            ConfigValidationError: If a selected path is not a string
            ConfigFileError: If the file cannot be written
        """
        for name, value in (("project_dir", state.project_dir), ("target_dir", state.target_dir)):
            if value is not None and not isinstance(value, str):
                raise ConfigValidationError(f"{name} must be a string path, got {type(value).__name__}")

        data = self._read_yaml(self.path) or {}
        selection = {}
        if state.project_dir is not None:
            selection["project"] = state.project_dir
        if state.target_dir is not None:
            selection["target"] = state.target_dir

        if selection:
            data[SELECTION_SECTION] = selection
        else:
            data.pop(SELECTION_SECTION, None)

        self._write_yaml(self.path, data)

    def remember_project(self, project_dir: str | Path) -> SessionState:
        """Select a project, forgetting any directory selected in the previous one."""
        state = SessionState(project_dir=str(project_dir))
        self.save(state)
        logger.info(f"Remembered project '{project_dir}'")
        return state

    def remember_target(self, target_dir: str | Path) -> SessionState:
        """Select a directory within the remembered project."""
        self._update_yaml(self.path, {SELECTION_SECTION: {"target": str(target_dir)}})
        logger.info(f"Remembered target directory '{target_dir}'")
        return self.load()

    def clear(self) -> None:
        """Forget the remembered selection."""
        data = self._read_yaml(self.path)

        if data and SELECTION_SECTION in data:
            del data[SELECTION_SECTION]
            self._write_yaml(self.path, data)
            logger.info("Cleared remembered selection")

    # ===== Private Helpers =====

    def _read_yaml(self, path: Path) -> dict[str, Any] | None:
        """Read YAML file.

        Args:
            path: Path to YAML file

        Returns:
            Dictionary from YAML, or None if the file doesn't exist or is unreadable
        """
        if not path.exists():
            return None

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read session from {path}: {e}")
            return None

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring session file {path}: expected a mapping")
            return None
        return data

    def _write_yaml(self, path: Path, data: dict[str, Any]) -> None:
        """Write YAML file.

        Raises:
            ConfigFileError: If write fails
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w") as f:
                yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigFileError(f"Failed to write session to {path}: {e}") from e

    def _update_yaml(self, path: Path, updates: dict[str, Any]) -> None:
        """Update YAML file with deep merge."""
        existing = self._read_yaml(path) or {}
        merged = deep_merge(existing, updates)
        self._write_yaml(path, merged)


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None
