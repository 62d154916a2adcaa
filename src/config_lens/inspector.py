"""Inspector facade tying discovery to the resolution engine."""

import logging
from pathlib import Path
from typing import Any

from .builder import build_effective_config
from .builder import build_settings
from .exceptions import ConfigFileError
from .merger import settings_to_dict
from .models import ConfigPaths
from .models import EffectiveConfig
from .models import FileDescriptor
from .models import ProjectTreeNode
from .models import ScanResult
from .references import resolve_references
from .scanner import build_instruction_chain
from .scanner import collect_project_instructions
from .scanner import read_contents
from .scanner import scan_global_config
from .scanner import scan_project_config
from .scanner import scan_project_tree

logger = logging.getLogger(__name__)


class ConfigInspector:
    """Computes the effective configuration for injected locations.

    Every call scans the filesystem afresh; nothing is cached between calls,
    so a rescan is simply another call.

    Resolution order (highest to lowest priority):
    1. Sub-directory instructions / local overrides
    2. Project settings and instructions
    3. Global settings and instructions

    Args:
        paths: Home directory and optional project root to inspect
    """

    def __init__(self, paths: ConfigPaths):
        self.paths = paths

    # ===== Discovery =====

    def scan(self) -> ScanResult:
        """Discover global and project files and the references between them.

        Raises:
            ConfigFileError: If the configured project directory does not exist
        """
        scan_result, _ = self._scan()
        return scan_result

    def instruction_chain(self, target_dir: Path | None = None) -> list[FileDescriptor]:
        """Instruction files applied at target_dir (default: project root), lowest priority first."""
        project = self._require_project()
        return build_instruction_chain(target_dir or project, project, self.paths.home)

    def project_tree(self, max_depth: int = 5) -> ProjectTreeNode:
        """Directory tree of the project flagging directories with instruction files."""
        return scan_project_tree(self._require_project(), max_depth=max_depth)

    # ===== Resolution =====

    def effective_config(self, target_dir: Path | None = None) -> EffectiveConfig:
        """Effective configuration at target_dir.

        Without a project only global instructions, settings and extensions
        are resolved. With a project the instruction stack (for target_dir,
        default the project root) and the project-wide instruction map are
        included.

        Args:
            target_dir: Directory inside the project to resolve for

        Returns:
            Effective configuration snapshot
        """
        scan_result, contents = self._scan()

        project = self.paths.project
        if project is None:
            return build_effective_config(scan_result, contents)

        return build_effective_config(
            scan_result,
            contents,
            instruction_chain=build_instruction_chain(target_dir or project, project, self.paths.home),
            project_dir=str(project),
            home_dir=str(self.paths.home),
            project_instruction_files=collect_project_instructions(project),
        )

    def merged_settings(self) -> dict[str, Any]:
        """Merged settings as a plain document.

        Merge order (later overrides earlier):
        1. Global settings (lowest priority)
        2. Global local settings
        3. Project settings
        4. Project local settings (highest priority)

        Returns:
            Effective settings dictionary
        """
        files = self._scan_files()
        return settings_to_dict(build_settings(files, read_contents(files)))

    # ===== Private Helpers =====

    def _scan(self) -> tuple[ScanResult, dict[str, str]]:
        files = self._scan_files()
        contents = read_contents(files)
        references = resolve_references(files, contents)
        logger.debug(f"Scanned {len(files)} files with {len(references)} references")
        return ScanResult(files=files, references=references), contents

    def _scan_files(self) -> list[FileDescriptor]:
        files = scan_global_config(self.paths.home)
        if self.paths.project is not None:
            files.extend(scan_project_config(self._require_project()))
        return files

    def _require_project(self) -> Path:
        project = self.paths.project
        if project is None:
            raise ConfigFileError("No project directory configured")
        if not project.is_dir():
            raise ConfigFileError(f"Project directory does not exist: {project}")
        return project
