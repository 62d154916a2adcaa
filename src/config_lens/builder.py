"""Effective-config assembler.

Selects which scanned files feed the merge and instruction engines and
bundles their results into one snapshot.
"""

import logging
from collections.abc import Mapping
from typing import Any

from .instructions import build_instruction_list
from .instructions import build_instruction_map
from .instructions import build_instruction_stack
from .merger import merge_settings
from .models import Category
from .models import ConfigScope
from .models import EffectiveConfig
from .models import ExtensionEntry
from .models import FileDescriptor
from .models import MergedSettingNode
from .models import ScanResult
from .models import SettingsLayer
from .references import parse_settings_json
from .scope import classify_scope

logger = logging.getLogger(__name__)

# Settings merge order (later overrides earlier): (declared scope, is local override)
SETTINGS_PRIORITY_ORDER: tuple[tuple[ConfigScope, bool], ...] = (
    (ConfigScope.GLOBAL, False),
    (ConfigScope.GLOBAL, True),
    (ConfigScope.PROJECT, False),
    (ConfigScope.PROJECT, True),
)

# Hooks from every scope run side by side, so their arrays accumulate
ADDITIVE_KEYS = frozenset({"hooks"})


def build_effective_config(
    scan_result: ScanResult,
    contents: Mapping[str, str],
    instruction_chain: list[FileDescriptor] | None = None,
    project_dir: str | None = None,
    home_dir: str | None = None,
    project_instruction_files: list[FileDescriptor] | None = None,
) -> EffectiveConfig:
    """Assemble the effective configuration from scanned files.

    Args:
        scan_result: Files discovered by the scanner
        contents: Raw text of settings files, keyed by path
        instruction_chain: Injection chain for one target directory, lowest
            priority first (enables the instruction stack)
        project_dir: Project root (needed for the stack and the map)
        home_dir: Home directory (enables the instruction map)
        project_instruction_files: Every instruction file in the project tree;
            defaults to the project-scope instruction files of the scan

    Returns:
        Snapshot with instructions, merged settings and extensions, plus the
        stack and map when their context is supplied
    """
    files = scan_result.files

    config = EffectiveConfig(
        instructions=build_instruction_list(files),
        settings=build_settings(files, contents),
        extensions=build_extensions(files),
    )

    if instruction_chain is not None and project_dir is not None:
        config.instruction_stack = build_instruction_stack(instruction_chain, project_dir)

    if project_dir is not None and home_dir is not None:
        if project_instruction_files is None:
            project_instruction_files = [file for file in files if file.scope is ConfigScope.PROJECT]
        global_files = [file for file in files if file.scope is ConfigScope.GLOBAL]
        config.instruction_map = build_instruction_map(global_files, project_instruction_files, project_dir, home_dir)

    return config


def select_settings_layers(files: list[FileDescriptor], contents: Mapping[str, str]) -> list[SettingsLayer]:
    """Build settings layers in merge priority order.

    At most one settings file may occupy each (scope, local override) slot.
    When a caller supplies more, the first in scan order is used and the rest
    are reported and ignored.

    Content that is missing, empty, not valid JSON or not a JSON object is
    skipped.
    """
    settings_files = [file for file in files if file.category is Category.SETTINGS]
    layers = []

    for scope, is_local in SETTINGS_PRIORITY_ORDER:
        candidates = [file for file in settings_files if file.scope is scope and file.is_local_override == is_local]
        if not candidates:
            continue
        if len(candidates) > 1:
            ignored = ", ".join(file.path for file in candidates[1:])
            logger.warning(f"Multiple settings files for {scope.value} scope (local={is_local}); ignoring {ignored}")

        file = candidates[0]
        data = _parse_settings(file.path, contents.get(file.path))
        if data is None:
            continue

        layers.append(SettingsLayer(scope=classify_scope(file), source_file=file.path, data=data))

    return layers


def build_settings(files: list[FileDescriptor], contents: Mapping[str, str]) -> list[MergedSettingNode]:
    return merge_settings(select_settings_layers(files, contents), ADDITIVE_KEYS)


def build_extensions(files: list[FileDescriptor]) -> list[ExtensionEntry]:
    return [ExtensionEntry(file=file, category=file.category) for file in files if file.category.is_extension]


def _parse_settings(path: str, content: str | None) -> dict[str, Any] | None:
    if not content:
        logger.debug(f"No content for settings file {path}, skipping")
        return None

    data = parse_settings_json(content)
    if data is None:
        logger.debug(f"Skipping settings file {path}: not a valid JSON object")
    return data
