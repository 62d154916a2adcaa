"""config-lens: Effective configuration across global, project and directory scopes.

This library computes the configuration an AI coding assistant actually
applies at a given working directory:
- Global (``~/.claude/CLAUDE.md``, ``~/.claude/settings.json``, rules)
- Project (``CLAUDE.md``, ``.claude/settings.json``, ``.claude/rules``)
- Local overrides (``settings.local.json``, ``CLAUDE.local.md``)
- Sub-directory instruction files below the project root

Applications inject paths to define what to inspect. The library provides
the mechanism for discovering files, merging settings with full override
provenance and resolving which instruction files apply where.

Public API:
    ConfigInspector: Scans injected locations and resolves the effective config
    ConfigPaths: Dataclass defining the home directory and project root
    build_effective_config: Assemble an EffectiveConfig from scanned files
    merge_settings: Merge settings layers into a provenance tree
    build_instruction_list, build_instruction_stack, build_instruction_map:
        The three views of the instruction files
    classify_scope, owner_dir: Scope and owner-directory classification
    SessionStore, SessionState: Remembered project/directory selection
    ConfigError, ConfigFileError, ConfigValidationError: Exception types

Example:
    ```python
    from pathlib import Path
    from config_lens import ConfigInspector, ConfigPaths

    # Application injects paths (policy)
    paths = ConfigPaths(home=Path.home(), project=Path("~/src/app").expanduser())

    # Library provides mechanism
    inspector = ConfigInspector(paths)
    effective = inspector.effective_config(target_dir=paths.project / "packages" / "api")

    for entry in effective.instruction_stack:
        print(entry.injection_order, entry.scope.value, entry.file.path)
    ```
"""

from .builder import build_effective_config
from .exceptions import ConfigError
from .exceptions import ConfigFileError
from .exceptions import ConfigValidationError
from .inspector import ConfigInspector
from .instructions import build_instruction_list
from .instructions import build_instruction_map
from .instructions import build_instruction_stack
from .merger import merge_settings
from .merger import settings_to_dict
from .models import Category
from .models import ConfigPaths
from .models import ConfigScope
from .models import EffectiveConfig
from .models import EffectiveScope
from .models import FileDescriptor
from .models import MergedSettingNode
from .models import SettingsLayer
from .scope import classify_scope
from .scope import owner_dir
from .session import SessionState
from .session import SessionStore

__version__ = "0.1.0"

__all__ = [
    "ConfigInspector",
    "ConfigPaths",
    "ConfigScope",
    "Category",
    "EffectiveScope",
    "FileDescriptor",
    "SettingsLayer",
    "MergedSettingNode",
    "EffectiveConfig",
    "build_effective_config",
    "merge_settings",
    "settings_to_dict",
    "build_instruction_list",
    "build_instruction_stack",
    "build_instruction_map",
    "classify_scope",
    "owner_dir",
    "SessionState",
    "SessionStore",
    "ConfigError",
    "ConfigFileError",
    "ConfigValidationError",
]
