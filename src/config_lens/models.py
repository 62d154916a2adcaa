"""Data models for config-lens."""

from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from functools import total_ordering
from pathlib import Path
from typing import Any

CONFIG_DIR_NAME = ".claude"
RULES_DIR_NAME = "rules"
INSTRUCTION_FILENAME = "CLAUDE.md"
LOCAL_INSTRUCTION_FILENAME = "CLAUDE.local.md"
SETTINGS_FILENAME = "settings.json"
LOCAL_SETTINGS_FILENAME = "settings.local.json"


class ConfigScope(Enum):
    """Declared scope of a discovered file, as assigned by the scanner."""

    GLOBAL = "global"
    PROJECT = "project"


class Category(Enum):
    """Kind of configuration artifact."""

    INSTRUCTION_DOCUMENT = "claude-md"
    SETTINGS = "settings"
    RULE = "rules"
    SKILL = "skills"
    HOOK = "hooks"
    AGENT = "agents"
    TEMPLATE = "templates"
    PLUGIN = "plugins"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]

    @property
    def is_instruction(self) -> bool:
        return self in (Category.INSTRUCTION_DOCUMENT, Category.RULE)

    @property
    def is_extension(self) -> bool:
        return self in EXTENSION_CATEGORIES


_CATEGORY_LABELS = {
    Category.INSTRUCTION_DOCUMENT: "CLAUDE.md",
    Category.SETTINGS: "Settings",
    Category.RULE: "Rules",
    Category.SKILL: "Skills",
    Category.HOOK: "Hooks",
    Category.AGENT: "Agents",
    Category.TEMPLATE: "Templates",
    Category.PLUGIN: "Plugins",
}

# Fixed display order of the extension groups
EXTENSION_CATEGORIES = (Category.SKILL, Category.AGENT, Category.TEMPLATE, Category.PLUGIN)


@total_ordering
class EffectiveScope(Enum):
    """Priority tier of a file after classification.

    Members are declared in override order: later scopes override earlier
    ones, so ``EffectiveScope.GLOBAL < EffectiveScope.LOCAL``.
    """

    GLOBAL = "global"
    PROJECT = "project"
    LOCAL = "local"
    SUBDIRECTORY = "subdirectory"

    @property
    def rank(self) -> int:
        return list(EffectiveScope).index(self)

    @property
    def display_name(self) -> str:
        return _SCOPE_DISPLAY_NAMES[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, EffectiveScope):
            return NotImplemented
        return self.rank < other.rank


_SCOPE_DISPLAY_NAMES = {
    EffectiveScope.GLOBAL: "User",
    EffectiveScope.PROJECT: "Project",
    EffectiveScope.LOCAL: "Local",
    EffectiveScope.SUBDIRECTORY: "Subdir",
}


class InstructionType(Enum):
    """Kind of instruction file, derived solely from its category."""

    DOCUMENT = "claude-md"
    RULE = "rule"

    @classmethod
    def for_category(cls, category: Category) -> "InstructionType":
        return cls.DOCUMENT if category is Category.INSTRUCTION_DOCUMENT else cls.RULE

    @property
    def rank(self) -> int:
        return 0 if self is InstructionType.DOCUMENT else 1


class MergeStrategy(Enum):
    REPLACE = "replace"
    ADDITIVE = "additive"


class ReferenceType(Enum):
    """How one configuration file points at another."""

    AT_IMPORT = "at-import"
    HOOK_SCRIPT = "hook-script"
    PLUGIN = "plugin"
    STATUSLINE = "statusline"


@dataclass(frozen=True)
class FileDescriptor:
    """One discovered configuration artifact.

    Attributes:
        path: Absolute path, unique key of the descriptor
        name: Display name (e.g. ``my-skill/SKILL.md`` for skills)
        scope: Declared scope assigned by the scanner
        category: Kind of artifact
        is_local_override: True for personal/untracked variants (``*.local.*``)
        is_directory: True when the artifact is a directory (templates, plugins)
    """

    path: str
    name: str
    scope: ConfigScope
    category: Category
    is_local_override: bool = False
    is_directory: bool = False

    @property
    def directory(self) -> str:
        """Lexical parent directory of the file."""
        trimmed = self.path.rstrip("/")
        index = trimmed.rfind("/")
        if index <= 0:
            return "/" if index == 0 else ""
        return trimmed[:index]


@dataclass(frozen=True)
class SettingsLayer:
    """One parsed settings document plus its priority scope.

    ``data`` must be a plain key/value mapping; callers reject documents that
    parse to anything else before building a layer.
    """

    scope: EffectiveScope
    source_file: str
    data: dict[str, Any]


@dataclass(frozen=True)
class SettingOverride:
    """A value superseded (or, for additive keys, contributed) by one layer."""

    scope: EffectiveScope
    source_file: str
    value: Any


@dataclass(frozen=True)
class MergedSettingNode:
    """One node of the merged settings tree.

    A node is a leaf iff it has no children. ``overrides`` is None unless more
    than one layer defined the path, and is ordered low-priority-first.
    """

    key: str
    path: str
    effective_value: Any
    source: EffectiveScope
    source_file: str
    is_leaf: bool
    children: list["MergedSettingNode"] | None = None
    overrides: list[SettingOverride] | None = None
    merge_strategy: MergeStrategy | None = None


@dataclass(frozen=True)
class InstructionEntry:
    file: FileDescriptor
    scope: EffectiveScope
    type: InstructionType


@dataclass(frozen=True)
class InstructionStackEntry:
    """An instruction file at its position in the injection chain."""

    file: FileDescriptor
    scope: EffectiveScope
    type: InstructionType
    injection_order: int
    owner_dir: str


@dataclass(frozen=True)
class InstructionMapFile:
    file: FileDescriptor
    scope: EffectiveScope
    type: InstructionType
    relative_path: str


@dataclass
class InstructionMapNode:
    """A directory owning instruction files in the instruction map."""

    name: str
    path: str
    scope: EffectiveScope
    files: list[InstructionMapFile] = field(default_factory=list)
    children: list["InstructionMapNode"] = field(default_factory=list)


@dataclass(frozen=True)
class ExtensionEntry:
    file: FileDescriptor
    category: Category


@dataclass(frozen=True)
class FileReference:
    """A reference from one configuration file to another.

    Attributes:
        source_file: Path of the referencing file
        target_file: Path of the referenced file
        type: Kind of reference
        raw_reference: Text that produced the reference (e.g. ``@rules/style.md``)
    """

    source_file: str
    target_file: str
    type: ReferenceType
    raw_reference: str


@dataclass(frozen=True)
class ScanResult:
    files: list[FileDescriptor]
    references: list[FileReference] = field(default_factory=list)


@dataclass(frozen=True)
class ProjectTreeNode:
    """A project directory and whether it holds instruction files."""

    name: str
    path: str
    has_instructions: bool
    children: list["ProjectTreeNode"] = field(default_factory=list)


@dataclass
class EffectiveConfig:
    """Read-only snapshot of the effective configuration at one directory."""

    instructions: list[InstructionEntry]
    settings: list[MergedSettingNode]
    extensions: list[ExtensionEntry]
    instruction_stack: list[InstructionStackEntry] | None = None
    instruction_map: list[InstructionMapNode] | None = None

    def extensions_by_category(self) -> dict[Category, list[ExtensionEntry]]:
        """Group extensions by category, always listing all four categories."""
        groups: dict[Category, list[ExtensionEntry]] = {category: [] for category in EXTENSION_CATEGORIES}
        for entry in self.extensions:
            groups[entry.category].append(entry)
        return groups


@dataclass(frozen=True)
class ConfigPaths:
    """Locations to inspect.

    Applications inject these paths to define where configuration lives.

    Attributes:
        home: Home directory holding the global config directory (required)
        project: Project root (optional - None inspects global config only)
    """

    home: Path
    project: Path | None = None

    @property
    def global_config_dir(self) -> Path:
        return self.home / CONFIG_DIR_NAME

    @property
    def project_config_dir(self) -> Path | None:
        if self.project is None:
            return None
        return self.project / CONFIG_DIR_NAME
