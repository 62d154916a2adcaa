"""Filesystem discovery of configuration files.

Produces the FileDescriptors consumed by the resolution engine. Unreadable
files and directories are logged and skipped; directory listings are sorted
by name so scans are deterministic.
"""

import logging
from collections import deque
from pathlib import Path

from .models import CONFIG_DIR_NAME
from .models import INSTRUCTION_FILENAME
from .models import LOCAL_INSTRUCTION_FILENAME
from .models import LOCAL_SETTINGS_FILENAME
from .models import RULES_DIR_NAME
from .models import SETTINGS_FILENAME
from .models import Category
from .models import ConfigScope
from .models import FileDescriptor
from .models import ProjectTreeNode

logger = logging.getLogger(__name__)

SKILL_FILENAME = "SKILL.md"

# Directory names never descended into when walking a project
IGNORED_DIRS = frozenset(
    {
        "node_modules",
        ".git",
        "dist",
        "build",
        ".next",
        ".nuxt",
        ".output",
        ".vercel",
        ".turbo",
        "coverage",
        "__pycache__",
        ".venv",
        "venv",
        "target",
        ".svelte-kit",
    }
)

# Categories whose text the engine (or reference resolution) needs
CONTENT_CATEGORIES = frozenset({Category.SETTINGS, Category.INSTRUCTION_DOCUMENT})


# ===== Descriptor helpers =====


def _detect_file(
    path: Path,
    scope: ConfigScope,
    category: Category,
    is_local_override: bool = False,
) -> FileDescriptor | None:
    """Return a descriptor for path if it is an existing file."""
    if not path.is_file():
        return None
    return FileDescriptor(
        path=str(path),
        name=path.name,
        scope=scope,
        category=category,
        is_local_override=is_local_override,
    )


def _list_dir(directory: Path) -> list[Path]:
    if not directory.is_dir():
        return []
    try:
        return sorted(directory.iterdir(), key=lambda entry: entry.name)
    except OSError as e:
        logger.warning(f"Failed to list {directory}: {e}")
        return []


def _detect_files_in_dir(
    directory: Path,
    scope: ConfigScope,
    category: Category,
    suffix: str | None = None,
) -> list[FileDescriptor]:
    """Return a descriptor for every entry of directory, optionally filtered by suffix."""
    return [
        FileDescriptor(
            path=str(entry),
            name=entry.name,
            scope=scope,
            category=category,
            is_directory=entry.is_dir(),
        )
        for entry in _list_dir(directory)
        if suffix is None or entry.name.endswith(suffix)
    ]


def _detect_skills(directory: Path, scope: ConfigScope) -> list[FileDescriptor]:
    """Return the SKILL.md of every skill sub-directory, named ``<skill>/SKILL.md``."""
    skills = []
    for entry in _list_dir(directory):
        if not entry.is_dir():
            continue
        skill_file = entry / SKILL_FILENAME
        if skill_file.is_file():
            skills.append(
                FileDescriptor(
                    path=str(skill_file),
                    name=f"{entry.name}/{SKILL_FILENAME}",
                    scope=scope,
                    category=Category.SKILL,
                )
            )
    return skills


def _detect_rules(config_dir: Path, scope: ConfigScope) -> list[FileDescriptor]:
    return _detect_files_in_dir(config_dir / RULES_DIR_NAME, scope, Category.RULE, suffix=".md")


def _present(*files: FileDescriptor | None) -> list[FileDescriptor]:
    return [file for file in files if file is not None]


# ===== Scope scans =====


def scan_global_config(home: Path) -> list[FileDescriptor]:
    """Discover everything under the global config directory (``~/.claude``).

    Args:
        home: Home directory

    Returns:
        Instruction document, settings, rules, skills, agents, templates and plugins
    """
    config_dir = home / CONFIG_DIR_NAME
    files = _present(
        _detect_file(config_dir / INSTRUCTION_FILENAME, ConfigScope.GLOBAL, Category.INSTRUCTION_DOCUMENT),
        _detect_file(config_dir / SETTINGS_FILENAME, ConfigScope.GLOBAL, Category.SETTINGS),
        _detect_file(config_dir / LOCAL_SETTINGS_FILENAME, ConfigScope.GLOBAL, Category.SETTINGS, True),
    )

    files.extend(_detect_rules(config_dir, ConfigScope.GLOBAL))
    files.extend(_detect_skills(config_dir / "skills", ConfigScope.GLOBAL))
    files.extend(_detect_files_in_dir(config_dir / "agents", ConfigScope.GLOBAL, Category.AGENT, suffix=".md"))
    files.extend(_detect_files_in_dir(config_dir / "templates", ConfigScope.GLOBAL, Category.TEMPLATE))
    files.extend(_detect_files_in_dir(config_dir / "plugins", ConfigScope.GLOBAL, Category.PLUGIN))

    return files


def scan_project_config(project_dir: Path) -> list[FileDescriptor]:
    """Discover the project root's instruction documents and ``.claude`` contents."""
    config_dir = project_dir / CONFIG_DIR_NAME
    files = _present(
        _detect_file(project_dir / INSTRUCTION_FILENAME, ConfigScope.PROJECT, Category.INSTRUCTION_DOCUMENT),
        _detect_file(config_dir / INSTRUCTION_FILENAME, ConfigScope.PROJECT, Category.INSTRUCTION_DOCUMENT),
        _detect_file(config_dir / SETTINGS_FILENAME, ConfigScope.PROJECT, Category.SETTINGS),
        _detect_file(config_dir / LOCAL_SETTINGS_FILENAME, ConfigScope.PROJECT, Category.SETTINGS, True),
    )

    files.extend(_detect_rules(config_dir, ConfigScope.PROJECT))
    files.extend(_detect_skills(config_dir / "skills", ConfigScope.PROJECT))

    return files


def scan_dir_instructions(directory: Path, scope: ConfigScope = ConfigScope.PROJECT) -> list[FileDescriptor]:
    """Discover the instruction files a single directory contributes."""
    config_dir = directory / CONFIG_DIR_NAME
    files = _present(
        _detect_file(directory / INSTRUCTION_FILENAME, scope, Category.INSTRUCTION_DOCUMENT),
        _detect_file(config_dir / INSTRUCTION_FILENAME, scope, Category.INSTRUCTION_DOCUMENT),
        _detect_file(directory / LOCAL_INSTRUCTION_FILENAME, scope, Category.INSTRUCTION_DOCUMENT, True),
    )
    files.extend(_detect_rules(config_dir, scope))
    return files


# ===== Instruction chain =====


def build_instruction_chain(target_dir: Path, project_dir: Path, home: Path) -> list[FileDescriptor]:
    """Instruction files applied at target_dir, lowest priority first.

    Order:
    1. Global instruction document
    2. Global rules
    3. ``CLAUDE.md`` of each directory between home and the project root
    4. Project root instructions
    5. Instructions of each directory from the project root down to target_dir

    Args:
        target_dir: Working directory to resolve for
        project_dir: Project root
        home: Home directory

    Returns:
        The injection chain
    """
    global_dir = home / CONFIG_DIR_NAME
    chain = _present(_detect_file(global_dir / INSTRUCTION_FILENAME, ConfigScope.GLOBAL, Category.INSTRUCTION_DOCUMENT))
    chain.extend(_detect_rules(global_dir, ConfigScope.GLOBAL))

    if project_dir != home and project_dir.is_relative_to(home):
        current = home
        for segment in project_dir.relative_to(home).parts[:-1]:
            current = current / segment
            ancestor = _detect_file(current / INSTRUCTION_FILENAME, ConfigScope.GLOBAL, Category.INSTRUCTION_DOCUMENT)
            if ancestor is not None:
                chain.append(ancestor)

    chain.extend(scan_dir_instructions(project_dir))

    if target_dir != project_dir and target_dir.is_relative_to(project_dir):
        current = project_dir
        for segment in target_dir.relative_to(project_dir).parts:
            current = current / segment
            chain.extend(scan_dir_instructions(current))

    return chain


# ===== Project tree =====


def _has_instruction_files(directory: Path) -> bool:
    return bool(scan_dir_instructions(directory))


def _child_dirs(directory: Path, include_config_dir: bool) -> list[Path]:
    children = []
    for entry in _list_dir(directory):
        if not entry.is_dir() or entry.name in IGNORED_DIRS:
            continue
        if entry.name.startswith(".") and not (include_config_dir and entry.name == CONFIG_DIR_NAME):
            continue
        children.append(entry)
    return children


def scan_project_tree(project_dir: Path, max_depth: int = 5) -> ProjectTreeNode:
    """Directory tree of the project, flagging directories with instruction files.

    Hidden directories other than ``.claude`` and well-known build/dependency
    directories are skipped.
    """

    def build_node(directory: Path, depth: int) -> ProjectTreeNode:
        children = []
        if depth < max_depth:
            children = [build_node(child, depth + 1) for child in _child_dirs(directory, include_config_dir=True)]
        return ProjectTreeNode(
            name=directory.name,
            path=str(directory),
            has_instructions=_has_instruction_files(directory),
            children=children,
        )

    return build_node(project_dir, 0)


def collect_project_instructions(project_dir: Path, max_depth: int = 5) -> list[FileDescriptor]:
    """Every instruction file in the project tree, parents before children."""
    files = []
    pending = deque([(project_dir, 0)])

    while pending:
        directory, depth = pending.popleft()
        files.extend(scan_dir_instructions(directory))
        if depth < max_depth:
            pending.extend((child, depth + 1) for child in _child_dirs(directory, include_config_dir=False))

    return files


# ===== Content =====


def read_file_content(path: str | Path) -> str | None:
    """Read a text file.

    Returns:
        File text, or None if the file is missing or unreadable
    """
    path = Path(path)
    if not path.is_file():
        return None

    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read {path}: {e}")
        return None


def read_contents(files: list[FileDescriptor]) -> dict[str, str]:
    """Read the settings and instruction documents among files, keyed by path."""
    contents = {}
    for file in files:
        if file.is_directory or file.category not in CONTENT_CATEGORIES:
            continue
        content = read_file_content(file.path)
        if content is not None:
            contents[file.path] = content
    return contents
