"""Scope classification and owner-directory resolution.

Paths are handled as plain strings and compared lexically: nothing here
touches the filesystem, and trailing slashes are normalized away before any
comparison.
"""

from .models import CONFIG_DIR_NAME
from .models import LOCAL_INSTRUCTION_FILENAME
from .models import RULES_DIR_NAME
from .models import ConfigScope
from .models import EffectiveScope
from .models import FileDescriptor

# (suffix, replacement) pairs applied to find the directory that owns an
# instruction file, per declared scope. First match wins.
OWNER_DIR_SUFFIXES: dict[ConfigScope, tuple[tuple[str, str], ...]] = {
    ConfigScope.GLOBAL: ((f"/{CONFIG_DIR_NAME}/{RULES_DIR_NAME}", f"/{CONFIG_DIR_NAME}"),),
    ConfigScope.PROJECT: (
        (f"/{CONFIG_DIR_NAME}/{RULES_DIR_NAME}", ""),
        (f"/{CONFIG_DIR_NAME}", ""),
    ),
}


def normalize_dir(path: str) -> str:
    """Strip trailing slashes, keeping the filesystem root as ``/``."""
    stripped = path.rstrip("/")
    if not stripped and path.startswith("/"):
        return "/"
    return stripped


def join_path(base: str, *parts: str) -> str:
    """Join path segments lexically."""
    return "/".join([normalize_dir(base).rstrip("/"), *parts])


def parent_dir(path: str) -> str:
    """Lexical parent of a path (``/a/b/c.md`` -> ``/a/b``)."""
    trimmed = normalize_dir(path)
    index = trimmed.rfind("/")
    if index < 0:
        return ""
    if index == 0:
        return "/"
    return trimmed[:index]


def relative_path(path: str, base: str) -> str:
    """Path relative to base, or the path unchanged when outside base."""
    path = normalize_dir(path)
    base = normalize_dir(base)
    if path == base:
        return ""
    prefix = base if base.endswith("/") else f"{base}/"
    if path.startswith(prefix):
        return path[len(prefix) :]
    return path


def is_within(path: str, base: str) -> bool:
    """True when path lies strictly inside base."""
    path = normalize_dir(path)
    base = normalize_dir(base)
    prefix = base if base.endswith("/") else f"{base}/"
    return path != base and path.startswith(prefix)


def classify_scope(file: FileDescriptor, project_dir: str | None = None) -> EffectiveScope:
    """Map a discovered file to its effective priority scope.

    Rule order (first match wins):
    1. Local override flag, or the local instruction file name -> LOCAL
    2. Declared global scope -> GLOBAL
    3. No project context -> PROJECT
    4. Owning directory is the project root, its config directory or the
       config directory's rules folder -> PROJECT
    5. Anything else -> SUBDIRECTORY

    Args:
        file: Descriptor produced by the scanner
        project_dir: Project root, required to tell project files from
            sub-directory files

    Returns:
        Effective scope of the file
    """
    if file.is_local_override or file.name == LOCAL_INSTRUCTION_FILENAME:
        return EffectiveScope.LOCAL

    if file.scope is ConfigScope.GLOBAL:
        return EffectiveScope.GLOBAL

    if project_dir is None:
        return EffectiveScope.PROJECT

    project_dirs = {
        normalize_dir(project_dir),
        join_path(project_dir, CONFIG_DIR_NAME),
        join_path(project_dir, CONFIG_DIR_NAME, RULES_DIR_NAME),
    }
    if normalize_dir(file.directory) in project_dirs:
        return EffectiveScope.PROJECT

    return EffectiveScope.SUBDIRECTORY


def owner_dir(file: FileDescriptor) -> str:
    """Directory logically responsible for an instruction file.

    ``~/.claude/rules/x.md`` is owned by ``~/.claude``; a project's
    ``.claude/rules/x.md`` and ``.claude/CLAUDE.md`` are owned by the
    directory containing ``.claude``. A ``rules`` directory outside a
    ``.claude`` directory is an ordinary owner.
    """
    directory = normalize_dir(file.directory)

    for suffix, replacement in OWNER_DIR_SUFFIXES[file.scope]:
        if directory.endswith(suffix):
            return directory[: -len(suffix)] + replacement or "/"

    return directory
