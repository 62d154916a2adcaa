"""Instruction resolution: flat list, injection stack and directory map.

All three views are pure functions of the descriptors they receive and are
recomputed in full on every call.
"""

from collections.abc import Iterable

from .models import CONFIG_DIR_NAME
from .models import EffectiveScope
from .models import FileDescriptor
from .models import InstructionEntry
from .models import InstructionMapFile
from .models import InstructionMapNode
from .models import InstructionStackEntry
from .models import InstructionType
from .scope import classify_scope
from .scope import is_within
from .scope import join_path
from .scope import normalize_dir
from .scope import owner_dir
from .scope import relative_path


def _instruction_files(files: Iterable[FileDescriptor]) -> list[FileDescriptor]:
    return [file for file in files if file.category.is_instruction]


def build_instruction_list(files: Iterable[FileDescriptor]) -> list[InstructionEntry]:
    """Instruction files sorted global before project, documents before rules.

    Everything that is not global (project, local) sorts in the same tier;
    ties keep their input order.
    """
    entries = [
        InstructionEntry(
            file=file,
            scope=classify_scope(file),
            type=InstructionType.for_category(file.category),
        )
        for file in _instruction_files(files)
    ]

    entries.sort(key=lambda entry: (0 if entry.scope is EffectiveScope.GLOBAL else 1, entry.type.rank))
    return entries


def build_instruction_stack(chain: Iterable[FileDescriptor], project_dir: str) -> list[InstructionStackEntry]:
    """Annotate an injection chain with scope, order and owner directory.

    The chain must already be ordered lowest priority first; it is not
    re-sorted.

    Args:
        chain: Instruction files in injection order
        project_dir: Project root used to tell project from sub-directory files

    Returns:
        One entry per chain file, ``injection_order`` starting at 1
    """
    return [
        InstructionStackEntry(
            file=file,
            scope=classify_scope(file, project_dir),
            type=InstructionType.for_category(file.category),
            injection_order=index,
            owner_dir=owner_dir(file),
        )
        for index, file in enumerate(chain, start=1)
    ]


def find_scope_boundaries(stack: list[InstructionStackEntry]) -> set[int]:
    """Indices at which the scope differs from the previous entry."""
    return {index for index in range(1, len(stack)) if stack[index].scope is not stack[index - 1].scope}


def accumulated_scope_label(stack: list[InstructionStackEntry], up_to: int) -> str:
    """Scopes applied up to and including ``stack[up_to]``, e.g. ``User + Project``."""
    seen = {entry.scope for entry in stack[: up_to + 1]}
    return " + ".join(scope.display_name for scope in sorted(seen))


def build_instruction_map(
    global_files: Iterable[FileDescriptor],
    project_files: Iterable[FileDescriptor],
    project_dir: str,
    home_dir: str,
) -> list[InstructionMapNode]:
    """Directory tree of the instruction files across the whole project.

    Global files form a single root labelled ``~/.claude``. Project files are
    grouped by owner directory; each group hangs under its nearest grouped
    ancestor, so directories without instruction files are never
    materialized.

    Returns:
        Up to two roots, the global root first
    """
    roots = []

    global_node = _build_global_node(_instruction_files(global_files), home_dir)
    if global_node is not None:
        roots.append(global_node)

    project_node = _build_project_node(_instruction_files(project_files), project_dir)
    if project_node is not None:
        roots.append(project_node)

    return roots


def count_map_files(node: InstructionMapNode) -> int:
    """Number of files in a node and all of its descendants."""
    return len(node.files) + sum(count_map_files(child) for child in node.children)


def _map_files(files: list[FileDescriptor], node_path: str, project_dir: str | None) -> list[InstructionMapFile]:
    map_files = [
        InstructionMapFile(
            file=file,
            scope=classify_scope(file, project_dir),
            type=InstructionType.for_category(file.category),
            relative_path=relative_path(file.path, node_path),
        )
        for file in files
    ]
    map_files.sort(key=lambda map_file: map_file.type.rank)
    return map_files


def _build_global_node(files: list[FileDescriptor], home_dir: str) -> InstructionMapNode | None:
    if not files:
        return None

    path = join_path(home_dir, CONFIG_DIR_NAME)
    return InstructionMapNode(
        name=f"~/{CONFIG_DIR_NAME}",
        path=path,
        scope=EffectiveScope.GLOBAL,
        files=_map_files(files, path, None),
    )


def _build_project_node(files: list[FileDescriptor], project_dir: str) -> InstructionMapNode | None:
    if not files:
        return None

    root_path = normalize_dir(project_dir)
    groups: dict[str, list[FileDescriptor]] = {}
    for file in files:
        groups.setdefault(owner_dir(file), []).append(file)

    root = InstructionMapNode(
        name=root_path.rsplit("/", 1)[-1] or root_path,
        path=root_path,
        scope=EffectiveScope.PROJECT,
        files=_map_files(groups.pop(root_path, []), root_path, project_dir),
    )

    nodes = {root_path: root}
    # Shallow directories first so every ancestor exists before its descendants
    for directory in sorted(groups, key=lambda d: (d.count("/"), d)):
        parent = _nearest_ancestor(directory, nodes, root)
        node = InstructionMapNode(
            name=relative_path(directory, parent.path),
            path=directory,
            scope=EffectiveScope.SUBDIRECTORY,
            files=_map_files(groups[directory], directory, project_dir),
        )
        parent.children.append(node)
        nodes[directory] = node

    _sort_children(root)
    return root


def _nearest_ancestor(
    directory: str,
    nodes: dict[str, InstructionMapNode],
    root: InstructionMapNode,
) -> InstructionMapNode:
    """Deepest already-placed node containing directory, defaulting to the root."""
    ancestors = [path for path in nodes if is_within(directory, path)]
    if not ancestors:
        return root
    return nodes[max(ancestors, key=len)]


def _sort_children(node: InstructionMapNode) -> None:
    node.children.sort(key=lambda child: child.name)
    for child in node.children:
        _sort_children(child)
