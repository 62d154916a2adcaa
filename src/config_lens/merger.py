"""Settings merge engine with override provenance.

Layers are flattened into a single path-keyed map (lowest priority first)
and the merged tree is rebuilt from that map in a second pass, so no nested
structure is ever mutated while merging.
"""

from collections.abc import Iterable
from copy import deepcopy
from dataclasses import dataclass
from dataclasses import field
from typing import Any

from .models import EffectiveScope
from .models import MergedSettingNode
from .models import MergeStrategy
from .models import SettingOverride
from .models import SettingsLayer
from .utils import concat_unique
from .utils import flatten_object


@dataclass
class _MergedEntry:
    """Merge state of one dot-path."""

    value: Any
    scope: EffectiveScope
    source_file: str
    layer_index: int
    overrides: list[SettingOverride] = field(default_factory=list)
    is_additive: bool = False


def merge_settings(
    layers: Iterable[SettingsLayer],
    additive_keys: Iterable[str] = (),
) -> list[MergedSettingNode]:
    """Merge settings layers into a tree of nodes annotated with provenance.

    Merge order (later overrides earlier): layers are applied in the order
    given, lowest priority first. Arrays directly under a key listed in
    ``additive_keys`` are concatenated and de-duplicated instead of replaced.

    Args:
        layers: Parsed settings documents, lowest priority first
        additive_keys: Top-level keys whose child arrays accumulate

    Returns:
        Top-level nodes of the merged tree, in first-seen key order
    """
    additive_keys = frozenset(additive_keys)
    merged: dict[str, _MergedEntry] = {}

    for layer_index, layer in enumerate(layers):
        for path, value in flatten_object(layer.data):
            existing = merged.get(path)

            if existing is None:
                merged[path] = _MergedEntry(
                    value=deepcopy(value),
                    scope=layer.scope,
                    source_file=layer.source_file,
                    layer_index=layer_index,
                )
            elif existing.layer_index == layer_index:
                # A dotted key colliding with a nested path in the same
                # document: the later one wins, nothing was superseded
                existing.value = deepcopy(value)
            elif (
                isinstance(value, list)
                and isinstance(existing.value, list)
                and _is_additive_path(path, additive_keys)
            ):
                # Nothing is replaced: record what this layer contributed
                existing.overrides.append(SettingOverride(layer.scope, layer.source_file, deepcopy(value)))
                existing.value = concat_unique(existing.value, deepcopy(value))
                existing.is_additive = True
                existing.layer_index = layer_index
            else:
                existing.overrides.append(SettingOverride(existing.scope, existing.source_file, existing.value))
                existing.value = deepcopy(value)
                existing.scope = layer.scope
                existing.source_file = layer.source_file
                existing.layer_index = layer_index

    return _build_tree(merged, "")


def _is_additive_path(path: str, additive_keys: frozenset[str]) -> bool:
    """True when path is a direct child of one of the additive keys."""
    for key in additive_keys:
        prefix = f"{key}."
        if path.startswith(prefix) and "." not in path[len(prefix) :]:
            return True
    return False


def _build_tree(merged: dict[str, _MergedEntry], parent_path: str) -> list[MergedSettingNode]:
    prefix = f"{parent_path}." if parent_path else ""
    nodes = []

    for path, entry in merged.items():
        if not path.startswith(prefix):
            continue
        key = path[len(prefix) :]
        if "." in key:
            continue

        child_prefix = f"{path}."
        children = None
        if any(other.startswith(child_prefix) for other in merged):
            children = _build_tree(merged, path) or None

        nodes.append(
            MergedSettingNode(
                key=key,
                path=path,
                effective_value=entry.value,
                source=entry.scope,
                source_file=entry.source_file,
                is_leaf=children is None,
                children=children,
                overrides=list(entry.overrides) or None,
                merge_strategy=MergeStrategy.ADDITIVE if entry.is_additive else None,
            )
        )

    return nodes


def find_setting(nodes: list[MergedSettingNode], path: str) -> MergedSettingNode | None:
    """Look up a node of a merged tree by its dot-path."""
    for node in nodes:
        if node.path == path:
            return node
        if node.children and path.startswith(f"{node.path}."):
            return find_setting(node.children, path)
    return None


def settings_to_dict(nodes: list[MergedSettingNode]) -> dict[str, Any]:
    """Rebuild the effective settings document from a merged tree.

    Objects are rebuilt from their children so keys contributed by different
    layers are combined; a branch whose winning value is not an object (an
    object replaced by a scalar or array) keeps that winning value.
    """
    result: dict[str, Any] = {}

    for node in nodes:
        if node.children is not None and isinstance(node.effective_value, dict):
            result[node.key] = settings_to_dict(node.children)
        else:
            result[node.key] = node.effective_value

    return result
