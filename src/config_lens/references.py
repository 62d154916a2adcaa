"""Cross-file references: ``@`` imports, hook scripts, plugins and status lines."""

import json
import re
from collections.abc import Mapping
from typing import Any

from .models import Category
from .models import FileDescriptor
from .models import FileReference
from .models import ReferenceType

_AT_REFERENCE = re.compile(r"^@(.+)$", re.MULTILINE)


def extract_at_references(content: str) -> list[str]:
    """Return the targets of ``@path`` lines in an instruction document.

    Only ``@`` at the start of a line counts.

    Examples:
        >>> extract_at_references("# Notes\\n@rules/style.md\\nsee @inline\\n")
        ['rules/style.md']
    """
    return [ref for ref in (match.strip() for match in _AT_REFERENCE.findall(content)) if ref]


def parse_settings_json(content: str) -> dict[str, Any] | None:
    """Parse a settings document, returning None unless it is a JSON object."""
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def _mentions(text: str, file: FileDescriptor) -> bool:
    return file.name in text or file.path in text


def _hook_commands(hooks: Any) -> list[str]:
    """Commands of a ``hooks`` section.

    Accepts both ``{event: [{type, command}]}`` and the matcher form
    ``{event: [{matcher, hooks: [{type, command}]}]}``.
    """
    commands = []
    if not isinstance(hooks, dict):
        return commands

    for entries in hooks.values():
        if not isinstance(entries, list):
            continue
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            nested = entry.get("hooks")
            for hook in nested if isinstance(nested, list) else [entry]:
                if isinstance(hook, dict) and hook.get("type") == "command" and isinstance(hook.get("command"), str):
                    commands.append(hook["command"])

    return commands


def _plugin_names(enabled_plugins: Any) -> list[str]:
    if isinstance(enabled_plugins, list):
        return [name for name in enabled_plugins if isinstance(name, str)]
    if isinstance(enabled_plugins, dict):
        return [name for name, enabled in enabled_plugins.items() if enabled]
    return []


def _status_line_command(status_line: Any) -> str | None:
    if isinstance(status_line, str):
        return status_line
    if isinstance(status_line, dict) and isinstance(status_line.get("command"), str):
        return status_line["command"]
    return None


def _settings_references(
    settings_file: FileDescriptor,
    settings: dict[str, Any],
    files: list[FileDescriptor],
) -> list[FileReference]:
    references = []

    for command in _hook_commands(settings.get("hooks")):
        target = next((file for file in files if _mentions(command, file)), None)
        if target is not None:
            references.append(FileReference(settings_file.path, target.path, ReferenceType.HOOK_SCRIPT, command))

    for plugin_name in _plugin_names(settings.get("enabledPlugins")):
        target = next(
            (file for file in files if file.category is Category.PLUGIN and file.name == plugin_name),
            None,
        )
        if target is not None:
            references.append(FileReference(settings_file.path, target.path, ReferenceType.PLUGIN, plugin_name))

    command = _status_line_command(settings.get("statusLine"))
    if command:
        target = next((file for file in files if _mentions(command, file)), None)
        if target is not None:
            references.append(FileReference(settings_file.path, target.path, ReferenceType.STATUSLINE, command))

    return references


def resolve_references(files: list[FileDescriptor], contents: Mapping[str, str]) -> list[FileReference]:
    """Resolve references between the given files.

    Args:
        files: Scanned files; only references to these are reported
        contents: Raw text of instruction documents and settings files, keyed by path

    Returns:
        References in file order
    """
    references = []

    for file in files:
        content = contents.get(file.path)
        if not content:
            continue

        if file.category is Category.INSTRUCTION_DOCUMENT:
            for raw in extract_at_references(content):
                target = next((other for other in files if other.path.endswith(raw)), None)
                if target is not None:
                    references.append(FileReference(file.path, target.path, ReferenceType.AT_IMPORT, f"@{raw}"))

        elif file.category is Category.SETTINGS and file.name.endswith(".json"):
            settings = parse_settings_json(content)
            if settings is not None:
                references.extend(_settings_references(file, settings, files))

    return references
