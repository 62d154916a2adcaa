"""Integration tests for ConfigInspector."""

import json
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
from config_lens import Category
from config_lens import ConfigFileError
from config_lens import ConfigInspector
from config_lens import ConfigPaths
from config_lens import EffectiveScope
from config_lens.merger import find_setting
from config_lens.models import ReferenceType


def write(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


class TestConfigIntegration:
    """Integration tests for realistic configuration layouts."""

    @pytest.fixture
    def temp_paths(self):
        """Create a home directory with a project below it."""
        with TemporaryDirectory() as tmpdir:
            tmpdir_path = Path(tmpdir)
            paths = ConfigPaths(
                home=tmpdir_path / "home",
                project=tmpdir_path / "home" / "src" / "app",
            )
            paths.project.mkdir(parents=True)
            yield paths

    @pytest.fixture
    def inspector(self, temp_paths):
        """Create ConfigInspector with temp paths."""
        return ConfigInspector(temp_paths)

    @pytest.fixture
    def monorepo(self, temp_paths):
        """Populate global config and a monorepo project."""
        home = temp_paths.home
        project = temp_paths.project

        write(home / ".claude" / "CLAUDE.md", "# Global\n@rules/typescript.md\n")
        write(home / ".claude" / "rules" / "typescript.md", "Use strict mode")
        write(
            home / ".claude" / "settings.json",
            json.dumps(
                {
                    "theme": "dark",
                    "enabledPlugins": ["tools"],
                    "hooks": {"PreToolUse": [{"matcher": "Bash", "hooks": [{"type": "command", "command": "lint"}]}]},
                }
            ),
        )
        (home / ".claude" / "plugins" / "tools").mkdir(parents=True)
        write(home / ".claude" / "agents" / "review.md")

        write(project / "CLAUDE.md", "# App")
        write(project / "CLAUDE.local.md", "# Mine")
        write(
            project / ".claude" / "settings.json",
            json.dumps(
                {
                    "theme": "light",
                    "hooks": {"PreToolUse": [{"matcher": "Edit", "hooks": [{"type": "command", "command": "fmt"}]}]},
                }
            ),
        )
        write(project / ".claude" / "settings.local.json", json.dumps({"editor": {"tabSize": 4}}))
        write(project / ".claude" / "rules" / "dev.md")
        write(project / "packages" / "CLAUDE.md")
        write(project / "packages" / "api" / "CLAUDE.md")
        write(project / "docs" / "guides" / "CLAUDE.md")
        return temp_paths

    def test_global_only(self, temp_paths):
        """Test inspecting without a project resolves global config only."""
        write(temp_paths.home / ".claude" / "CLAUDE.md", "# Global")
        write(temp_paths.home / ".claude" / "settings.json", '{"theme": "dark"}')

        inspector = ConfigInspector(ConfigPaths(home=temp_paths.home))
        config = inspector.effective_config()

        assert [entry.scope for entry in config.instructions] == [EffectiveScope.GLOBAL]
        assert find_setting(config.settings, "theme").effective_value == "dark"
        assert config.instruction_stack is None
        assert config.instruction_map is None

    def test_effective_config_at_sub_directory(self, inspector, monorepo):
        """Test the full snapshot for a nested package."""
        project = monorepo.project
        config = inspector.effective_config(target_dir=project / "packages" / "api")

        assert [(entry.injection_order, entry.scope) for entry in config.instruction_stack] == [
            (1, EffectiveScope.GLOBAL),
            (2, EffectiveScope.GLOBAL),
            (3, EffectiveScope.PROJECT),
            (4, EffectiveScope.LOCAL),
            (5, EffectiveScope.PROJECT),
            (6, EffectiveScope.SUBDIRECTORY),
            (7, EffectiveScope.SUBDIRECTORY),
        ]
        assert config.instruction_stack[-1].owner_dir == str(project / "packages" / "api")

        global_root, project_root = config.instruction_map
        assert global_root.name == "~/.claude"
        assert project_root.name == "app"
        assert [child.name for child in project_root.children] == ["docs/guides", "packages"]
        assert [child.name for child in project_root.children[1].children] == ["api"]

        theme = find_setting(config.settings, "theme")
        assert theme.effective_value == "light"
        assert theme.source is EffectiveScope.PROJECT
        assert find_setting(config.settings, "editor.tabSize").source is EffectiveScope.LOCAL
        matchers = [hook["matcher"] for hook in find_setting(config.settings, "hooks.PreToolUse").effective_value]
        assert matchers == ["Bash", "Edit"]

        groups = config.extensions_by_category()
        assert [entry.file.name for entry in groups[Category.PLUGIN]] == ["tools"]
        assert [entry.file.name for entry in groups[Category.AGENT]] == ["review.md"]

    def test_scan_references(self, inspector, monorepo):
        """Test @ imports and plugin references are resolved during scans."""
        references = inspector.scan().references

        types = {(ref.type, Path(ref.target_file).name) for ref in references}
        assert (ReferenceType.AT_IMPORT, "typescript.md") in types
        assert (ReferenceType.PLUGIN, "tools") in types

    def test_merged_settings(self, inspector, monorepo):
        """Test the merged settings document."""
        merged = inspector.merged_settings()

        assert merged["theme"] == "light"
        assert merged["enabledPlugins"] == ["tools"]
        assert merged["editor"] == {"tabSize": 4}
        assert len(merged["hooks"]["PreToolUse"]) == 2

    def test_project_tree(self, inspector, monorepo):
        """Test the project tree flags instruction directories."""
        tree = inspector.project_tree()

        assert tree.has_instructions
        flags = {child.name: child.has_instructions for child in tree.children}
        assert flags == {".claude": False, "docs": False, "packages": True}

    def test_rescan_sees_changes(self, inspector, monorepo):
        """Test each call reflects the filesystem at call time."""
        assert inspector.merged_settings()["theme"] == "light"

        write(monorepo.project / ".claude" / "settings.local.json", json.dumps({"theme": "green"}))

        assert inspector.merged_settings()["theme"] == "green"

    def test_missing_project_directory(self, temp_paths):
        """Test a non-existent project directory raises ConfigFileError."""
        inspector = ConfigInspector(ConfigPaths(home=temp_paths.home, project=temp_paths.home / "nope"))

        with pytest.raises(ConfigFileError, match="does not exist"):
            inspector.effective_config()

    def test_instruction_chain_requires_project(self, temp_paths):
        """Test project-only operations need a project."""
        with pytest.raises(ConfigFileError):
            ConfigInspector(ConfigPaths(home=temp_paths.home)).instruction_chain()
