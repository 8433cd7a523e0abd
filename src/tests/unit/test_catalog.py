"""Unit tests for the catalog and install directives."""

import pytest

from loadstar import catalog
from loadstar.catalog import (
    CaskDirective,
    Category,
    FormulaDirective,
    PackageDirective,
    ScriptDirective,
    ShellDirective,
    parse_catalog,
)
from loadstar.errors import CatalogError


@pytest.mark.unit
class TestCatalogData:
    """Test the packaged catalog."""

    def test_entries_load(self) -> None:
        """Test the packaged catalog parses."""
        entries = catalog.entries()
        assert len(entries) > 80
        assert len({entry.id for entry in entries}) == len(entries)

    def test_every_category_is_used(self) -> None:
        """Test each category has at least one entry."""
        for category in Category.all():
            assert catalog.by_category(category), category

    def test_dependencies_exist(self) -> None:
        """Test dependency ids refer to catalog entries."""
        ids = {entry.id for entry in catalog.entries()}
        for entry in catalog.entries():
            assert set(entry.dependencies) <= ids, entry.id

    def test_get(self) -> None:
        """Test lookup by id."""
        gh = catalog.get("gh")
        assert gh.name == "GitHub CLI"
        assert gh.dependencies == ["git"]

    def test_get_unknown(self) -> None:
        """Test unknown ids raise CatalogError."""
        with pytest.raises(CatalogError, match="Unknown catalog id"):
            catalog.get("emacs-but-good")

    def test_essential(self) -> None:
        """Test essentials carry the essential tag."""
        essential = catalog.essential()
        assert "git" in {entry.id for entry in essential}
        assert all(entry.has_tag("essential") for entry in essential)

    def test_directive_variants(self) -> None:
        """Test YAML install blocks become the right directive types."""
        assert isinstance(catalog.get("jq").install, FormulaDirective)
        assert isinstance(catalog.get("docker").install, CaskDirective)
        assert isinstance(catalog.get("claude-code").install, PackageDirective)
        assert isinstance(catalog.get("rustup").install, ScriptDirective)
        assert isinstance(catalog.get("oh-my-zsh").install, ShellDirective)


@pytest.mark.unit
class TestDirectiveCommands:
    """Test command rendering."""

    def test_formula(self) -> None:
        """Test formula command."""
        assert FormulaDirective(package="jq").command() == "brew install jq"

    def test_cask(self) -> None:
        """Test cask argv."""
        assert CaskDirective(package="kitty").argv() == ["brew", "install", "--cask", "kitty"]

    def test_package_managers(self) -> None:
        """Test language package manager commands."""
        assert PackageDirective(method="npm", package="x").command() == "npm install -g x"
        assert PackageDirective(method="cargo", package="y").argv() == ["cargo", "install", "y"]
        assert PackageDirective(method="pip", package="z").argv() == ["pip3", "install", "z"]

    def test_script(self) -> None:
        """Test script directives pipe into sh."""
        directive = ScriptDirective(url="https://sh.rustup.rs")
        assert directive.command() == "curl -fsSL https://sh.rustup.rs | sh"

    def test_shell_alias(self) -> None:
        """Test shell directives accept the ``command`` key."""
        directive = ShellDirective.model_validate({"method": "shell", "command": "echo hi"})
        assert directive.command() == "echo hi"


@pytest.mark.unit
class TestParseCatalog:
    """Test catalog parsing errors."""

    ENTRY = """
- id: "jq"
  name: "jq"
  description: "JSON"
  category: productivity
  install:
    method: formula
    package: "jq"
  url: "https://jqlang.github.io/jq"
"""

    def test_parse_single(self) -> None:
        """Test a minimal entry parses with defaults."""
        (entry,) = parse_catalog(self.ENTRY)
        assert entry.tags == []
        assert entry.category is Category.PRODUCTIVITY

    def test_duplicate_ids(self) -> None:
        """Test duplicate ids are rejected."""
        with pytest.raises(CatalogError, match="Duplicate"):
            parse_catalog(self.ENTRY + self.ENTRY)

    def test_unknown_method(self) -> None:
        """Test unknown install methods are rejected."""
        with pytest.raises(CatalogError, match="Invalid catalog entry"):
            parse_catalog(self.ENTRY.replace("method: formula", "method: snap"))

    def test_invalid_yaml(self) -> None:
        """Test malformed YAML is reported as CatalogError."""
        with pytest.raises(CatalogError):
            parse_catalog("- id: [unclosed")
