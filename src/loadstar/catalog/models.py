"""Pydantic models for catalog entries and install directives.

An install directive is a closed, tagged union keyed on ``method``. Each
variant knows how to render itself as the command the executor runs; the
executor decides batching and "already installed" checks from the variant
type.
"""

from __future__ import annotations

import shlex
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class Category(str, Enum):
    """Catalog categories, in display order."""

    SHELL = "shell"
    EDITOR = "editor"
    GIT = "git"
    TERMINAL = "terminal"
    FILE_MANAGER = "file_manager"
    SEARCH = "search"
    SYSTEM = "system"
    NETWORK = "network"
    CONTAINER = "container"
    LANGUAGE = "language"
    DATABASE = "database"
    SECURITY = "security"
    PRODUCTIVITY = "productivity"
    MEDIA = "media"
    CLOUD = "cloud"
    AI = "ai"

    @property
    def display_name(self) -> str:
        return _CATEGORY_NAMES[self]

    @property
    def icon(self) -> str:
        return _CATEGORY_ICONS[self]

    @classmethod
    def all(cls) -> list[Category]:
        return list(cls)


_CATEGORY_NAMES: dict[Category, str] = {
    Category.SHELL: "Shell & Prompt",
    Category.EDITOR: "Editors",
    Category.GIT: "Git & Version Control",
    Category.TERMINAL: "Terminal Tools",
    Category.FILE_MANAGER: "File Management",
    Category.SEARCH: "Search & Navigation",
    Category.SYSTEM: "System Utilities",
    Category.NETWORK: "Network Tools",
    Category.CONTAINER: "Containers & VMs",
    Category.LANGUAGE: "Languages & Runtimes",
    Category.DATABASE: "Databases",
    Category.SECURITY: "Security",
    Category.PRODUCTIVITY: "Productivity",
    Category.MEDIA: "Media",
    Category.CLOUD: "Cloud & DevOps",
    Category.AI: "AI & ML Tools",
}

_CATEGORY_ICONS: dict[Category, str] = {
    Category.SHELL: "🐚",
    Category.EDITOR: "✏️",
    Category.GIT: "⎇",
    Category.TERMINAL: "⌨",
    Category.FILE_MANAGER: "📁",
    Category.SEARCH: "🔍",
    Category.SYSTEM: "⚙️",
    Category.NETWORK: "🌐",
    Category.CONTAINER: "📦",
    Category.LANGUAGE: "⟨⟩",
    Category.DATABASE: "⛁",
    Category.SECURITY: "🔒",
    Category.PRODUCTIVITY: "⚡",
    Category.MEDIA: "🎬",
    Category.CLOUD: "☁️",
    Category.AI: "🤖",
}


class FormulaDirective(BaseModel):
    """Homebrew formula, installed with ``brew install``."""

    method: Literal["formula"] = "formula"
    package: str

    model_config = {"frozen": True}

    def argv(self) -> list[str]:
        return ["brew", "install", self.package]

    def command(self) -> str:
        return shlex.join(self.argv())


class CaskDirective(BaseModel):
    """Homebrew cask, installed with ``brew install --cask``."""

    method: Literal["cask"] = "cask"
    package: str

    model_config = {"frozen": True}

    def argv(self) -> list[str]:
        return ["brew", "install", "--cask", self.package]

    def command(self) -> str:
        return shlex.join(self.argv())


# Language and OS package managers, keyed by method name.
_PACKAGE_MANAGER_ARGV: dict[str, list[str]] = {
    "cargo": ["cargo", "install"],
    "npm": ["npm", "install", "-g"],
    "pip": ["pip3", "install"],
    "go": ["go", "install"],
    "apt": ["sudo", "apt", "install", "-y"],
}


class PackageDirective(BaseModel):
    """Package installed through a language or OS package manager."""

    method: Literal["cargo", "npm", "pip", "go", "apt"]
    package: str

    model_config = {"frozen": True}

    def argv(self) -> list[str]:
        return [*_PACKAGE_MANAGER_ARGV[self.method], self.package]

    def command(self) -> str:
        return shlex.join(self.argv())


class ScriptDirective(BaseModel):
    """Remote install script piped into ``sh``."""

    method: Literal["script"] = "script"
    url: str

    model_config = {"frozen": True}

    def command(self) -> str:
        return f"curl -fsSL {self.url} | sh"


class ShellDirective(BaseModel):
    """Raw shell command run through ``/bin/bash -c``."""

    method: Literal["shell"] = "shell"
    command_line: str = Field(alias="command")

    model_config = {"frozen": True, "populate_by_name": True}

    def command(self) -> str:
        return self.command_line


InstallDirective = Annotated[
    Union[
        FormulaDirective,
        CaskDirective,
        PackageDirective,
        ScriptDirective,
        ShellDirective,
    ],
    Field(discriminator="method"),
]


class CatalogEntry(BaseModel):
    """One installable tool.

    Attributes:
        id: Unique identifier used in selections and saved runs.
        name: Display name; also the name reported in install events.
        description: One-line description shown in selection lists.
        category: Category used by the selection screens.
        install: How to install this entry.
        config_files: Config files the tool reads, for reference only.
        dependencies: Ids of entries this tool expects to be present.
            Informational; the executor does not resolve them.
        tags: Free-form tags. ``essential`` entries are pre-selected.
        url: Project homepage.
    """

    id: str
    name: str
    description: str
    category: Category
    install: InstallDirective
    config_files: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    url: str

    model_config = {"frozen": True}

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags
