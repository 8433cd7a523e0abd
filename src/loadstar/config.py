"""Configuration management for loadstar.

Two files live in the loadstar home directory (``~/.loadstar`` unless
``LOADSTAR_HOME`` is set):

- ``config.yml``: optional user settings, validated by ``LoadstarConfig``.
- ``last_run.json``: answers from the last completed run, used to
  prepopulate the wizard next time.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from rich.console import Console

from loadstar import catalog
from loadstar.errors import CatalogError, ConfigError

if TYPE_CHECKING:
    from loadstar.wizard.session import Session

console = Console(stderr=True)

LAST_RUN_VERSION = "1.0"


class LoadstarConfig(BaseModel):
    """User settings from ``config.yml``.

    Example:
        tick_rate_ms: 50
        log_buffer_lines: 500
        generate_ssh_key: true
        setup_git_signing: false
        write_dotfiles: true
        extra_essentials:
          - lazygit
          - gh
    """

    tick_rate_ms: int = Field(default=50, ge=10, le=1000)
    log_buffer_lines: int = Field(default=500, ge=50)
    generate_ssh_key: bool = True
    setup_git_signing: bool = False
    write_dotfiles: bool = True
    extra_essentials: list[str] = Field(default_factory=list)

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("extra_essentials")
    @classmethod
    def validate_catalog_ids(cls, v: list[str]) -> list[str]:
        """Every extra essential must name a catalog entry."""
        for entry_id in v:
            try:
                catalog.get(entry_id)
            except CatalogError as e:
                raise ValueError(str(e)) from e
        return v

    @property
    def tick_rate(self) -> float:
        """Tick interval in seconds."""
        return self.tick_rate_ms / 1000


def get_config_dir() -> Path:
    """Get the loadstar home directory.

    Returns:
        ``$LOADSTAR_HOME`` if set, otherwise ``~/.loadstar``.
    """
    override = os.environ.get("LOADSTAR_HOME")
    return Path(override) if override else Path.home() / ".loadstar"


def get_config_path() -> Path:
    return get_config_dir() / "config.yml"


def get_last_run_path() -> Path:
    return get_config_dir() / "last_run.json"


def get_log_path() -> Path:
    return get_config_dir() / "loadstar.log"


def parse_config(text: str) -> LoadstarConfig:
    """Parse ``config.yml`` content.

    Raises:
        ConfigError: If the YAML is malformed or fails validation.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}") from e

    if data is None:
        return LoadstarConfig()
    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping of settings")

    try:
        return LoadstarConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(str(e)) from e


def load_config(path: Path | None = None) -> LoadstarConfig:
    """Load user settings, falling back to defaults.

    A missing file silently yields defaults; an unreadable or invalid one
    prints a warning and yields defaults.
    """
    config_path = path or get_config_path()
    if not config_path.exists():
        return LoadstarConfig()

    try:
        return parse_config(config_path.read_text(encoding="utf-8"))
    except (ConfigError, OSError) as e:
        console.print(
            f"[yellow]Warning: Could not load {config_path}: {e}[/yellow]",
            highlight=False,
        )
        return LoadstarConfig()


def load_last_run() -> dict[str, Any] | None:
    """Load the answers saved by the last completed run.

    Returns:
        The saved values, or None if the file doesn't exist, is corrupted
        or was written by an incompatible version.
    """
    config_path = get_last_run_path()

    if not config_path.exists():
        return None

    try:
        with open(config_path) as f:
            config = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        console.print(
            f"[yellow]Warning: Could not load last run: {e}[/yellow]",
            highlight=False,
        )
        return None

    if not isinstance(config, dict):
        console.print(
            "[yellow]Warning: Invalid last run format, ignoring it[/yellow]",
            highlight=False,
        )
        return None

    version = config.get("version", LAST_RUN_VERSION)
    if version != LAST_RUN_VERSION:
        console.print(
            f"[yellow]Warning: Last run version {version} not supported, "
            f"ignoring it[/yellow]",
            highlight=False,
        )
        return None

    return config


def save_last_run(session: Session) -> None:
    """Save the session's answers for the next run.

    Failures are reported as warnings; saving is never fatal.
    """
    config_dir = get_config_dir()
    try:
        config_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        console.print(
            f"[yellow]Warning: Could not create config directory: {e}[/yellow]",
            highlight=False,
        )
        return

    data = {
        "version": LAST_RUN_VERSION,
        **session.to_saved(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    try:
        with open(get_last_run_path(), "w") as f:
            json.dump(data, f, indent=2)
    except OSError as e:
        console.print(
            f"[yellow]Warning: Could not save last run: {e}[/yellow]",
            highlight=False,
        )


def clear_last_run() -> bool:
    """Delete the saved last run. Returns True if a file was removed."""
    config_path = get_last_run_path()
    if not config_path.exists():
        return False
    try:
        config_path.unlink()
    except OSError as e:
        console.print(
            f"[yellow]Warning: Could not clear last run: {e}[/yellow]",
            highlight=False,
        )
        return False
    return True
