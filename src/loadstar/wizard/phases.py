"""Wizard phases and the choice enumerations the user cycles through."""

from __future__ import annotations

from enum import Enum
from typing import TypeVar

_C = TypeVar("_C", bound="Choice")


class Choice(Enum):
    """Enum whose members carry a display label and a description."""

    def __init__(self, label: str, description: str) -> None:
        self.label = label
        self.description = description

    @classmethod
    def all(cls: type[_C]) -> list[_C]:
        return list(cls)

    @property
    def index(self) -> int:
        return type(self).all().index(self)


class Phase(Choice):
    """Phases of the wizard, in the only order they can be visited."""

    BOOT = ("BOOT", "Initializing consciousness transfer...")
    IDENTITY = ("IDENTITY", "Establishing neural identity profile")
    SHELL = ("SHELL", "Configuring command interface layer")
    DEV_TOOLS = ("DEV TOOLS", "Selecting development arsenal")
    APPS = ("APPS", "Choosing software companions")
    REVIEW = ("REVIEW", "Reviewing configuration matrix")
    INSTALL = ("INSTALL", "Executing reality modification")
    COMPLETE = ("COMPLETE", "Transformation complete")

    def next(self) -> Phase | None:
        phases = Phase.all()
        i = self.index
        return phases[i + 1] if i + 1 < len(phases) else None

    def prev(self) -> Phase | None:
        i = self.index
        return Phase.all()[i - 1] if i > 0 else None


class SetupType(Choice):
    PERSONAL = ("Personal", "Personal development machine with all the bells and whistles")
    WORK = ("Work", "Professional setup with work-oriented tools")
    MINIMAL = ("Minimal", "Essential tools only - fast and lean")
    FULL = ("Full", "Everything. Maximum power. No compromises.")

    @property
    def icon(self) -> str:
        return {
            SetupType.PERSONAL: "🏠",
            SetupType.WORK: "💼",
            SetupType.MINIMAL: "🍃",
            SetupType.FULL: "🚀",
        }[self]


class ShellChoice(Choice):
    ZSH = ("Zsh", "Feature-rich, highly customizable (recommended)")
    BASH = ("Bash", "Classic Unix shell, maximum compatibility")
    FISH = ("Fish", "Friendly interactive shell with great defaults")
    NUSHELL = ("Nushell", "Modern shell with structured data")


class PromptChoice(Choice):
    STARSHIP = ("Starship", "Cross-shell prompt, fast & customizable (recommended)")
    POWERLEVEL10K = ("Powerlevel10k", "Zsh theme with instant prompt")
    PURE = ("Pure", "Pretty, minimal and fast prompt")
    MINIMAL = ("Minimal", "Simple, distraction-free prompt")
    DEFAULT = ("Default", "Keep system default")


class TerminalChoice(Choice):
    DEFAULT = ("Keep Current", "Don't install a new terminal")
    WEZTERM = ("WezTerm", "GPU-accelerated with Lua config")
    ALACRITTY = ("Alacritty", "Minimal, fast, GPU-accelerated")
    KITTY = ("Kitty", "Feature-rich, GPU-accelerated")
    ITERM2 = ("iTerm2", "macOS classic with many features")
    GHOSTTY = ("Ghostty", "Native, fast, by Mitchell Hashimoto")


class MultiplexerChoice(Choice):
    TMUX = ("Tmux", "Classic multiplexer, huge ecosystem")
    ZELLIJ = ("Zellij", "Modern alternative with better defaults")


def cycle(options: list[_C], current: _C, forward: bool = True) -> _C:
    """Step to the next or previous option, wrapping at both ends."""
    step = 1 if forward else -1
    return options[(options.index(current) + step) % len(options)]


def cycle_optional(
    options: list[_C], current: _C | None, forward: bool = True
) -> _C | None:
    """Like ``cycle`` but with ``None`` as an extra slot after the last option."""
    slots: list[_C | None] = [*options, None]
    step = 1 if forward else -1
    return slots[(slots.index(current) + step) % len(slots)]
