"""Starter dotfiles written after the package installs.

Files are only created, never overwritten. Like the git steps, every
problem is logged and the remaining files are still attempted.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from loadstar.install.events import EventChannel, PhaseStarted
from loadstar.wizard.phases import MultiplexerChoice, PromptChoice, ShellChoice
from loadstar.wizard.session import Session

logger = logging.getLogger(__name__)

PHASE_DOTFILES = "Dotfiles"

STARSHIP_TOML = """\
# Generated by loadstar
add_newline = true
command_timeout = 1000

[character]
success_symbol = "[❯](bold green)"
error_symbol = "[❯](bold red)"

[directory]
truncation_length = 3
truncate_to_repo = true

[git_branch]
symbol = " "

[cmd_duration]
min_time = 2000
"""

TMUX_CONF = """\
# Generated by loadstar
set -g mouse on
set -g base-index 1
setw -g pane-base-index 1
set -g renumber-windows on
set -g history-limit 50000
set -g default-terminal "tmux-256color"
set -sg escape-time 10

unbind C-b
set -g prefix C-a
bind C-a send-prefix

bind | split-window -h -c "#{pane_current_path}"
bind - split-window -v -c "#{pane_current_path}"
bind r source-file ~/.tmux.conf \\; display "Reloaded"
"""

# (catalog id, init line) for tools that hook into the shell.
SHELL_HOOKS: dict[ShellChoice, tuple[tuple[str, str], ...]] = {
    ShellChoice.ZSH: (
        ("starship", 'eval "$(starship init zsh)"'),
        ("zoxide", 'eval "$(zoxide init zsh)"'),
        ("direnv", 'eval "$(direnv hook zsh)"'),
        ("atuin", 'eval "$(atuin init zsh)"'),
        ("mise", 'eval "$(mise activate zsh)"'),
        ("fzf", "source <(fzf --zsh)"),
    ),
    ShellChoice.BASH: (
        ("starship", 'eval "$(starship init bash)"'),
        ("zoxide", 'eval "$(zoxide init bash)"'),
        ("direnv", 'eval "$(direnv hook bash)"'),
        ("atuin", 'eval "$(atuin init bash)"'),
        ("mise", 'eval "$(mise activate bash)"'),
        ("fzf", 'eval "$(fzf --bash)"'),
    ),
    ShellChoice.FISH: (
        ("starship", "starship init fish | source"),
        ("zoxide", "zoxide init fish | source"),
        ("direnv", "direnv hook fish | source"),
        ("atuin", "atuin init fish | source"),
        ("mise", "mise activate fish | source"),
        ("fzf", "fzf --fish | source"),
    ),
    ShellChoice.NUSHELL: (),
}

SNIPPET_NAMES: dict[ShellChoice, str] = {
    ShellChoice.ZSH: ".loadstar.zsh",
    ShellChoice.BASH: ".loadstar.bash",
    ShellChoice.FISH: ".config/fish/conf.d/loadstar.fish",
    ShellChoice.NUSHELL: ".config/nushell/loadstar.nu",
}


def render_shell_snippet(session: Session) -> str:
    """Shell init lines for the selected tools, in hook order."""
    shell = session.shell_config.shell
    lines = ["# Generated by loadstar"]
    for tool_id, line in SHELL_HOOKS[shell]:
        if not session.is_selected(tool_id):
            continue
        if tool_id == "starship" and session.shell_config.prompt is not PromptChoice.STARSHIP:
            continue
        lines.append(line)
    return "\n".join(lines) + "\n"


class DotfileWriter:
    """Writes starter config files under ``home_dir``."""

    def __init__(self, channel: EventChannel, home_dir: Path, config_dir: Path | None = None) -> None:
        self.channel = channel
        self.home_dir = home_dir
        self.config_dir = config_dir or home_dir / ".config"

    def planned(self, session: Session) -> list[tuple[Path, str]]:
        """(path, content) pairs this session would write."""
        files: list[tuple[Path, str]] = []
        shell_config = session.shell_config

        if shell_config.prompt is PromptChoice.STARSHIP and session.is_selected("starship"):
            files.append((self.config_dir / "starship.toml", STARSHIP_TOML))
        if shell_config.multiplexer is MultiplexerChoice.TMUX and session.is_selected("tmux"):
            files.append((self.home_dir / ".tmux.conf", TMUX_CONF))

        snippet = render_shell_snippet(session)
        if snippet.count("\n") > 1:
            files.append((self.home_dir / SNIPPET_NAMES[shell_config.shell], snippet))
        return files

    def run(self, session: Session) -> list[Path]:
        """Write every planned file that does not exist yet.

        Returns:
            Paths actually written.
        """
        self.channel.send(PhaseStarted(PHASE_DOTFILES))
        written: list[Path] = []
        for path, content in self.planned(session):
            if self.write(path, content):
                written.append(path)
        self.channel.log(f"[DOTFILES] {len(written)} file(s) written")
        return written

    def write(self, path: Path, content: str) -> bool:
        display = self._display(path)
        if path.exists():
            self.channel.log(f"  [SKIP] {display} already exists")
            return False
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            os.chmod(path, 0o644)
        except OSError as e:
            self.channel.log(f"  [WARN] Could not write {display}: {e}")
            logger.warning("Could not write %s: %s", path, e)
            return False
        self.channel.log(f"  Wrote {display}")
        return True

    def _display(self, path: Path) -> str:
        try:
            return f"~/{path.relative_to(self.home_dir)}"
        except ValueError:
            return str(path)
