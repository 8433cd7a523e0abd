"""Git and GitHub setup run after the package installs.

Every step here is advisory: failures are logged to the event channel with
a ``[WARN]`` or ``[ERROR]`` marker and never change the install counts or
stop the steps that follow.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from loadstar.errors import CommandNotFoundError
from loadstar.install.events import EventChannel, PhaseStarted
from loadstar.install.process import CommandResult, Runner
from loadstar.wizard.session import Session

logger = logging.getLogger(__name__)

PHASE_GIT = "Git & GitHub Setup"

GIT_DEFAULTS: tuple[tuple[str, str], ...] = (
    ("init.defaultBranch", "main"),
    ("push.autoSetupRemote", "true"),
    ("pull.rebase", "true"),
    ("fetch.prune", "true"),
    ("rebase.autoStash", "true"),
)

DELTA_SETTINGS: tuple[tuple[str, str], ...] = (
    ("core.pager", "delta"),
    ("interactive.diffFilter", "delta --color-only"),
    ("delta.navigate", "true"),
    ("delta.line-numbers", "true"),
)

SSH_CONFIG_MARKER = "# Added by loadstar"


def extract_gpg_key_id(output: str) -> str | None:
    """Extract the long key id from ``gpg --list-secret-keys`` output.

    The key id follows the slash on the first ``sec`` line, e.g.
    ``sec   ed25519/ABCDEF1234567890 2024-01-01 [SC]``.
    """
    for line in output.splitlines():
        stripped = line.strip()
        if stripped.startswith("sec") and "/" in stripped:
            after_slash = stripped.split("/", 1)[1].split()
            if after_slash:
                return after_slash[0]
    return None


class GitSetup:
    """Configures git identity, SSH keys, gh and GPG signing.

    Args:
        channel: Event channel for log lines.
        runner: Process runner.
        home_dir: Home directory that holds ``.ssh``.
        hostname: Used in the title of uploaded SSH keys.
        macos: Use the macOS keychain for ssh-agent.
    """

    def __init__(
        self,
        channel: EventChannel,
        runner: Runner,
        home_dir: Path,
        hostname: str = "localhost",
        macos: bool = False,
    ) -> None:
        self.channel = channel
        self.runner = runner
        self.home_dir = home_dir
        self.hostname = hostname
        self.macos = macos

    @property
    def ssh_dir(self) -> Path:
        return self.home_dir / ".ssh"

    def run(self, session: Session) -> None:
        self.channel.send(PhaseStarted(PHASE_GIT))

        self.configure_identity(session)

        key_path = self.ensure_ssh_key(session) if session.generate_ssh_key else None
        if key_path is not None:
            self.add_key_to_agent(key_path)

        if session.is_selected("gh"):
            self.setup_gh_cli(key_path)

        if session.setup_git_signing:
            self.setup_gpg_signing(session)

        self.channel.log("[GIT] Git & GitHub setup complete")

    # ------------------------------------------------------------------
    # git config
    # ------------------------------------------------------------------

    def configure_identity(self, session: Session) -> None:
        self.channel.log("[GIT] Configuring git identity...")

        if session.identity.name:
            self.git_config("user.name", session.identity.name)
        if session.identity.email:
            self.git_config("user.email", session.identity.email)

        for key, value in GIT_DEFAULTS:
            self.git_config(key, value)

        if session.is_selected("delta"):
            for key, value in DELTA_SETTINGS:
                self.git_config(key, value)

        self.git_config("url.git@github.com:.insteadOf", "https://github.com/")
        self.channel.log("[GIT] Git identity configured")

    def git_config(self, key: str, value: str) -> bool:
        result = self._try_run(["git", "config", "--global", key, value])
        if result is not None and result.ok:
            self.channel.log(f"  git config --global {key} = {value}")
            return True
        detail = result.stderr.strip() if result is not None else "git not found"
        self.channel.log(f"  [WARN] git config {key} failed: {detail}")
        return False

    # ------------------------------------------------------------------
    # SSH
    # ------------------------------------------------------------------

    def ensure_ssh_key(self, session: Session) -> Path | None:
        """Reuse an existing key or generate an ed25519 key.

        Returns:
            Path of the private key, or None if none could be created.
        """
        for key_name, label in (("id_ed25519", "SSH"), ("id_rsa", "RSA")):
            existing = self.ssh_dir / key_name
            if existing.exists():
                self.channel.log(
                    f"[SSH] Existing {label} key found at ~/.ssh/{key_name},"
                    " skipping generation"
                )
                self.show_public_key(existing)
                return existing

        self.channel.log("[SSH] Generating ed25519 SSH key...")
        try:
            self.ssh_dir.mkdir(parents=True, exist_ok=True)
            os.chmod(self.ssh_dir, 0o700)
        except OSError as e:
            self.channel.log(f"  [ERROR] Failed to create ~/.ssh: {e}")
            return None

        key_path = self.ssh_dir / "id_ed25519"
        comment = session.identity.email or f"{session.identity.name or 'user'}@loadstar"
        argv = ["ssh-keygen", "-t", "ed25519", "-C", comment, "-f", str(key_path), "-N", ""]

        try:
            result = self.runner.run(argv)
        except CommandNotFoundError as e:
            self.channel.log(f"  [ERROR] Could not run ssh-keygen: {e}")
            return None
        if not result.ok:
            self.channel.log(f"  [ERROR] ssh-keygen failed: {result.stderr.strip()}")
            return None

        self.channel.log("[SSH] SSH key generated successfully")
        try:
            os.chmod(key_path, 0o600)
        except OSError as e:
            self.channel.log(f"  [WARN] Could not set key permissions: {e}")
        self.show_public_key(key_path)
        return key_path

    def show_public_key(self, private_key: Path) -> None:
        try:
            public = private_key.with_suffix(".pub").read_text(encoding="utf-8").strip()
        except OSError:
            return
        if len(public) > 60:
            public = f"{public[:30]}...{public[-20:]}"
        self.channel.log(f"  Public key: {public}")

    def add_key_to_agent(self, key_path: Path) -> None:
        self.channel.log("[SSH] Adding key to ssh-agent...")
        self._try_run(["ssh-agent", "-s"])

        if self.macos:
            self.write_ssh_config(key_path)
            argv = ["ssh-add", "--apple-use-keychain", str(key_path)]
        else:
            argv = ["ssh-add", str(key_path)]

        try:
            result = self.runner.run(argv)
        except CommandNotFoundError as e:
            self.channel.log(f"  [WARN] Could not run ssh-add: {e}")
            return
        if result.ok:
            self.channel.log("  Key added to ssh-agent")
        else:
            self.channel.log(f"  [WARN] ssh-add: {result.stderr.strip()}")

    def write_ssh_config(self, key_path: Path) -> None:
        """Append a keychain block to ``~/.ssh/config`` unless one exists."""
        config_path = self.ssh_dir / "config"
        try:
            existing = config_path.read_text(encoding="utf-8")
        except OSError:
            existing = ""
        if "AddKeysToAgent" in existing:
            return

        block = (
            f"\n{SSH_CONFIG_MARKER}\n"
            "Host github.com\n"
            "    AddKeysToAgent yes\n"
            "    UseKeychain yes\n"
            f"    IdentityFile {key_path}\n"
            "\n"
            "Host *\n"
            "    AddKeysToAgent yes\n"
            "    UseKeychain yes\n"
        )
        try:
            with open(config_path, "a", encoding="utf-8") as f:
                f.write(block)
            os.chmod(config_path, 0o644)
        except OSError as e:
            self.channel.log(f"  [WARN] Could not write ~/.ssh/config: {e}")
            return
        self.channel.log("  Wrote ~/.ssh/config (Keychain integration)")

    # ------------------------------------------------------------------
    # GitHub CLI
    # ------------------------------------------------------------------

    def setup_gh_cli(self, key_path: Path | None) -> None:
        version = self._try_run(["gh", "--version"])
        if version is None or not version.ok:
            self.channel.log("[GH] GitHub CLI not found, skipping auth setup")
            return

        status = self._try_run(["gh", "auth", "status"])
        if status is None or not status.ok:
            self.channel.log("[GH] GitHub CLI auth requires interactive login")
            self.channel.log("  Run after install: gh auth login --protocol ssh --web")
            return

        self.channel.log("[GH] Already authenticated with GitHub CLI")
        if key_path is not None:
            self.upload_ssh_key(key_path)
        self._try_run(["gh", "auth", "setup-git"])
        self.channel.log("  Set gh as git credential helper")

    def upload_ssh_key(self, key_path: Path) -> None:
        pub_path = key_path.with_suffix(".pub")
        try:
            public = pub_path.read_text(encoding="utf-8")
        except OSError:
            return

        parts = public.split()
        key_body = parts[1] if len(parts) > 1 else ""
        listing = self._try_run(["gh", "ssh-key", "list"])
        if key_body and listing is not None and key_body in listing.stdout:
            self.channel.log("  SSH key already on GitHub, skipping upload")
            return

        self.channel.log("[GH] Uploading SSH key to GitHub...")
        title = f"loadstar ({self.hostname})"
        try:
            result = self.runner.run(["gh", "ssh-key", "add", str(pub_path), "--title", title])
        except CommandNotFoundError as e:
            self.channel.log(f"  [WARN] Could not run gh ssh-key add: {e}")
            return
        if result.ok:
            self.channel.log(f"  SSH key uploaded as '{title}'")
        else:
            self.channel.log(f"  [WARN] Failed to upload SSH key: {result.stderr.strip()}")

    # ------------------------------------------------------------------
    # GPG
    # ------------------------------------------------------------------

    def setup_gpg_signing(self, session: Session) -> None:
        version = self._try_run(["gpg", "--version"])
        if version is None or not version.ok:
            self.channel.log("[GPG] GnuPG not found, skipping signing setup")
            self.channel.log("  Install gnupg and re-run, or set up manually")
            return

        email = session.identity.email
        if not email:
            self.channel.log("[GPG] No email set, skipping signing setup")
            return

        self.channel.log("[GPG] Checking for existing GPG keys...")
        listing = self._try_run(["gpg", "--list-secret-keys", "--keyid-format=long", email])
        output = listing.stdout if listing is not None else ""
        key_id = extract_gpg_key_id(output) if output.strip() else None

        if key_id is None:
            self.channel.log("[GPG] No GPG key found for this email")
            self.channel.log("  Run after install: gpg --full-generate-key")
            self.channel.log("  Then: git config --global user.signingkey <KEY_ID>")
            self.channel.log("  Then: git config --global commit.gpgsign true")
            return

        self.channel.log("  Existing GPG key found, configuring git to use it")
        self.git_config("user.signingkey", key_id)
        self.git_config("commit.gpgsign", "true")
        self.git_config("tag.gpgsign", "true")
        self.channel.log(f"  Git configured to sign with key {key_id}")

    def _try_run(self, argv: list[str]) -> CommandResult | None:
        try:
            return self.runner.run(argv)
        except CommandNotFoundError as e:
            logger.debug("%s", e)
            return None
