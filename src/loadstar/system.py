"""Host system detection.

Detects OS, architecture and available package managers so the wizard can
show the host it is configuring and the executor knows whether Homebrew
needs bootstrapping.
"""

from __future__ import annotations

import os
import platform
import shutil
import socket
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from loadstar.errors import UnsupportedPlatformError


class OS(Enum):
    """Supported operating systems."""

    MACOS = "macOS"
    LINUX = "Linux"


class Arch(Enum):
    """Supported CPU architectures."""

    ARM64 = "arm64"
    X86_64 = "x86_64"


@dataclass(frozen=True)
class LinuxDistro:
    id: str
    name: str


@dataclass(frozen=True)
class PackageManagers:
    """Paths of package managers found on ``PATH`` (None when missing)."""

    homebrew: Path | None = None
    cargo: Path | None = None
    npm: Path | None = None
    pip: Path | None = None
    apt: Path | None = None


@dataclass(frozen=True)
class SystemInfo:
    """Snapshot of the host environment.

    Attributes:
        os: Detected operating system.
        arch: Detected CPU architecture.
        hostname: Short host name.
        shell: Login shell from ``$SHELL``.
        home_dir: User home directory.
        config_dir: XDG config directory (``~/.config`` by default).
        package_managers: Package managers found on PATH.
        linux_distro: Distribution info, Linux only.
    """

    os: OS
    arch: Arch
    hostname: str
    shell: str
    home_dir: Path
    config_dir: Path
    package_managers: PackageManagers = field(default_factory=PackageManagers)
    linux_distro: LinuxDistro | None = None

    @classmethod
    def detect(cls) -> SystemInfo:
        """Detect the current system.

        Raises:
            UnsupportedPlatformError: On anything but macOS/Linux on
                arm64/x86_64.
        """
        os_kind = _detect_os()
        home_dir = Path(os.environ.get("HOME") or Path.home())
        config_dir = Path(os.environ.get("XDG_CONFIG_HOME") or home_dir / ".config")

        return cls(
            os=os_kind,
            arch=_detect_arch(),
            hostname=socket.gethostname().split(".")[0] or "unknown",
            shell=os.environ.get("SHELL", "/bin/zsh"),
            home_dir=home_dir,
            config_dir=config_dir,
            package_managers=detect_package_managers(),
            linux_distro=(
                detect_linux_distro() if os_kind is OS.LINUX else None
            ),
        )

    def has_homebrew(self) -> bool:
        return self.package_managers.homebrew is not None

    def describe(self) -> str:
        distro = f" ({self.linux_distro.name})" if self.linux_distro else ""
        return f"{self.os.value}{distro} {self.arch.value} @ {self.hostname}"


def _detect_os() -> OS:
    system = platform.system()
    if system == "Darwin":
        return OS.MACOS
    if system == "Linux":
        return OS.LINUX
    raise UnsupportedPlatformError(f"Unsupported operating system: {system}")


def _detect_arch() -> Arch:
    machine = platform.machine().lower()
    if machine in ("arm64", "aarch64"):
        return Arch.ARM64
    if machine in ("x86_64", "amd64"):
        return Arch.X86_64
    raise UnsupportedPlatformError(f"Unsupported architecture: {machine}")


def _which(program: str) -> Path | None:
    found = shutil.which(program)
    return Path(found) if found else None


def detect_package_managers() -> PackageManagers:
    return PackageManagers(
        homebrew=_which("brew"),
        cargo=_which("cargo"),
        npm=_which("npm"),
        pip=_which("pip3") or _which("pip"),
        apt=_which("apt"),
    )


def detect_linux_distro(os_release: Path = Path("/etc/os-release")) -> LinuxDistro | None:
    """Read distribution id and name from ``os-release``."""
    try:
        content = os_release.read_text(encoding="utf-8")
    except OSError:
        return None

    values: dict[str, str] = {}
    for line in content.splitlines():
        key, sep, value = line.partition("=")
        if sep:
            values[key.strip()] = value.strip().strip('"')

    distro_id = values.get("ID", "")
    if not distro_id:
        return None
    return LinuxDistro(id=distro_id, name=values.get("NAME", distro_id))
