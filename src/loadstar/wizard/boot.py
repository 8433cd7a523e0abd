"""Boot intro animation state."""

from __future__ import annotations

from dataclasses import dataclass, field

BOOT_MESSAGES: tuple[str, ...] = (
    "BIOS CHECK... ",
    "NEURAL INTERFACE ONLINE... ",
    "SCANNING REALITY MATRIX... ",
    "QUANTUM ENTANGLEMENT STABLE... ",
    "CONSCIOUSNESS UPLOAD READY... ",
    "READY.",
)

SPINNER_FRAMES: tuple[str, ...] = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")


@dataclass
class TypeWriter:
    """Reveals ``text`` one character per tick."""

    text: str
    position: int = 0

    def tick(self) -> None:
        if self.position < len(self.text):
            self.position += 1

    def skip(self) -> None:
        self.position = len(self.text)

    @property
    def visible(self) -> str:
        return self.text[: self.position]

    @property
    def complete(self) -> bool:
        return self.position >= len(self.text)


@dataclass
class BootSequence:
    """Types out the boot messages in order.

    Each message becomes visible only after the previous one is fully typed.
    """

    writers: list[TypeWriter] = field(
        default_factory=lambda: [TypeWriter(m) for m in BOOT_MESSAGES]
    )
    current: int = 0

    def tick(self) -> None:
        if self.complete:
            return
        writer = self.writers[self.current]
        writer.tick()
        if writer.complete:
            self.current += 1

    def skip(self) -> None:
        for writer in self.writers:
            writer.skip()
        self.current = len(self.writers)

    @property
    def complete(self) -> bool:
        return self.current >= len(self.writers)

    def visible_lines(self) -> list[str]:
        """Lines typed so far, including the partial one."""
        last = min(self.current, len(self.writers) - 1)
        return [w.visible for w in self.writers[: last + 1] if w.visible]


@dataclass
class Spinner:
    frame: int = 0

    def tick(self) -> None:
        self.frame = (self.frame + 1) % len(SPINNER_FRAMES)

    def __str__(self) -> str:
        return SPINNER_FRAMES[self.frame]
