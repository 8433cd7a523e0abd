"""Textual application for the loadstar wizard."""

from __future__ import annotations

from typing import Any

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from loadstar.wizard.controller import Key, WizardController
from loadstar.wizard.render import render


class LoadstarApp(App[None]):
    """Full-screen wizard.

    Key presses go to ``WizardController.handle_key`` and a timer at the
    configured tick rate calls ``WizardController.step``. The screen is a
    single Static re-rendered from controller state after each of those.
    """

    CSS = """
    Screen {
        background: $surface;
    }

    #wizard {
        padding: 0 1;
    }
    """

    # Keys Textual would otherwise use for focus and quitting.
    BINDINGS = [
        Binding("ctrl+c", "forward('ctrl+c')", "Quit", show=False, priority=True),
        Binding("tab", "forward('tab')", show=False, priority=True),
        Binding("shift+tab", "forward('shift+tab')", show=False, priority=True),
        Binding("escape", "forward('escape')", show=False, priority=True),
    ]

    def __init__(self, controller: WizardController, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.controller = controller

    def compose(self) -> ComposeResult:
        yield Static(id="wizard")

    def on_mount(self) -> None:
        self.refresh_view()
        self.set_interval(self.controller.config.tick_rate, self.advance_frame)

    def on_key(self, event: events.Key) -> None:
        event.stop()
        self.send_key(Key(event.key, event.character))

    def action_forward(self, name: str) -> None:
        self.send_key(Key(name))

    def send_key(self, key: Key) -> None:
        self.controller.handle_key(key)
        self.after_update()

    def advance_frame(self) -> None:
        self.controller.step()
        self.after_update()

    def after_update(self) -> None:
        if self.controller.should_quit:
            self.exit()
            return
        self.refresh_view()

    def refresh_view(self) -> None:
        self.query_one("#wizard", Static).update(render(self.controller))


def run_wizard(controller: WizardController) -> WizardController:
    """Run the wizard until the user quits.

    Returns:
        The controller, for reading the final counters.
    """
    LoadstarApp(controller).run()
    return controller
