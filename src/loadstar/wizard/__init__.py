"""Interactive setup wizard.

The phase state machine lives in ``session`` and ``phases``; the
``controller`` turns key presses and timer ticks into state changes; the
Textual app in ``tui`` draws it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from loadstar.wizard.controller import WizardController

__all__ = ["launch_wizard"]


def launch_wizard(controller: WizardController) -> WizardController:
    """Launch the Textual wizard.

    Args:
        controller: Controller holding the session to run.

    Returns:
        The same controller after the app exits.
    """
    from loadstar.wizard.tui import run_wizard

    return run_wizard(controller)
