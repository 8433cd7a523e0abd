"""Integration tests for the Textual wizard using the Pilot API."""

import pytest

pytest.importorskip("textual")

from loadstar.config import LoadstarConfig
from loadstar.wizard.controller import WizardController
from loadstar.wizard.phases import Phase
from loadstar.wizard.session import Session
from loadstar.wizard.tui import LoadstarApp


def make_app() -> LoadstarApp:
    controller = WizardController(Session(selected={"jq"}), LoadstarConfig(tick_rate_ms=1000))
    return LoadstarApp(controller)


@pytest.mark.integration
@pytest.mark.wizard
class TestLoadstarApp:
    """Drive the app with simulated key presses."""

    @pytest.mark.asyncio
    async def test_starts_on_boot(self) -> None:
        """Test the app renders the boot screen."""
        app = make_app()

        async with app.run_test(size=(120, 40)) as pilot:
            assert pilot.app.query_one("#wizard") is not None
            assert app.controller.phase is Phase.BOOT

    @pytest.mark.asyncio
    async def test_keys_reach_controller(self) -> None:
        """Test typing on the identity screen fills the name field."""
        app = make_app()

        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("space")
            assert app.controller.phase is Phase.IDENTITY

            await pilot.press("A", "d", "a")
            assert app.controller.session.identity.name == "Ada"

            await pilot.press("tab")
            assert app.controller.session.input_field == 1

    @pytest.mark.asyncio
    async def test_walk_to_review(self) -> None:
        """Test Enter moves through the form screens."""
        app = make_app()

        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("space", "enter", "enter", "enter", "enter")
            assert app.controller.phase is Phase.SHELL

            await pilot.press("enter", "enter", "d", "enter")
            assert app.controller.phase is Phase.REVIEW
            assert app.controller.session.show_details is False

            await pilot.press("escape")
            assert app.controller.phase is Phase.APPS

    @pytest.mark.asyncio
    async def test_ctrl_c_exits(self) -> None:
        """Test Ctrl+C outside an install quits the app."""
        app = make_app()

        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("space")
            await pilot.press("ctrl+c")
            assert app.controller.should_quit
