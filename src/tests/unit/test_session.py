"""Unit tests for the wizard session state machine."""

import pytest

from loadstar import catalog
from loadstar.wizard.phases import (
    MultiplexerChoice,
    Phase,
    PromptChoice,
    SetupType,
    ShellChoice,
)
from loadstar.wizard.session import Session


@pytest.mark.unit
class TestTransitions:
    """Test advance and go_back."""

    def test_advance_walks_every_phase(self) -> None:
        """Test advance visits phases in order and stops at Complete."""
        session = Session()
        visited = [session.phase]
        while session.advance():
            visited.append(session.phase)
        assert visited == Phase.all()

    def test_advance_at_complete_is_noop(self) -> None:
        """Test advance returns False and stays at Complete."""
        session = Session(phase=Phase.COMPLETE)
        assert session.advance() is False
        assert session.phase is Phase.COMPLETE

    def test_go_back_at_boot(self) -> None:
        """Test go_back returns False at Boot."""
        session = Session()
        assert session.go_back() is False
        assert session.phase is Phase.BOOT

    def test_go_back_from_identity_reaches_boot(self) -> None:
        """Test Identity can go back to Boot."""
        session = Session(phase=Phase.IDENTITY)
        assert session.go_back() is True
        assert session.phase is Phase.BOOT

    def test_go_back_from_shell(self) -> None:
        """Test Shell goes back to Identity."""
        session = Session(phase=Phase.SHELL)
        assert session.go_back() is True
        assert session.phase is Phase.IDENTITY

    def test_transition_resets_cursor_and_scroll(self) -> None:
        """Test entering a phase resets list position."""
        session = Session(phase=Phase.DEV_TOOLS, cursor=4, scroll=2)
        session.advance()
        assert (session.cursor, session.scroll) == (0, 0)


@pytest.mark.unit
class TestSelection:
    """Test item selection."""

    def test_toggle_twice_restores(self) -> None:
        """Test toggling an item twice restores membership."""
        session = Session(selected={"jq"})
        session.toggle_item("jq")
        assert not session.is_selected("jq")
        session.toggle_item("jq")
        assert session.is_selected("jq")

    def test_get_selected_in_catalog_order(self) -> None:
        """Test selected entries come back in catalog order."""
        session = Session(selected={"jq", "zsh", "ripgrep"})
        ids = [entry.id for entry in session.get_selected()]
        assert ids == ["zsh", "ripgrep", "jq"]

    def test_select_and_deselect_all(self) -> None:
        """Test bulk selection over a category."""
        session = Session()
        languages = catalog.by_category(catalog.Category.LANGUAGE)
        session.select_all(languages)
        assert session.selected_count() == len(languages)
        session.deselect_all(languages)
        assert session.selected_count() == 0

    def test_estimated_minutes(self) -> None:
        """Test estimate is five minutes plus one per item."""
        assert Session(selected={"jq", "fd"}).estimated_install_minutes() == 7

    def test_create_preselects_essentials(self) -> None:
        """Test essentials and extras start selected."""
        session = Session.create(extra_selected=["lazygit"])
        assert session.is_selected("git")
        assert session.is_selected("zsh")
        assert session.is_selected("lazygit")
        assert not session.is_selected("ollama")

    def test_create_keeps_extras_over_last_run(self) -> None:
        """Test a saved selection does not drop the configured extras."""
        session = Session.create(extra_selected=["lazygit"], last_run={"selected": ["zsh"]})
        assert session.selected == {"zsh", "lazygit"}

    def test_snapshot_is_independent(self) -> None:
        """Test mutating the snapshot leaves the live session alone."""
        session = Session(selected={"jq"})
        snapshot = session.snapshot()
        snapshot.selected.add("fd")
        snapshot.identity.name = "changed"
        assert session.selected == {"jq"}
        assert session.identity.name == ""


@pytest.mark.unit
class TestSavedRun:
    """Test saving and restoring answers."""

    def test_to_saved_uses_enum_names(self) -> None:
        """Test choices are stored by name."""
        session = Session(selected={"jq", "fd"})
        session.identity.setup_type = SetupType.WORK
        session.shell_config.multiplexer = None
        saved = session.to_saved()
        assert saved["setup_type"] == "WORK"
        assert saved["shell"] == "ZSH"
        assert saved["multiplexer"] is None
        assert saved["selected"] == ["fd", "jq"]

    def test_apply_saved(self) -> None:
        """Test saved values replace defaults."""
        session = Session()
        session.apply_saved(
            {
                "name": "Ada",
                "email": "ada@example.com",
                "shell": "FISH",
                "prompt": "PURE",
                "multiplexer": "ZELLIJ",
                "selected": ["jq"],
            }
        )
        assert session.identity.name == "Ada"
        assert session.shell_config.shell is ShellChoice.FISH
        assert session.shell_config.prompt is PromptChoice.PURE
        assert session.shell_config.multiplexer is MultiplexerChoice.ZELLIJ
        assert session.selected == {"jq"}

    def test_apply_saved_ignores_unknown_values(self) -> None:
        """Test unknown enum names and catalog ids are dropped."""
        session = Session()
        session.apply_saved({"shell": "CSH", "selected": ["jq", "not-a-tool"], "email": 42})
        assert session.shell_config.shell is ShellChoice.ZSH
        assert session.selected == {"jq"}
        assert session.identity.email == ""
