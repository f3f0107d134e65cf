"""
Tests for session state helpers, the confirmation dialog flow and the UI
formatters.

st.session_state is replaced with a plain dict (see the fake_session_state
fixture), so no Streamlit runtime is needed.
"""
import pytest
from unittest.mock import Mock, patch

from domain.enums import MarketViolation, RowState, SubgroupField, SubgroupViolation
from domain.models import Region
from services.subgroup_row_service import DELETE_CONFIRM_MESSAGE, SubgroupRowSet
from state.session_state import scoped_key, ss_clear, ss_clear_scope, ss_get, ss_has, ss_init, ss_set
from ui.confirm import DialogConfirmation
from ui.formatters import (
    format_market_violations,
    format_page_caption,
    format_region_label,
    format_subgroup_codes,
    format_violations,
    get_row_state_badge,
)


class TestSessionState:
    def test_scoped_key(self):
        assert scoped_key("edit-4", "row-2", "code") == "edit-4:row-2:code"

    def test_get_set_init_clear(self, fake_session_state):
        ss_init({"a": 1, "b": None})
        ss_init({"a": 2})
        assert ss_get("a") == 1
        assert ss_get("b", "default") == "default"
        assert ss_has("a") is True
        assert ss_has("a", "b") is False

        ss_set("a", 3)
        ss_clear("a", "missing")
        assert "a" not in fake_session_state

    def test_clear_scope(self, fake_session_state):
        ss_set(scoped_key("create", "name"), "x")
        ss_set(scoped_key("create", "row-1", "code"), "A")
        ss_set(scoped_key("edit-4", "name"), "y")

        ss_clear_scope("create")
        assert list(fake_session_state) == ["edit-4:name"]


class TestServiceRegistry:
    def test_factory_runs_once_per_session(self, fake_session_state):
        from state.service_registry import get_service

        factory = Mock(side_effect=lambda: object())
        first = get_service("market_repository", factory)
        assert get_service("market_repository", factory) is first
        factory.assert_called_once()

    def test_register_has_and_clear(self, fake_session_state):
        from state.service_registry import clear_services, has_service, register_service

        register_service("a", 1)
        register_service("b", 2)
        clear_services("a")
        assert has_service("a") is False
        assert has_service("b") is True

        clear_services()
        assert has_service("b") is False


class TestDialogConfirmation:
    def test_first_pass_records_pending_and_rejects(self, fake_session_state):
        confirmation = DialogConfirmation("create")
        row_set = SubgroupRowSet(confirm=confirmation)
        row_set.initialize("BB")

        result = confirmation.run(lambda: row_set.delete_row(0))

        assert result is False
        assert row_set.rows[0].marked_deleted is False
        assert confirmation.pending_message == DELETE_CONFIRM_MESSAGE

    def test_accept_replays_action(self, fake_session_state):
        confirmation = DialogConfirmation("create")
        row_set = SubgroupRowSet(confirm=confirmation)
        row_set.initialize("BB")
        confirmation.run(lambda: row_set.delete_row(0))

        assert confirmation.accept() is True
        assert row_set.rows[0].marked_deleted is True
        assert confirmation.pending_message is None

    def test_reject_discards_request(self, fake_session_state):
        confirmation = DialogConfirmation("create")
        row_set = SubgroupRowSet(confirm=confirmation)
        row_set.initialize("BB")
        confirmation.run(lambda: row_set.delete_row(0))

        confirmation.reject()
        assert confirmation.pending_message is None
        assert confirmation.accept() is None
        assert row_set.rows[0].marked_deleted is False

    def test_action_without_confirmation_is_not_kept(self, fake_session_state):
        confirmation = DialogConfirmation("create")
        action = Mock(return_value="done")

        assert confirmation.run(action) == "done"
        assert confirmation.pending_message is None
        assert confirmation.accept() is None
        action.assert_called_once()

    def test_scopes_are_independent(self, fake_session_state):
        create = DialogConfirmation("create")
        edit = DialogConfirmation("edit-4")
        create("Sure?")

        assert create.pending_message == "Sure?"
        assert edit.pending_message is None


class TestFormStateScopes:
    def test_form_scope(self):
        from state.form_state import form_scope

        assert form_scope(None) == "create"
        assert form_scope(4) == "edit-4"

    def test_open_edit_form_resets_session(self, fake_session_state):
        from state.form_state import current_form_market_id, open_create_form, open_edit_form

        fake_session_state["market_form_service:edit-4"] = object()
        fake_session_state["edit-4:name"] = "stale"

        open_edit_form(4)
        assert "market_form_service:edit-4" not in fake_session_state
        assert "edit-4:name" not in fake_session_state
        assert current_form_market_id() == 4

        open_create_form()
        assert current_form_market_id() is None

    def test_get_form_service_is_kept_per_scope(self, fake_session_state):
        from state.form_state import get_form_service

        service = Mock()
        with patch("services.market_form_service.MarketFormService", return_value=service) as mock_cls, \
                patch("repositories.get_market_repository"), \
                patch("repositories.get_subgroup_repository"), \
                patch("repositories.get_region_repository"):
            assert get_form_service(4) is service
            assert get_form_service(4) is service

        mock_cls.assert_called_once()
        service.start_edit.assert_called_once_with(4)


class TestFormatters:
    def test_region_label(self):
        assert format_region_label(Region(1, "Europe")) == "EURO - Europe"
        assert format_region_label(Region(8, "Antarctica")) == "Antarctica"

    def test_subgroup_codes(self, sample_market):
        assert format_subgroup_codes(sample_market) == "BBA BBB"

    def test_violations_by_field(self):
        found = {SubgroupViolation.REQUIRED_NAME, SubgroupViolation.DUPLICATE_CODE}
        assert format_violations(found, SubgroupField.SUBGROUP_NAME) == "Subgroup name is required."
        assert format_violations(found, SubgroupField.SUBGROUP_CODE) == "Subgroup code already exists for this market."
        assert format_violations(frozenset()) == ""

    def test_market_violations_are_ordered(self):
        messages = format_market_violations({MarketViolation.REQUIRED_REGION, MarketViolation.REQUIRED_NAME})
        assert messages == ["Market name is required.", "Region is required."]

    def test_row_state_badge(self):
        assert get_row_state_badge(RowState.DELETED) == ("Deleted", "red")
        assert all(get_row_state_badge(state) for state in RowState)

    @pytest.mark.parametrize("page,size,total,expected", [
        (0, 10, 42, "Showing 1 to 10 of 42 markets"),
        (4, 10, 42, "Showing 41 to 42 of 42 markets"),
        (0, 10, 0, "No markets found"),
    ])
    def test_page_caption(self, page, size, total, expected):
        assert format_page_caption(page, size, total) == expected
