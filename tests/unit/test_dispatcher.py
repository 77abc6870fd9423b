"""
Action dispatcher tests: security gate, branches and error envelopes.
"""

import pytest

from core.errors import ErrorCode
from core.models.envelope import RequestEnvelope
from exceptions import DomainError
from flyout import ActionDispatcher, CallbackHandler, Panel, PanelRegistry, RequestContext
from flyout.dispatcher import parse_item_id
from exceptions import ValidationError
from tests.factories.flyout_factories import (
    LoadOnlyHandler,
    RecordingHandler,
    make_context,
    make_flyout_config,
    make_issuer,
)


@pytest.fixture
def issuer():
    return make_issuer()


@pytest.fixture
def handler():
    return RecordingHandler(row_markup=lambda item_id: f'<tr data-id="{item_id}"><td>row</td></tr>')


@pytest.fixture
def registry(handler):
    registry = PanelRegistry(make_flyout_config())
    Panel("editor", "Editor", action_prefix="things", handler=handler, registry=registry, config=make_flyout_config())
    return registry


@pytest.fixture
def dispatcher(registry, issuer):
    return ActionDispatcher(registry, issuer, make_flyout_config())


def _request(issuer, action, token=None, **payload):
    return RequestEnvelope(
        action=action,
        token=issuer.issue("things") if token is None else token,
        payload=payload,
    )


class TestSecurityGate:

    @pytest.mark.parametrize("action", ["things_load", "things_save", "things_delete"])
    def test_bad_token_rejected_before_callback(self, dispatcher, issuer, handler, action):
        response = dispatcher.dispatch(_request(issuer, action, token="forged", id="3", name="x"), make_context())
        assert response.ok is False
        assert response.error == "Security check failed"
        assert response.error_code == ErrorCode.AUTHENTICATION_FAILED
        assert handler.count() == 0

    def test_token_of_other_prefix_rejected(self, dispatcher, issuer, handler):
        request = RequestEnvelope(action="things_load", token=issuer.issue("other"))
        response = dispatcher.dispatch(request, make_context())
        assert response.error_code == ErrorCode.AUTHENTICATION_FAILED
        assert handler.count() == 0

    @pytest.mark.parametrize("action", ["things_load", "things_save", "things_delete"])
    def test_missing_capability_rejected(self, dispatcher, issuer, handler, action):
        response = dispatcher.dispatch(_request(issuer, action, id="3"), make_context("read"))
        assert response.ok is False
        assert response.error == "Insufficient permissions"
        assert response.error_code == ErrorCode.AUTHORIZATION_FAILED
        assert handler.count() == 0

    def test_missing_context_has_no_capabilities(self, dispatcher, issuer, handler):
        response = dispatcher.dispatch(_request(issuer, "things_load"))
        assert response.error_code == ErrorCode.AUTHORIZATION_FAILED

    def test_unknown_action(self, dispatcher, issuer, handler):
        response = dispatcher.dispatch(_request(issuer, "things_publish"), make_context())
        assert response.error_code == ErrorCode.INVALID_ACTION
        assert handler.count() == 0


class TestLoad:

    def test_load_returns_markup_and_client_config(self, dispatcher, issuer, handler):
        response = dispatcher.dispatch(_request(issuer, "things_load", id="5"), make_context())
        assert response.ok is True
        assert 'data-flyout-id="editor"' in response.data["markup"]
        assert "<p>loaded</p>" in response.data["markup"]
        assert response.data["clientConfig"]["ui"]["closeOnSave"] is True
        assert handler.calls == [("load", {"id": "5"})]

    def test_load_domain_error_returned(self, dispatcher, issuer, handler):
        handler.load_result = DomainError("Record not found")
        response = dispatcher.dispatch(_request(issuer, "things_load"), make_context())
        assert response.ok is False
        assert response.error == "Record not found"
        assert response.error_code == ErrorCode.DOMAIN_ERROR

    def test_load_domain_error_raised(self, issuer):
        registry = PanelRegistry(make_flyout_config())

        def load(panel, request):
            raise DomainError("Gone")

        Panel("p", action_prefix="things", handler=CallbackHandler(load), registry=registry, config=make_flyout_config())
        response = ActionDispatcher(registry, issuer).dispatch(_request(issuer, "things_load"), make_context())
        assert response.error == "Gone"

    def test_panel_without_handler_not_configured(self, issuer):
        registry = PanelRegistry(make_flyout_config())
        Panel("p", action_prefix="things", registry=registry, config=make_flyout_config())
        response = ActionDispatcher(registry, issuer).dispatch(_request(issuer, "things_load"), make_context())
        assert response.error_code == ErrorCode.NOT_CONFIGURED


class TestSave:

    def test_save_success(self, dispatcher, issuer, handler):
        handler.save_result = 42
        response = dispatcher.dispatch(_request(issuer, "things_save", name="Widget"), make_context())
        assert response.ok is True
        assert response.data == {
            "id": 42,
            "message": "Saved successfully",
            "rowMarkup": '<tr data-id="42"><td>row</td></tr>',
        }
        assert handler.calls == [("save", {"name": "Widget"})]

    def test_row_markup_omitted_when_empty(self, issuer):
        registry = PanelRegistry(make_flyout_config())
        handler = RecordingHandler(save_result=7, row_markup=lambda item_id: "")
        Panel("p", action_prefix="things", handler=handler, registry=registry, config=make_flyout_config())
        response = ActionDispatcher(registry, issuer).dispatch(_request(issuer, "things_save"), make_context())
        assert response.ok is True
        assert "rowMarkup" not in response.data

    def test_save_domain_error(self, dispatcher, issuer, handler):
        handler.save_result = DomainError("Name is required")
        response = dispatcher.dispatch(_request(issuer, "things_save"), make_context())
        assert response.ok is False
        assert response.error == "Name is required"
        assert response.error_code == ErrorCode.DOMAIN_ERROR

    def test_save_not_supported(self, issuer):
        registry = PanelRegistry(make_flyout_config())
        Panel("p", action_prefix="things", handler=LoadOnlyHandler(), registry=registry, config=make_flyout_config())
        response = ActionDispatcher(registry, issuer).dispatch(_request(issuer, "things_save"), make_context())
        assert response.error == "Save not configured"
        assert response.error_code == ErrorCode.NOT_CONFIGURED

    def test_save_returning_none_is_unexpected(self, dispatcher, issuer, handler):
        handler.save_result = None
        response = dispatcher.dispatch(_request(issuer, "things_save"), make_context())
        assert response.ok is False
        assert response.error_code == ErrorCode.UNEXPECTED_ERROR

    def test_unexpected_exception_never_propagates(self, dispatcher, issuer, handler):
        handler.save_result = RuntimeError("database exploded")
        response = dispatcher.dispatch(_request(issuer, "things_save"), make_context())
        assert response.ok is False
        assert response.error_code == ErrorCode.UNEXPECTED_ERROR
        assert "exploded" not in response.error


class TestDelete:

    def test_delete_success(self, dispatcher, issuer, handler):
        response = dispatcher.dispatch(_request(issuer, "things_delete", id="9"), make_context())
        assert response.ok is True
        assert response.data == {"id": 9, "message": "Deleted successfully"}
        assert handler.calls == [("delete", 9)]

    @pytest.mark.parametrize("bad_id", [None, "", "0", "-3", "abc", "1.5"])
    def test_delete_requires_positive_integer(self, dispatcher, issuer, handler, bad_id):
        payload = {} if bad_id is None else {"id": bad_id}
        response = dispatcher.dispatch(_request(issuer, "things_delete", **payload), make_context())
        assert response.ok is False
        assert response.error_code == ErrorCode.INVALID_PARAMETER
        assert handler.count("delete") == 0

    def test_delete_domain_error(self, dispatcher, issuer, handler):
        handler.delete_result = DomainError("Record not found")
        response = dispatcher.dispatch(_request(issuer, "things_delete", id="9"), make_context())
        assert response.error == "Record not found"

    def test_delete_false_is_domain_failure(self, dispatcher, issuer, handler):
        handler.delete_result = False
        response = dispatcher.dispatch(_request(issuer, "things_delete", id="9"), make_context())
        assert response.ok is False
        assert response.error == "Delete failed"
        assert response.error_code == ErrorCode.DOMAIN_ERROR

    def test_delete_not_supported(self, issuer):
        registry = PanelRegistry(make_flyout_config())
        Panel("p", action_prefix="things", handler=LoadOnlyHandler(), registry=registry, config=make_flyout_config())
        response = ActionDispatcher(registry, issuer).dispatch(
            _request(issuer, "things_delete", id="1"), make_context()
        )
        assert response.error == "Delete not configured"


class TestActionTable:

    def test_reregistered_id_answers_only_to_latest_prefix(self, issuer):
        registry = PanelRegistry(make_flyout_config())
        Panel("p", action_prefix="old", handler=LoadOnlyHandler(), registry=registry, config=make_flyout_config())
        Panel("p", action_prefix="new", handler=LoadOnlyHandler(), registry=registry, config=make_flyout_config())
        dispatcher = ActionDispatcher(registry, issuer)

        assert set(dispatcher.action_table()) == {"new_load", "new_save", "new_delete"}
        stale = dispatcher.dispatch(RequestEnvelope(action="old_load", token=issuer.issue("old")), make_context())
        assert stale.error_code == ErrorCode.INVALID_ACTION
        fresh = dispatcher.dispatch(RequestEnvelope(action="new_load", token=issuer.issue("new")), make_context())
        assert fresh.ok is True

    def test_context_capability_check(self):
        context = RequestContext(capabilities=frozenset({"a"}))
        assert context.can("a")
        assert not context.can("b")


class TestParseItemId:

    @pytest.mark.parametrize("value,expected", [("1", 1), (5, 5), (" 12 ", 12)])
    def test_valid(self, value, expected):
        assert parse_item_id(value) == expected

    @pytest.mark.parametrize("value", [True, False, 0, -1, "x", None, 2.5])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_item_id(value)
