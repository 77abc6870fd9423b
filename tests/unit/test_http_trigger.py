"""
HTTP entry point tests: body parsing, status codes and the function app wiring.
"""

import json
import logging
from urllib.parse import urlencode

import azure.functions as func
import pytest

from exceptions import ConfigurationError
from flyout import ActionDispatcher, Panel, PanelRegistry, make_ajax_handler
from flyout.http import parse_request_fields
from tests.factories.flyout_factories import (
    RecordingHandler,
    make_context,
    make_flyout_config,
    make_issuer,
)

TRIGGER_LOGGER = "trigger.HttpTrigger.flyout_ajax"


def _form_request(fields, method="POST"):
    return func.HttpRequest(
        method=method,
        url="/api/flyout",
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        body=urlencode(fields, doseq=True).encode("utf-8"),
    )


def _json_request(body):
    raw = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
    return func.HttpRequest(
        method="POST",
        url="/api/flyout",
        headers={"Content-Type": "application/json"},
        body=raw,
    )


def _decode(response: func.HttpResponse):
    return json.loads(response.get_body().decode("utf-8"))


@pytest.fixture
def issuer():
    return make_issuer()


@pytest.fixture
def handler():
    return RecordingHandler(save_result=3)


@pytest.fixture
def seen():
    return {}


@pytest.fixture
def ajax(issuer, handler, seen):
    registry = PanelRegistry(make_flyout_config())
    Panel("editor", action_prefix="things", handler=handler, registry=registry, config=make_flyout_config())

    def context_provider(req):
        return make_context()

    def dispatcher_provider(req, context):
        seen["context"] = context
        return ActionDispatcher(registry, issuer, make_flyout_config())

    return make_ajax_handler(context_provider, dispatcher_provider)


class TestParseRequestFields:

    def test_form_body_collapses_single_values(self):
        fields = parse_request_fields(_form_request({"action": "a", "tags": ["x", "y"], "empty": ""}))
        assert fields == {"action": "a", "tags": ["x", "y"], "empty": ""}

    def test_json_body(self):
        assert parse_request_fields(_json_request({"action": "a", "id": 4})) == {"action": "a", "id": 4}

    @pytest.mark.parametrize("body", [b"[1, 2]", b"{not json"])
    def test_json_must_be_object(self, body):
        with pytest.raises(ValueError):
            parse_request_fields(_json_request(body))


class TestFlyoutAjaxTrigger:

    def test_form_load_ok(self, ajax, issuer, handler):
        response = ajax(_form_request({"action": "things_load", "token": issuer.issue("things"), "id": "2"}))
        body = _decode(response)
        assert response.status_code == 200
        assert body["ok"] is True
        assert "markup" in body["data"]
        assert handler.calls == [("load", {"id": "2"})]
        assert response.headers["X-Request-ID"]

    def test_request_id_reaches_context(self, ajax, issuer, seen):
        response = ajax(_form_request({"action": "things_load", "token": issuer.issue("things")}))
        assert seen["context"].request_id == response.headers["X-Request-ID"]

    def test_json_save_ok(self, ajax, issuer):
        response = ajax(_json_request({"action": "things_save", "token": issuer.issue("things"), "name": "W"}))
        assert _decode(response)["data"]["id"] == 3

    def test_bad_token_is_403(self, ajax, handler):
        response = ajax(_form_request({"action": "things_save", "token": "nope"}))
        body = _decode(response)
        assert response.status_code == 403
        assert body == {"ok": False, "error": "Security check failed", "code": "AUTHENTICATION_FAILED"}
        assert handler.count() == 0

    def test_unknown_action_is_400(self, ajax):
        response = ajax(_form_request({"action": "nothing_here"}))
        assert response.status_code == 400
        assert _decode(response)["code"] == "INVALID_ACTION"

    def test_missing_action_is_400(self, ajax):
        response = ajax(_form_request({"token": "x"}))
        assert response.status_code == 400
        assert _decode(response)["code"] == "INVALID_PARAMETER"

    def test_invalid_delete_id_is_400(self, ajax, issuer):
        response = ajax(_form_request({"action": "things_delete", "token": issuer.issue("things"), "id": "0"}))
        assert response.status_code == 400

    def test_domain_error_is_200_envelope(self, ajax, issuer, handler):
        from exceptions import DomainError
        handler.save_result = DomainError("Name is required")
        response = ajax(_form_request({"action": "things_save", "token": issuer.issue("things")}))
        assert response.status_code == 200
        assert _decode(response)["ok"] is False

    def test_get_not_allowed(self, ajax):
        response = ajax(_form_request({}, method="GET"))
        assert response.status_code == 405

    def test_configuration_error_is_500(self):
        def dispatcher_provider(req, context):
            raise ConfigurationError("Token secret is empty")

        handle = make_ajax_handler(lambda req: make_context(), dispatcher_provider)
        response = handle(_form_request({"action": "things_load"}))
        assert response.status_code == 500
        assert _decode(response)["code"] == "CONFIG_ERROR"

    def test_completion_level_follows_classification(self, ajax, issuer, handler, caplog):
        from exceptions import DomainError
        handler.save_result = DomainError("Name is required")
        with caplog.at_level(logging.INFO, logger=TRIGGER_LOGGER):
            ajax(_form_request({"action": "things_load", "token": issuer.issue("things")}))
            ajax(_form_request({"action": "things_save", "token": "nope"}))
            ajax(_form_request({"action": "things_save", "token": issuer.issue("things")}))
        levels = [r.levelno for r in caplog.records if r.name == TRIGGER_LOGGER and "completed" in r.getMessage()]
        assert levels == [logging.INFO, logging.WARNING, logging.INFO]

    def test_server_failure_logged_as_error(self, caplog):
        def dispatcher_provider(req, context):
            raise ConfigurationError("Token secret is empty")

        handle = make_ajax_handler(lambda req: make_context(), dispatcher_provider)
        with caplog.at_level(logging.INFO, logger=TRIGGER_LOGGER):
            handle(_form_request({"action": "things_load"}))
        completed = [r for r in caplog.records if r.name == TRIGGER_LOGGER and "completed" in r.getMessage()]
        assert completed[0].levelno == logging.ERROR
        assert "code=CONFIG_ERROR" in completed[0].getMessage()


class TestFunctionApp:

    def test_request_context_from_headers(self):
        import function_app

        req = func.HttpRequest(
            method="POST",
            url="/api/flyout",
            headers={
                "X-Flyout-Capabilities": "manage_options, edit_posts,",
                "X-MS-CLIENT-PRINCIPAL-NAME": "ada@example.com",
            },
            body=b"",
        )
        context = function_app.request_context(req)
        assert context.capabilities == frozenset({"manage_options", "edit_posts"})
        assert context.user_id == "ada@example.com"

    def test_product_load_end_to_end(self):
        import function_app
        from flyout.tokens import HmacTokenIssuer

        token = HmacTokenIssuer.from_config("s-42").issue("products")
        req = func.HttpRequest(
            method="POST",
            url="/api/flyout",
            headers={
                "Content-Type": "application/x-www-form-urlencoded",
                "X-Flyout-Session": "s-42",
                "X-Flyout-Capabilities": "manage_options",
            },
            body=urlencode({"action": "products_load", "token": token}).encode("utf-8"),
        )
        response = function_app.flyout_handler(req)
        body = _decode(response)
        assert response.status_code == 200
        assert 'data-flyout-id="product-editor"' in body["data"]["markup"]
        assert body["data"]["clientConfig"]["isForm"] is True

    def test_token_bound_to_session(self):
        import function_app
        from flyout.tokens import HmacTokenIssuer

        token = HmacTokenIssuer.from_config("s-1").issue("products")
        req = func.HttpRequest(
            method="POST",
            url="/api/flyout",
            headers={
                "Content-Type": "application/x-www-form-urlencoded",
                "X-Flyout-Session": "s-2",
                "X-Flyout-Capabilities": "manage_options",
            },
            body=urlencode({"action": "products_load", "token": token}).encode("utf-8"),
        )
        assert function_app.flyout_handler(req).status_code == 403
