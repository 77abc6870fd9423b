"""
HTTP entry point for remote actions.

Parses a form-encoded or JSON request body into a RequestEnvelope, asks the
host for the caller's RequestContext and a dispatcher, dispatches, and
returns the JSON envelope. The HTTP status is derived from the envelope's
error code (200 on success and for domain errors).

Exports:
    FlyoutAjaxTrigger: Azure Functions HTTP trigger for POST /api/flyout
    parse_request_fields: Flatten a request body into a dict
"""

from dataclasses import replace
from typing import Any, Callable, Dict
from urllib.parse import parse_qs
import json
import logging
import uuid

import azure.functions as func

from config.defaults import MessageDefaults
from core.errors import ErrorClassification, ErrorCode, get_error_classification, get_http_status_code
from core.models.envelope import RequestEnvelope, ResponseEnvelope
from exceptions import ConfigurationError
from flyout.dispatcher import ActionDispatcher, RequestContext
from util_logger import LoggerFactory, ComponentType


ContextProvider = Callable[[func.HttpRequest], RequestContext]
DispatcherProvider = Callable[[func.HttpRequest, RequestContext], ActionDispatcher]

_COMPLETION_LOG_LEVELS = {
    ErrorClassification.SECURITY: logging.WARNING,
    ErrorClassification.CLIENT: logging.WARNING,
    ErrorClassification.DOMAIN: logging.INFO,
    ErrorClassification.SERVER: logging.ERROR,
}


def parse_request_fields(req: func.HttpRequest) -> Dict[str, Any]:
    """
    Flatten the request body into a dict.

    JSON bodies must be an object. Form bodies keep blank values; repeated
    keys become lists.

    Raises:
        ValueError: body is not a JSON object or not decodable
    """
    content_type = (req.headers.get("Content-Type") or "").lower()
    raw_body = req.get_body() or b""

    if "application/json" in content_type:
        try:
            body = json.loads(raw_body.decode("utf-8") or "{}")
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ValueError(f"Invalid JSON body: {e}")
        if not isinstance(body, dict):
            raise ValueError("JSON body must be an object")
        return body

    try:
        form_data = parse_qs(raw_body.decode("utf-8"), keep_blank_values=True)
    except UnicodeDecodeError as e:
        raise ValueError(f"Invalid form body: {e}")
    # Convert list values to single values
    return {k: v[0] if len(v) == 1 else v for k, v in form_data.items()}


class FlyoutAjaxTrigger:
    """
    HTTP trigger for the remote action surface.

    Args:
        context_provider: Builds the caller's RequestContext from the request
        dispatcher_provider: Builds the request-scoped dispatcher
    """

    def __init__(self, context_provider: ContextProvider, dispatcher_provider: DispatcherProvider):
        self.trigger_name = "flyout_ajax"
        self.context_provider = context_provider
        self.dispatcher_provider = dispatcher_provider
        self.logger = LoggerFactory.create_logger(ComponentType.TRIGGER, f"HttpTrigger.{self.trigger_name}")

    def handle_request(self, req: func.HttpRequest) -> func.HttpResponse:
        """
        Main entry point for remote action requests.

        Args:
            req: Azure Functions HTTP request object

        Returns:
            HTTP response with the JSON envelope
        """
        request_id = self._generate_request_id()
        self.logger.info(f"[{self.trigger_name}] Request {request_id} started: {req.method} {req.url}")

        if req.method != "POST":
            return self._create_response(
                ResponseEnvelope.failure(ErrorCode.INVALID_ACTION, f"Method {req.method} not allowed"),
                request_id,
                status_code=405,
            )

        try:
            envelope = RequestEnvelope.from_fields(parse_request_fields(req))
        except ValueError as e:
            self.logger.warning(f"[{self.trigger_name}] Client error: {e}")
            return self._create_response(
                ResponseEnvelope.failure(ErrorCode.INVALID_PARAMETER, MessageDefaults.INVALID_REQUEST),
                request_id,
            )

        try:
            context = self.context_provider(req)
            if context.request_id is None:
                context = replace(context, request_id=request_id)
            dispatcher = self.dispatcher_provider(req, context)
            response = dispatcher.dispatch(envelope, context)
        except ConfigurationError as e:
            self.logger.error(f"[{self.trigger_name}] Configuration error: {e}")
            response = ResponseEnvelope.failure(ErrorCode.CONFIG_ERROR, MessageDefaults.UNEXPECTED)
        except Exception as e:
            self.logger.exception(f"[{self.trigger_name}] Internal error: {e}")
            response = ResponseEnvelope.failure(ErrorCode.UNEXPECTED_ERROR, MessageDefaults.UNEXPECTED)

        self._log_completion(request_id, envelope.action, response)
        return self._create_response(response, request_id)

    # ========================================================================
    # PRIVATE INFRASTRUCTURE METHODS
    # ========================================================================

    def _log_completion(self, request_id: str, action: str, response: ResponseEnvelope) -> None:
        """Log the outcome at a level chosen by the failure classification."""
        level = logging.INFO
        if not response.ok:
            classification = get_error_classification(response.error_code or ErrorCode.UNEXPECTED_ERROR)
            level = _COMPLETION_LOG_LEVELS[classification]
        self.logger.log(
            level,
            f"[{self.trigger_name}] Request {request_id} completed: "
            f"action={action} ok={response.ok} code={response.code}",
        )

    def _generate_request_id(self) -> str:
        """Generate unique request ID for tracing."""
        return str(uuid.uuid4())[:8]

    def _create_response(self, envelope: ResponseEnvelope, request_id: str, status_code: int = None) -> func.HttpResponse:
        if status_code is None:
            status_code = 200 if envelope.ok else get_http_status_code(envelope.error_code or ErrorCode.UNEXPECTED_ERROR)
        return func.HttpResponse(
            json.dumps(envelope.to_wire(), default=str),
            status_code=status_code,
            mimetype="application/json",
            headers={"X-Request-ID": request_id},
        )
