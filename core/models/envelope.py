"""
Remote Action Wire Models.

Request and response envelopes exchanged between the client runtime and the
action dispatcher. Serialized keys follow the wire contract (camelCase).

Exports:
    RequestEnvelope: Incoming remote action request
    ResponseEnvelope: Uniform {ok, data | error, code} response
    LoadData: Payload of a successful load
    SaveData: Payload of a successful save
    DeleteData: Payload of a successful delete
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..errors import ErrorCode, create_error_response


# Fields of a request body that are not part of the payload
RESERVED_REQUEST_FIELDS = ("action", "token")

ItemId = Union[int, str]


class RequestEnvelope(BaseModel):
    """
    Remote action request.

    The body carries `action` and `token`; every other field is free-form
    payload handed to the host callback.
    """

    model_config = ConfigDict(extra="forbid")

    action: str = Field(..., description="Remote action name ({prefix}_load|save|delete)")
    token: str = Field(default="", description="Prefix-scoped one-time token")
    payload: Dict[str, Any] = Field(default_factory=dict, description="Free-form request data")

    @classmethod
    def from_fields(cls, fields: Dict[str, Any]) -> "RequestEnvelope":
        """
        Build an envelope from a flat form/JSON body.

        Raises:
            ValueError: body has no action
        """
        action = fields.get("action")
        if not action:
            raise ValueError("Request body is missing 'action'")
        payload = {k: v for k, v in fields.items() if k not in RESERVED_REQUEST_FIELDS}
        return cls(action=str(action), token=str(fields.get("token") or ""), payload=payload)

    def to_fields(self) -> Dict[str, Any]:
        """Flatten back into a form body (payload keys cannot shadow action/token)."""
        fields = {k: v for k, v in self.payload.items() if k not in RESERVED_REQUEST_FIELDS}
        fields["action"] = self.action
        fields["token"] = self.token
        return fields


class ResponseEnvelope(BaseModel):
    """
    Uniform response: `{ok: true, data}` or `{ok: false, error, code}`.
    """

    ok: bool = Field(..., description="Whether the action succeeded")
    data: Optional[Dict[str, Any]] = Field(default=None, description="Success payload")
    error: Optional[str] = Field(default=None, description="Human-readable failure message")
    code: Optional[str] = Field(default=None, description="ErrorCode value on failure")

    @classmethod
    def success(cls, data: Optional[Union[BaseModel, Dict[str, Any]]] = None) -> "ResponseEnvelope":
        if isinstance(data, BaseModel):
            data = data.model_dump(by_alias=True, exclude_none=True)
        return cls(ok=True, data=data or {})

    @classmethod
    def failure(cls, error_code: ErrorCode, message: str) -> "ResponseEnvelope":
        return cls(**create_error_response(error_code, message))

    @property
    def error_code(self) -> Optional[ErrorCode]:
        """Parsed ErrorCode, None on success or for unknown codes."""
        if self.code is None:
            return None
        try:
            return ErrorCode(self.code)
        except ValueError:
            return None

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the wire shape, dropping absent keys."""
        return self.model_dump(exclude_none=True)


class _WireData(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoadData(_WireData):
    """Successful load: rendered markup plus the panel's client config."""

    markup: str
    client_config: Dict[str, Any] = Field(default_factory=dict)


class SaveData(_WireData):
    """Successful save: item id, message and optional replacement row markup."""

    id: ItemId
    message: str
    row_markup: Optional[str] = None


class DeleteData(_WireData):
    """Successful delete: item id and message."""

    id: ItemId
    message: str
