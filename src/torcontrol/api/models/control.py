"""
Request and response models for control endpoints.

Every response wraps its payload in a "data" field.
"""

from pydantic import BaseModel, Field


class ProtocolInfoData(BaseModel):
    """PROTOCOLINFO result."""

    version: str
    auth_methods: list[str]
    cookie_file: str


class ProtocolInfoResponse(BaseModel):
    """Response for GET /protocolinfo."""

    data: ProtocolInfoData


class InfoData(BaseModel):
    """GETINFO result."""

    values: dict[str, str]
    count: int


class InfoResponse(BaseModel):
    """Response for GET /info."""

    data: InfoData


class ClientAuthInfo(BaseModel):
    """Client credentials for an onion service."""

    name: str
    blob: str


class OnionRequest(BaseModel):
    """Request body for POST /onions."""

    port: int = Field(ge=1, le=65535)
    target: str | None = None
    key_type: str = "BEST"
    key: str | None = Field(default=None, description="Existing private key blob")
    discard_pk: bool = False


class OnionData(BaseModel):
    """A created onion service."""

    service_id: str
    onion_address: str
    key_type: str
    private_key: str | None = None
    client_auth: list[ClientAuthInfo] = Field(default_factory=list)


class OnionResponse(BaseModel):
    """Response for POST /onions."""

    data: OnionData


class StatusData(BaseModel):
    """Result of a command with no payload."""

    ok: bool = True
    detail: str


class StatusResponse(BaseModel):
    """Response for commands that only acknowledge."""

    data: StatusData
