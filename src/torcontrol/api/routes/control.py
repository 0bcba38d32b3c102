"""
Control port API endpoints.

Each request opens its own authenticated control session and closes it when
the response is sent. Onion services created here are always detached, so
they survive the end of the request's connection.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import APIRouter, Depends, HTTPException, Query

from torcontrol import config, output
from torcontrol.api.models.control import (
    ClientAuthInfo,
    InfoData,
    InfoResponse,
    OnionData,
    OnionRequest,
    OnionResponse,
    ProtocolInfoData,
    ProtocolInfoResponse,
    StatusData,
    StatusResponse,
)
from torcontrol.control import (
    AddOnionFlag,
    AuthenticatedController,
    AuthMethodDisabled,
    ControllerError,
    ErrorReply,
    KeyType,
    Signal,
    connect_with_cookie,
    connect_with_password,
)

router = APIRouter(prefix="/api/v1", tags=["control"])


@contextmanager
def control_errors() -> Iterator[None]:
    """Translate control errors into HTTP errors."""
    try:
        yield
    except AuthMethodDisabled as e:
        raise HTTPException(status_code=403, detail=str(e)) from e
    except ErrorReply as e:
        raise HTTPException(status_code=502, detail=f"Tor replied {e.status}: {e.message}") from e
    except ControllerError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


def get_session() -> Iterator[AuthenticatedController]:
    """Open an authenticated session for one request."""
    address = config.get_address()
    timeout = config.get_timeout()
    password = config.get_password()
    output.verbose(f"API session to {address}")

    with control_errors():
        if password is not None:
            session = connect_with_password(password, address, timeout=timeout)
        else:
            session = connect_with_cookie(address, timeout=timeout)
    try:
        yield session
    finally:
        session.close()


@router.get("/protocolinfo", response_model=ProtocolInfoResponse)
def get_protocolinfo(
    session: AuthenticatedController = Depends(get_session),
) -> ProtocolInfoResponse:
    """Show the Tor version and advertised authentication methods."""
    info = session.protocol_info
    return ProtocolInfoResponse(
        data=ProtocolInfoData(
            version=info.version,
            auth_methods=[m.value for m in info.auth_methods],
            cookie_file=info.cookie_file,
        )
    )


@router.get("/info", response_model=InfoResponse)
def get_info(
    fields: str = Query(description="Comma-separated GETINFO keys"),
    session: AuthenticatedController = Depends(get_session),
) -> InfoResponse:
    """Query runtime information with GETINFO."""
    keys = [f.strip() for f in fields.split(",") if f.strip()]
    with control_errors():
        values = session.get_info(keys)
    return InfoResponse(data=InfoData(values=values, count=len(values)))


@router.post("/onions", response_model=OnionResponse)
def create_onion(
    request: OnionRequest,
    session: AuthenticatedController = Depends(get_session),
) -> OnionResponse:
    """Create a detached onion service."""
    flags = [AddOnionFlag.DETACH]
    if request.discard_pk:
        flags.append(AddOnionFlag.DISCARD_PK)

    with control_errors():
        key_type = KeyType(request.key_type)
        if request.key:
            service = session.add_onion_with_key(
                key_type, request.key, request.port, target=request.target, flags=flags
            )
        else:
            service = session.add_onion(
                request.port, key_type=key_type, target=request.target, flags=flags
            )

    return OnionResponse(
        data=OnionData(
            service_id=service.service_id.value,
            onion_address=service.onion_address,
            key_type=service.key_type.value,
            private_key=service.private_key,
            client_auth=[ClientAuthInfo(name=c.name, blob=c.blob) for c in service.client_auth],
        )
    )


@router.delete("/onions/{service_id}", response_model=StatusResponse)
def delete_onion(
    service_id: str,
    session: AuthenticatedController = Depends(get_session),
) -> StatusResponse:
    """Remove an onion service."""
    with control_errors():
        session.delete_onion(service_id.removesuffix(".onion"))
    return StatusResponse(data=StatusData(detail=f"Removed {service_id}"))


@router.post("/signal/{name}", response_model=StatusResponse)
def send_signal(
    name: str,
    session: AuthenticatedController = Depends(get_session),
) -> StatusResponse:
    """Send a signal to Tor."""
    with control_errors():
        signal = Signal.from_name(name)
        session.signal(signal)
    return StatusResponse(data=StatusData(detail=f"Sent {signal}"))
