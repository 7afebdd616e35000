"""Device authentication & provisioning API endpoints."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from sqlmodel import Session

from gardenauth.config import Settings, get_settings
from gardenauth.database import get_session
from gardenauth.services.token_service import request_new_token, sign_serial_number

router = APIRouter(tags=["devices"])


@router.api_route("/requestNewToken", methods=["GET", "POST"], response_class=PlainTextResponse)
def request_token(
    serial: str | None = Query(default=None),
    key: str | None = Query(default=None),
    session: Session = Depends(get_session),
    config: Settings = Depends(get_settings),
):
    """Exchange a controller's serial and key for a short-lived token."""
    result = request_new_token(serial, key, session, config)
    return result.render(config.token_response_annotated)


@router.api_route("/signSerialNumber", methods=["GET", "POST"], response_class=PlainTextResponse)
def sign_serial(
    serial: str | None = Query(default=None),
    password: str | None = Query(default=None),
    config: Settings = Depends(get_settings),
):
    """Return the device key for a serial. Requires the admin password."""
    return sign_serial_number(serial, password, config)
