"""Account token API endpoints."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from sqlmodel import Session

from gardenauth.config import Settings, get_settings
from gardenauth.database import get_session
from gardenauth.services.accounts import refresh_account_token

router = APIRouter(tags=["auth"])


@router.api_route("/refreshToken", methods=["GET", "POST"], response_class=PlainTextResponse)
def refresh_token(
    token: str | None = Query(default=None),
    session: Session = Depends(get_session),
    config: Settings = Depends(get_settings),
):
    """Reissue an account token so it carries the current claimedGardens."""
    return refresh_account_token(token, session, config)
