"""Garden claim API endpoints."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from sqlmodel import Session

from gardenauth.config import Settings, get_settings
from gardenauth.database import get_session
from gardenauth.services.garden_service import add_garden, remove_garden

router = APIRouter(tags=["gardens"])


@router.api_route("/addGarden", methods=["GET", "POST"], response_class=PlainTextResponse)
def add(
    token: str | None = Query(default=None),
    serial: str | None = Query(default=None),
    nickname: str | None = Query(default=None),
    session: Session = Depends(get_session),
    config: Settings = Depends(get_settings),
):
    """Claim a garden for the signed-in account."""
    add_garden(token, serial, nickname, session, config)
    return "success"


@router.api_route("/removeGarden", methods=["GET", "POST"], response_class=PlainTextResponse)
def remove(
    token: str | None = Query(default=None),
    serial: str | None = Query(default=None),
    session: Session = Depends(get_session),
    config: Settings = Depends(get_settings),
):
    """Release a garden owned by the signed-in account."""
    remove_garden(token, serial, session, config)
    return "success"
