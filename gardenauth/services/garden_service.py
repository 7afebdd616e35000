"""Garden claim/release business logic.

An account owns a garden when the garden record's ``claimed_by`` points at
it. The account also carries the list of its serials in the claimedGardens
custom claim; the two are updated separately and may briefly disagree.
"""

import logging
import time

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from gardenauth.config import Settings
from gardenauth.errors import (
    GardenAlreadyClaimed,
    GardenNicknameConflict,
    GardenNotClaimed,
    GardenNotFound,
    MissingParameter,
    StorageError,
    TooManyGardens,
)
from gardenauth.services.accounts import set_claimed_gardens, verify_account_token
from gardenauth.services.registry import (
    claim_garden,
    get_garden,
    nicknames_for,
    release_garden,
)
from gardenauth.utils.security import VerifiedToken

logger = logging.getLogger(__name__)


def _now() -> int:
    return int(time.time())


def _claimed_serials(verified: VerifiedToken) -> list[str]:
    serials = verified.claims.get("claimedGardens") or []
    if not isinstance(serials, list):
        return []
    return [s for s in serials if isinstance(s, str)]


def _normalize_serial(serial: str) -> str:
    return serial.strip().lower()


def add_garden(
    token: str | None,
    serial: str | None,
    nickname: str | None,
    session: Session,
    config: Settings,
) -> None:
    """Claim a garden for the account behind ``token``."""
    if not token or not serial or not nickname:
        raise MissingParameter()

    serial = _normalize_serial(serial)
    nickname = nickname.strip()
    if not serial or not nickname:
        raise MissingParameter()

    verified = verify_account_token(token, config)
    account_id = verified.subject
    claimed = _claimed_serials(verified)

    if len(claimed) >= config.max_gardens_per_account:
        raise TooManyGardens()

    try:
        others = [s for s in claimed if s != serial]
        for other, other_nickname in nicknames_for(others, session).items():
            if other_nickname == nickname:
                raise GardenNicknameConflict(f"{other} is already called {nickname!r}")

        garden = get_garden(serial, session)
        if not garden:
            raise GardenNotFound()

        now = _now()
        if garden.last_sync_time is None or now - garden.last_sync_time > config.sync_grace_seconds:
            logger.warning(
                "Garden %s has not synced in the last %ds, allowing claim by %s",
                serial, config.sync_grace_seconds, account_id,
            )

        if garden.claimed_by and garden.claimed_by != account_id:
            raise GardenAlreadyClaimed()

        if not claim_garden(serial, account_id, nickname, session):
            raise GardenAlreadyClaimed()

        set_claimed_gardens(account_id, others + [serial], session)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Storage error while %s claimed garden %s", account_id, serial)
        raise StorageError(str(e)) from e

    logger.info("Garden %s claimed by %s as %r", serial, account_id, nickname)


def remove_garden(
    token: str | None,
    serial: str | None,
    session: Session,
    config: Settings,
) -> None:
    """Release a garden owned by the account behind ``token``."""
    if not token or not serial:
        raise MissingParameter()

    serial = _normalize_serial(serial)
    if not serial:
        raise MissingParameter()

    verified = verify_account_token(token, config)
    account_id = verified.subject

    try:
        garden = get_garden(serial, session)
        if not garden:
            raise GardenNotFound()

        # Drop the serial from the account even if it turns out not to own it.
        remaining = [s for s in _claimed_serials(verified) if s != serial]
        set_claimed_gardens(account_id, remaining, session)

        if garden.claimed_by != account_id:
            raise GardenNotClaimed()

        release_garden(garden, session)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Storage error while %s released garden %s", account_id, serial)
        raise StorageError(str(e)) from e

    logger.info("Garden %s released by %s", serial, account_id)
