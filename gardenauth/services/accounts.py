"""Account records and their claimedGardens custom claim."""

import json
import logging

from sqlmodel import Session

from gardenauth.config import Settings
from gardenauth.errors import MissingParameter, TokenVerificationError
from gardenauth.models.account import Account
from gardenauth.utils.security import VerifiedToken, issue_token, verify_token

logger = logging.getLogger(__name__)


def get_or_create_account(account_id: str, session: Session) -> Account:
    account = session.get(Account, account_id)
    if not account:
        account = Account(id=account_id)
        session.add(account)
        session.flush()
    return account


def set_claimed_gardens(account_id: str, serials: list[str], session: Session) -> Account:
    """Replace the account's claimedGardens claim."""
    account = get_or_create_account(account_id, session)
    account.claimed_gardens = json.dumps(serials)
    session.add(account)
    session.commit()
    return account


def verify_account_token(token: str, config: Settings) -> VerifiedToken:
    """Verify a token that belongs to a person, not a garden controller."""
    verified = verify_token(token, config)
    if verified.claims.get("iotDevice"):
        raise TokenVerificationError("Device tokens cannot act as an account")
    return verified


def issue_account_token(account_id: str, session: Session, config: Settings) -> str:
    """Issue a sign-in token carrying the account's current custom claims.

    Claim changes only show up in tokens issued after them, so clients
    refresh their token after adding or removing a garden.
    """
    account = get_or_create_account(account_id, session)
    session.commit()
    return issue_token(account.id, account.custom_claims(), config)


def refresh_account_token(token: str | None, session: Session, config: Settings) -> str:
    """Trade a still-valid account token for one with up-to-date claims."""
    if not token:
        raise MissingParameter()

    verified = verify_account_token(token, config)
    new_token = issue_account_token(verified.subject, session, config)
    logger.info("Refreshed token for account %s", verified.subject)
    return new_token
