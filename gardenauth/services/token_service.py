"""Device authentication and key provisioning.

A controller is provisioned out-of-band with ``derive_key(serial)``. It then
trades serial + key for a short-lived token. Tokens are cached on the garden
record and handed out again until they get close to expiry.
"""

import logging
import re
import time
from dataclasses import dataclass

from sqlmodel import Session

from gardenauth.config import Settings
from gardenauth.errors import InvalidSerial, MissingParameter, WrongKey, WrongPassword
from gardenauth.services.registry import get_garden, save_token
from gardenauth.utils.security import derive_key, issue_token, keys_match

logger = logging.getLogger(__name__)

SERIAL_PATTERN = re.compile(r"[a-z0-9]{2,24}")

DEVICE_SUBJECT_PREFIX = "garden_"


@dataclass
class DeviceToken:
    token: str
    seconds_left: int
    cached: bool

    def render(self, annotated: bool) -> str:
        if not annotated:
            return self.token
        return f"{self.token}:{self.seconds_left}:{'cached' if self.cached else 'new'}"


def _now() -> int:
    return int(time.time())


def is_valid_serial(serial: str) -> bool:
    return SERIAL_PATTERN.fullmatch(serial) is not None


def request_new_token(
    serial: str | None,
    key: str | None,
    session: Session,
    config: Settings,
) -> DeviceToken:
    """Authenticate a controller and return its current token.

    Raises MissingParameter, InvalidSerial or WrongKey.
    """
    if not serial or not key:
        raise MissingParameter()

    if not is_valid_serial(serial):
        raise InvalidSerial()

    if not keys_match(key, derive_key(serial, config.signing_key)):
        logger.warning("Rejected key for IoT controller %s", serial)
        raise WrongKey()

    logger.info("Authentication for IoT controller %s successful", serial)

    now = _now()
    garden = get_garden(serial, session)

    if garden and garden.last_token and garden.last_token_time is not None:
        age = now - garden.last_token_time
        if age < config.token_refresh_threshold_seconds:
            return DeviceToken(
                token=garden.last_token,
                seconds_left=config.token_lifetime_seconds - age,
                cached=True,
            )

    token = issue_token(
        f"{DEVICE_SUBJECT_PREFIX}{serial}",
        {"iotDevice": True},
        config,
        issued_at=now,
    )
    save_token(serial, token, now, session)
    logger.info("Issued new token for IoT controller %s", serial)

    return DeviceToken(
        token=token,
        seconds_left=config.token_lifetime_seconds,
        cached=False,
    )


def sign_serial_number(serial: str | None, password: str | None, config: Settings) -> str:
    """Return the device key for ``serial`` to an operator holding the admin password."""
    if not serial or not password:
        raise MissingParameter()

    if not keys_match(password, config.admin_password):
        logger.warning("Rejected admin password while signing serial %s", serial)
        raise WrongPassword()

    unique_key = derive_key(serial, config.signing_key)
    logger.info("Created a key for serial number %s", serial)
    return unique_key
