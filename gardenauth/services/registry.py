"""Device registry: garden records keyed by serial number."""

from sqlalchemy import or_, update
from sqlmodel import Session, col, select

from gardenauth.models.garden import Garden


def get_garden(serial: str, session: Session) -> Garden | None:
    return session.get(Garden, serial)


def nicknames_for(serials: list[str], session: Session) -> dict[str, str | None]:
    """Map each existing serial in ``serials`` to its nickname."""
    if not serials:
        return {}
    gardens = session.exec(
        select(Garden).where(col(Garden.serial).in_(serials))
    ).all()
    return {g.serial: g.nickname for g in gardens}


def save_token(serial: str, token: str, issued_at: int, session: Session) -> Garden:
    """Record a newly issued device token, creating the garden on first contact."""
    garden = session.get(Garden, serial)
    if not garden:
        garden = Garden(serial=serial)

    garden.last_token = token
    garden.last_token_time = issued_at
    session.add(garden)
    session.commit()
    session.refresh(garden)
    return garden


def claim_garden(serial: str, account_id: str, nickname: str, session: Session) -> bool:
    """Assign ``serial`` to ``account_id``.

    The write only applies while the garden is unclaimed or already owned by
    the same account. Returns False when another account got there first.
    """
    gardens = Garden.__table__
    stmt = (
        update(gardens)
        .where(
            gardens.c.serial == serial,
            or_(gardens.c.claimed_by.is_(None), gardens.c.claimed_by == account_id),
        )
        .values(claimed_by=account_id, nickname=nickname)
    )
    result = session.connection().execute(stmt)
    session.commit()
    return result.rowcount == 1


def release_garden(garden: Garden, session: Session) -> None:
    garden.claimed_by = None
    garden.nickname = None
    session.add(garden)
    session.commit()
