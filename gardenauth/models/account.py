"""Account model."""

import json
from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


class Account(SQLModel, table=True):
    __tablename__ = "accounts"

    id: str = Field(primary_key=True)  # identity provider uid
    claimed_gardens: str = "[]"  # JSON array of serials (claimedGardens custom claim)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def garden_serials(self) -> list[str]:
        return json.loads(self.claimed_gardens or "[]")

    def custom_claims(self) -> dict:
        return {"claimedGardens": self.garden_serials()}
